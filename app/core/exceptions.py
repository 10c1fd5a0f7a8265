"""Errors raised by the settlement engine."""


class SettlementError(Exception):
    """Base exception for settlement computation errors."""

    pass


class InvariantViolationError(SettlementError):
    """Raised when input balances do not net out to zero."""

    def __init__(self, total, tolerance, message: str | None = None):
        self.total = total
        self.tolerance = tolerance
        super().__init__(
            message
            or f"Balances sum to {total}, expected 0 (tolerance {tolerance})"
        )
