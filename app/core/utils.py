from decimal import Decimal, ROUND_HALF_UP, getcontext
from typing import List

getcontext().prec = 28
CENTS = Decimal("0.01")

# balances at or below one cent are rounding noise, not debt
EPSILON = Decimal("0.01")


def qround(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_decimal(value) -> Decimal:
    """
    Coerce ints, floats, strings and Decimals into Decimal.

    Floats go through str() so 0.1 stays 0.1 and not
    0.1000000000000000055511151231257827.
    """
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def split_evenly(amount, parts: int) -> List[Decimal]:
    """
    Split an amount into `parts` shares that always sum back to the amount.

    Works in whole cents: every share gets amount // parts cents and the
    first (amount mod parts) shares get one extra cent.

        split_evenly(Decimal("10.00"), 3) -> [3.34, 3.33, 3.33]
    """
    if parts <= 0:
        raise ValueError("Cannot split an amount among zero members")

    cents = int(qround(to_decimal(amount)) / CENTS)
    if cents < 0:
        raise ValueError("Cannot split a negative amount")

    base, remainder = divmod(cents, parts)

    return [
        (Decimal(base + (1 if i < remainder else 0)) * CENTS)
        for i in range(parts)
    ]
