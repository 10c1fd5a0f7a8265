import logging
from decimal import Decimal
from typing import Dict, Hashable, Iterable, List, Mapping, NamedTuple, Tuple, Union

from app.core.exceptions import InvariantViolationError
from app.core.utils import EPSILON, qround, to_decimal

logger = logging.getLogger(__name__)

BalanceInput = Union[Mapping[Hashable, Decimal], Iterable[Tuple[Hashable, Decimal]]]


class Transfer(NamedTuple):
    payer_id: Hashable
    receiver_id: Hashable
    amount: Decimal


def check_zero_sum(
    net_map: Mapping[Hashable, Decimal],
    epsilon: Decimal = EPSILON,
    strict: bool = False,
) -> bool:
    """
    Verify that balances net out to zero.

    Each participant may carry up to epsilon of rounding noise, so the
    tolerance grows with the number of balances.
    """
    total = sum(net_map.values(), Decimal("0"))
    tolerance = epsilon * max(len(net_map), 1)

    if abs(total) <= tolerance:
        return True

    if strict:
        raise InvariantViolationError(total, tolerance)

    logger.warning(
        "Balances sum to %s across %d members (tolerance %s); "
        "settlement plan will leave residual balances",
        total,
        len(net_map),
        tolerance,
    )
    return False


def _id_order(uid):
    # ids of one type compare natively; mixed types group by type name
    return (type(uid).__name__, uid)


# working fine
def simplify_debts(
    balances: BalanceInput,
    epsilon: Decimal = EPSILON,
    strict: bool = False,
) -> List[Transfer]:
    """
    Greedy debt simplification.

    Each round pairs the member who owes the most with the member who is
    owed the most, moves min(|debt|, credit) between them and drops any
    balance that lands within epsilon of zero. Ties on amount go to the
    smaller member id; ids of different types are grouped by type name.

    Returns transfers in the order they were produced. At most n - 1
    transfers are emitted for n non-zero balances.
    """
    net_map: Dict[Hashable, Decimal] = {
        uid: to_decimal(bal) for uid, bal in dict(balances).items()
    }

    check_zero_sum(net_map, epsilon=epsilon, strict=strict)

    working = {uid: bal for uid, bal in net_map.items() if abs(bal) > epsilon}
    transfers: List[Transfer] = []

    while True:
        debtors = sorted(
            ((uid, bal) for uid, bal in working.items() if bal < -epsilon),
            key=lambda x: (x[1], _id_order(x[0])),
        )
        creditors = sorted(
            ((uid, bal) for uid, bal in working.items() if bal > epsilon),
            key=lambda x: (-x[1], _id_order(x[0])),
        )

        if not debtors or not creditors:
            break

        debt_id, debt_bal = debtors[0]
        cred_id, cred_bal = creditors[0]

        pay_amt = qround(min(-debt_bal, cred_bal))
        transfers.append(Transfer(debt_id, cred_id, pay_amt))

        working[debt_id] = debt_bal + pay_amt
        working[cred_id] = cred_bal - pay_amt

        working = {uid: bal for uid, bal in working.items() if abs(bal) > epsilon}

    if working:
        logger.debug("Dropped unsettled residuals: %s", working)

    return transfers


def apply_transfers(
    balances: BalanceInput, transfers: Iterable[Transfer]
) -> Dict[Hashable, Decimal]:
    """Return the balances left over after every transfer is paid."""
    after = {uid: to_decimal(bal) for uid, bal in dict(balances).items()}

    for t in transfers:
        after[t.payer_id] = after.get(t.payer_id, Decimal("0")) + t.amount
        after[t.receiver_id] = after.get(t.receiver_id, Decimal("0")) - t.amount

    return after
