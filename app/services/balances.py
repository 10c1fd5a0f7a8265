from decimal import Decimal
from typing import Dict, Hashable, Iterable, List, Mapping

from app.core.utils import EPSILON, qround, to_decimal
from app.schemas.balances import NetBalance


# working fine
def aggregate_balances(
    expenses: Iterable,
    epsilon: Decimal = EPSILON,
) -> Dict[Hashable, Decimal]:
    """
    Reduce a group's ledger into one signed balance per member.

    Works on anything shaped like an expense: LedgerExpense models or
    Expense rows with their shares loaded.

    Returns:
        {
            member_id: net_balance (Decimal, 2dp)
        }

    net_balance = amount paid - unpaid shares owed
    Settled expenses are skipped entirely, paid shares are skipped.
    """
    balances: Dict[Hashable, Decimal] = {}

    for exp in expenses:
        if exp.is_settled:
            continue

        # paid_by increases balance
        balances[exp.paid_by] = balances.get(exp.paid_by, Decimal("0")) + to_decimal(
            exp.amount
        )

        # unpaid shares decrease balance
        for share in exp.shares:
            if share.is_paid:
                continue
            balances[share.user_id] = balances.get(
                share.user_id, Decimal("0")
            ) - to_decimal(share.amount_owed)

    return {
        uid: qround(bal) for uid, bal in balances.items() if abs(bal) > epsilon
    }


def member_totals(expenses: Iterable, member_id: Hashable) -> Dict[str, Decimal]:
    """Total paid and total still owed by one member, same rules as above."""
    paid = Decimal("0")
    owed = Decimal("0")

    for exp in expenses:
        if exp.is_settled:
            continue
        if exp.paid_by == member_id:
            paid += to_decimal(exp.amount)
        for share in exp.shares:
            if share.user_id == member_id and not share.is_paid:
                owed += to_decimal(share.amount_owed)

    return {"total_paid": qround(paid), "total_owed": qround(owed)}


def to_net_balances(net_map: Mapping[Hashable, Decimal]) -> List[NetBalance]:
    return [
        NetBalance(user_id=uid, amount=float(bal))
        for uid, bal in sorted(net_map.items())
    ]
