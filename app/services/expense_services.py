from app.core.dependencies import check_group_membership
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from app.models.expense import Expense, ExpenseShare
from app.models.group_member import GroupMember
from app.schemas.balances import MemberBalanceOut
from app.schemas.expense import ExpenseCreate
from app.services.balances import member_totals
from app.services.settlement_service import balance_cache, load_group_ledger
from app.core.utils import qround, split_evenly, to_decimal
from fastapi import HTTPException


async def get_expense_with_shares(db: AsyncSession, expense_id: int):
    q = (
        select(Expense)
        .options(selectinload(Expense.shares))
        .where(Expense.id == expense_id)
    )
    res = await db.execute(q)
    return res.scalar_one_or_none()


# working fine
async def create_expense(db: AsyncSession, data: ExpenseCreate, paid_by: int, group_id: int):
    await check_group_membership(db, group_id, paid_by)

    # -----------------------------------
    # 1. Extract & validate split users
    # -----------------------------------
    user_ids = data.split_among

    if len(user_ids) != len(set(user_ids)):
        raise HTTPException(400, "Duplicate users found in splits")

    members_q = select(GroupMember.user_id).where(
        GroupMember.group_id == group_id,
        GroupMember.user_id.in_(user_ids)
    )

    members_res = await db.execute(members_q)

    valid_user_ids = {row[0] for row in members_res.all()}

    if set(user_ids) != valid_user_ids:
        raise HTTPException(
            400,
            "One or more users in splits are not members of the group"
        )

    # -----------------------------------
    # 2. Create expense with its shares
    # -----------------------------------
    amount = qround(to_decimal(data.amount))

    expense = Expense(
        group_id=group_id,
        paid_by=paid_by,
        amount=amount,
        description=data.description,
        is_settled=False,
        shares=[
            ExpenseShare(user_id=uid, amount_owed=owed, is_paid=False)
            for uid, owed in zip(user_ids, split_evenly(amount, len(user_ids)))
        ]
    )

    db.add(expense)
    await db.commit()

    balance_cache.invalidate(group_id)

    return await get_expense_with_shares(db, expense.id)


async def mark_share_paid(db: AsyncSession, share_id: int, user_id: int):
    share = await db.get(ExpenseShare, share_id)

    if not share:
        raise HTTPException(404, "Expense share not found")

    expense = await get_expense_with_shares(db, share.expense_id)

    if not expense:
        raise HTTPException(404, "Expense not found")

    # the debtor or the person who fronted the money
    if user_id not in (share.user_id, expense.paid_by):
        raise HTTPException(403, "You cannot update this expense share")

    share.is_paid = True

    if all(s.is_paid for s in expense.shares):
        expense.is_settled = True

    await db.commit()

    balance_cache.invalidate(expense.group_id)

    return {
        "message": "Expense share marked as paid",
        "share_id": share.id,
        "expense_settled": expense.is_settled
    }


async def settle_expense(db: AsyncSession, expense_id: int, user_id: int):
    expense = await get_expense_with_shares(db, expense_id)

    if not expense:
        raise HTTPException(404, "Expense not found")

    # Authorization: only payer can settle
    if expense.paid_by != user_id:
        raise HTTPException(403, "You cannot settle this expense")

    expense.is_settled = True
    await db.commit()

    balance_cache.invalidate(expense.group_id)

    return expense


async def get_member_balance(db: AsyncSession, group_id: int, member_id: int, user_id: int):
    await check_group_membership(db, group_id, user_id)

    expenses = await load_group_ledger(db, group_id)
    totals = member_totals(expenses, member_id)

    balance = totals["total_paid"] - totals["total_owed"]

    if balance > 0:
        status = "owed"  # others owe this member
    elif balance < 0:
        status = "owes"  # this member owes others
    else:
        status = "settled"

    return MemberBalanceOut(
        user_id=member_id,
        group_id=group_id,
        total_paid=float(totals["total_paid"]),
        total_owed=float(totals["total_owed"]),
        balance=float(balance),
        status=status
    )
