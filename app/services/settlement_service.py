import logging
from decimal import Decimal
from typing import Dict, Hashable, List

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.dependencies import check_group_admin, check_group_membership
from app.models.expense import Expense
from app.models.settlement import Settlement as SettlementRecord
from app.schemas.balances import GroupBalanceOut, Settlement
from app.schemas.ledger import LedgerExpense
from app.services.balance_cache import BalanceCache
from app.services.balances import aggregate_balances, to_net_balances
from app.services.simplify import Transfer, simplify_debts
from app.services.user_queries import get_user_names

logger = logging.getLogger(__name__)

balance_cache = BalanceCache(enabled=settings.BALANCE_CACHE_ENABLED)


async def load_group_ledger(db: AsyncSession, group_id: int) -> List[LedgerExpense]:
    q = (
        select(Expense)
        .options(selectinload(Expense.shares))
        .where(Expense.group_id == group_id)
        .order_by(Expense.id)
    )
    rows = (await db.scalars(q)).all()
    return [LedgerExpense.model_validate(row) for row in rows]


async def get_group_net_balances(
    db: AsyncSession, group_id: int, use_cache: bool = True
) -> Dict[Hashable, Decimal]:
    """
    Returns:
        {
            member_id: net_balance (Decimal)
        }
    """
    if use_cache:
        cached = balance_cache.get(group_id)
        if cached is not None:
            return cached

    # taken before loading; a write that lands meanwhile makes this put a no-op
    generation = balance_cache.generation(group_id)

    expenses = await load_group_ledger(db, group_id)
    net = aggregate_balances(expenses)

    balance_cache.put(group_id, net, generation=generation)
    return net


async def format_settlements(
    db: AsyncSession, group_id: int, net: Dict[Hashable, Decimal], transfers: List[Transfer]
) -> GroupBalanceOut:
    names = await get_user_names(
        db, [t.payer_id for t in transfers] + [t.receiver_id for t in transfers]
    )

    return GroupBalanceOut(
        group_id=group_id,
        net=to_net_balances(net),
        settlements=[
            Settlement(
                from_id=t.payer_id,
                from_name=names.get(t.payer_id),
                to_id=t.receiver_id,
                to_name=names.get(t.receiver_id),
                amount=float(t.amount),
            )
            for t in transfers
        ],
    )


# working fine
async def compute_group_settlements(db: AsyncSession, group_id: int, user_id: int):
    await check_group_membership(db, group_id, user_id)

    net = await get_group_net_balances(db, group_id)
    transfers = simplify_debts(net)

    return await format_settlements(db, group_id, net, transfers)


async def create_group_settlements(db: AsyncSession, group_id: int, user_id: int):
    """
    Compute the plan from the current ledger and store one unconfirmed
    Settlement row per transfer.

    The group row stays locked until commit, and a group that still has
    unconfirmed settlements is refused with 409. A run that waited on the
    lock therefore sees the first run's rows and writes nothing.
    """
    try:
        await check_group_admin(db, group_id, user_id, for_update=True)

        pending = await db.scalar(
            select(func.count(SettlementRecord.id)).where(
                SettlementRecord.group_id == group_id,
                SettlementRecord.is_confirmed == False,
            )
        )
        if pending:
            raise HTTPException(
                409, f"Group already has {pending} unconfirmed settlements"
            )

        # always from the ledger, a cached entry may predate the lock
        net = await get_group_net_balances(db, group_id, use_cache=False)
        transfers = simplify_debts(net)

        records = [
            SettlementRecord(
                group_id=group_id,
                payer_id=t.payer_id,
                receiver_id=t.receiver_id,
                amount=t.amount,
                is_confirmed=False,
            )
            for t in transfers
        ]
        db.add_all(records)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Created %d settlements for group %s (requested by user %s)",
        len(records),
        group_id,
        user_id,
    )

    return await format_settlements(db, group_id, net, transfers)


async def get_group_settlements(db: AsyncSession, group_id: int, user_id: int):
    await check_group_membership(db, group_id, user_id)

    q = (
        select(SettlementRecord)
        .where(SettlementRecord.group_id == group_id)
        .order_by(SettlementRecord.created_at.desc(), SettlementRecord.id.desc())
    )

    result = await db.execute(q)
    return result.scalars().all()


async def confirm_settlement(db: AsyncSession, settlement_id: int, user_id: int):
    q = select(SettlementRecord).where(SettlementRecord.id == settlement_id)
    result = await db.execute(q)
    settlement = result.scalar_one_or_none()

    if not settlement:
        raise HTTPException(404, "Settlement not found")

    # Only the user who pays can confirm it
    if settlement.payer_id != user_id:
        raise HTTPException(403, "Only the payer can confirm this settlement")

    if not settlement.is_confirmed:
        settlement.is_confirmed = True
        await db.commit()
        logger.info("Settlement %s confirmed by user %s", settlement_id, user_id)

    return {
        "message": "Settlement confirmed successfully",
        "settlement_id": settlement.id,
    }
