from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.dependencies import get_current_user
from app.schemas.balances import GroupBalanceOut
from app.schemas.settlements import SettlementConfirmOut, SettlementOut, SettlementRequest
from app.services.settlement_service import (
    compute_group_settlements,
    confirm_settlement,
    create_group_settlements,
    get_group_settlements,
)

router = APIRouter()


@router.post("/calculate", response_model=GroupBalanceOut)
async def calculate(
    data: SettlementRequest,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await compute_group_settlements(db, data.group_id, current_user.id)


@router.post("/create", response_model=GroupBalanceOut, status_code=201)
async def create(
    data: SettlementRequest,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await create_group_settlements(db, data.group_id, current_user.id)


@router.get("/group/{group_id}", response_model=list[SettlementOut])
async def group_settlements(
    group_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await get_group_settlements(db, group_id, current_user.id)


@router.post("/{settlement_id}/confirm", response_model=SettlementConfirmOut)
async def confirm(
    settlement_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await confirm_settlement(db, settlement_id, current_user.id)
