from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.schemas.balances import MemberBalanceOut
from app.schemas.expense import ExpenseCreate, ExpenseOut
from app.services.expense_services import create_expense, get_member_balance, mark_share_paid, settle_expense
from app.core.dependencies import get_current_user

router = APIRouter()

# working fine
@router.post("/{group_id}/add", response_model=ExpenseOut, status_code=201)
async def add_expense(group_id: int, data: ExpenseCreate, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await create_expense(db, data, current_user.id, group_id)

@router.post("/shares/{share_id}/paid")
async def share_paid(share_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await mark_share_paid(db, share_id=share_id, user_id=current_user.id)

@router.post("/{expense_id}/settle", response_model=ExpenseOut)
async def settle(expense_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await settle_expense(db, expense_id=expense_id, user_id=current_user.id)

@router.get("/{group_id}/balance/{member_id}", response_model=MemberBalanceOut)
async def member_balance(
    group_id: int,
    member_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return await get_member_balance(db, group_id, member_id, current_user.id)
