from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List

class LedgerShare(BaseModel):
    user_id: int
    amount_owed: Decimal = Field(ge=0)
    is_paid: bool = False

    class Config:
        from_attributes = True

class LedgerExpense(BaseModel):
    id: int
    group_id: int
    paid_by: int
    amount: Decimal = Field(ge=0)
    is_settled: bool = False
    shares: List[LedgerShare] = []

    class Config:
        from_attributes = True
