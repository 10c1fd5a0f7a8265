from pydantic import BaseModel, Field
from typing import List

class ExpenseCreate(BaseModel):
    description: str
    amount: float = Field(ge=0)
    split_among: List[int] = Field(min_length=1)

class ShareOut(BaseModel):
    id: int
    user_id: int
    amount_owed: float
    is_paid: bool

    class Config:
        from_attributes = True

class ExpenseOut(BaseModel):
    id: int
    group_id: int
    amount: float
    description: str | None = None
    paid_by: int
    is_settled: bool
    shares: List[ShareOut]

    class Config:
        from_attributes = True
