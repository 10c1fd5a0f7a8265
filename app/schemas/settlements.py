from pydantic import BaseModel
from datetime import datetime

class SettlementRequest(BaseModel):
    group_id: int

class SettlementOut(BaseModel):
    id: int
    group_id: int
    payer_id: int
    receiver_id: int
    amount: float
    is_confirmed: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True

class SettlementConfirmOut(BaseModel):
    message: str
    settlement_id: int
