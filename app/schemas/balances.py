from pydantic import BaseModel

class NetBalance(BaseModel):
    user_id: int
    amount: float

class Settlement(BaseModel):
    from_id: int
    from_name: str | None
    to_id: int
    to_name: str | None
    amount: float

class GroupBalanceOut(BaseModel):
    group_id: int
    net: list[NetBalance]
    settlements: list[Settlement]

class MemberBalanceOut(BaseModel):
    user_id: int
    group_id: int
    total_paid: float
    total_owed: float
    balance: float
    status: str
