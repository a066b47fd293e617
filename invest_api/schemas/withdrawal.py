# invest_api/schemas/withdrawal.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel

from invest_api.models.deposit import DepositNetwork
from invest_api.models.withdrawal import WithdrawalStatus
from invest_api.schemas.pagination import PaginatedResponse
from invest_api.schemas.user import UserShort


class WithdrawalCreate(BaseModel):
    amount: Decimal
    network: str
    wallet_address: str

class WithdrawalRead(BaseModel):
    id: int
    user_id: int
    amount: Decimal
    network: DepositNetwork
    wallet_address: str
    transaction_uid: str
    transaction_hash: Optional[str] = None
    status: WithdrawalStatus
    admin_notes: Optional[str] = None
    processed_by: Optional[int] = None
    processed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

class AdminWithdrawalDetails(WithdrawalRead):
    user: UserShort

class PaginatedAdminWithdrawals(PaginatedResponse[AdminWithdrawalDetails]):
    pass

class PaginatedWithdrawals(PaginatedResponse[WithdrawalRead]):
    pass

class WithdrawalStatusUpdate(BaseModel):
    status: str
    transaction_hash: Optional[str] = None # Хеш выплаты в блокчейне, заполняется при 'completed'
    admin_notes: Optional[str] = None
