# invest_api/schemas/deposit.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel

from invest_api.models.deposit import DepositNetwork, DepositStatus
from invest_api.schemas.pagination import PaginatedResponse
from invest_api.schemas.user import UserShort


class DepositRead(BaseModel):
    id: int
    user_id: int
    referrer_id: Optional[int] = None
    name: str
    email: str
    amount: Decimal
    network: DepositNetwork
    image_url: str
    transaction_hash: Optional[str] = None
    status: DepositStatus
    admin_notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

# Для админки: депозит вместе с владельцем и его реферером
class AdminDepositDetails(DepositRead):
    user: UserShort
    referrer: Optional[UserShort] = None

class PaginatedAdminDeposits(PaginatedResponse[AdminDepositDetails]):
    pass

class PaginatedDeposits(PaginatedResponse[DepositRead]):
    pass

class DepositStatusUpdate(BaseModel):
    # Строка, а не enum: неизвестный статус должен давать 400, а не 422
    status: str
    admin_notes: Optional[str] = None
