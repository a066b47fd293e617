# invest_api/schemas/transaction.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel

from invest_api.models.transaction import TransactionType
from invest_api.schemas.pagination import PaginatedResponse


class TransactionRead(BaseModel):
    id: int
    type: TransactionType
    amount: Decimal
    description: str
    status: str
    deposit_id: Optional[int] = None
    withdrawal_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True

class PaginatedTransactions(PaginatedResponse[TransactionRead]):
    pass
