# invest_api/schemas/referral.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

ZERO = Decimal("0.00")


class ReferralOwner(BaseModel):
    """Пользователь, для которого строится дерево."""
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    referral_code: Optional[str] = None
    referral_link: Optional[str] = None
    referrer_name: Optional[str] = None

class ReferralEntry(BaseModel):
    id: int
    name: str
    email: str
    joined_date: Optional[datetime] = None
    total_invested: Decimal
    deposit_count: int
    level: int
    level1_referral_name: Optional[str] = None # Только для второго уровня

class ReferralLevels(BaseModel):
    level1: List[ReferralEntry] = Field(default_factory=list)
    level2: List[ReferralEntry] = Field(default_factory=list)

class ReferralStatistics(BaseModel):
    level1_count: int = 0
    level2_count: int = 0
    total_referrals: int = 0
    level1_total: Decimal = ZERO
    level2_total: Decimal = ZERO
    level1_commission: Decimal = ZERO
    level2_commission: Decimal = ZERO
    total_commission: Decimal = ZERO

class ReferralSummary(BaseModel):
    user: ReferralOwner
    referrals: ReferralLevels = Field(default_factory=ReferralLevels)
    statistics: ReferralStatistics = Field(default_factory=ReferralStatistics)
    # user_found=False - пользователя нет; fallback=True - ошибка при выборке из БД
    user_found: bool = True
    fallback: bool = False
    error: Optional[str] = None
