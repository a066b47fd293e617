# invest_api/services/referral.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from invest_api.core.config import settings
from invest_api.crud import referral as crud_referral
from invest_api.crud import user as crud_user
from invest_api.schemas.referral import (
    ReferralEntry, ReferralLevels, ReferralOwner, ReferralStatistics, ReferralSummary
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def to_money(value) -> Decimal:
    """Приводит сумму к Decimal с двумя знаками (округление half-up)."""
    if value is None:
        value = 0
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def build_referral_link(referral_code: str) -> str:
    return f"{settings.BASE_URL.rstrip('/')}/signup?ref={referral_code}"


def empty_summary(user_id: int, user_found: bool = True, fallback: bool = False, error: str | None = None) -> ReferralSummary:
    """Нулевая структура: пустые уровни и нулевая статистика."""
    return ReferralSummary(
        user=ReferralOwner(id=user_id),
        user_found=user_found,
        fallback=fallback,
        error=error,
    )


def _to_entries(rows, level: int) -> List[ReferralEntry]:
    return [
        ReferralEntry(
            id=row.id,
            name=row.name,
            email=row.email,
            joined_date=row.created_at,
            total_invested=to_money(row.total_invested),
            deposit_count=row.deposit_count or 0,
            level=level,
            level1_referral_name=getattr(row, "level1_referral_name", None),
        )
        for row in rows
    ]


def get_referral_summary(db: Session, user_id: int) -> ReferralSummary:
    """
    Собирает двухуровневое реферальное дерево пользователя и считает комиссии.
    Ошибка БД не пробрасывается: возвращается нулевая структура с fallback=True.
    """
    verified_only = settings.REFERRAL_COUNT_VERIFIED_ONLY
    try:
        user = crud_user.get_user_by_id(db, user_id=user_id)
        if not user:
            logger.info(f"Referral summary requested for unknown user {user_id}.")
            return empty_summary(user_id, user_found=False)

        owner = ReferralOwner(
            id=user.id,
            name=user.name,
            email=user.email,
            referral_code=user.referral_code,
            referral_link=build_referral_link(user.referral_code),
            referrer_name=user.referrer.name if user.referrer else None,
        )
        level1_rows = crud_referral.get_level1_referrals(db, user_id=user.id, verified_only=verified_only)
        level2_rows = crud_referral.get_level2_referrals(db, user_id=user.id, verified_only=verified_only)
    except SQLAlchemyError:
        logger.error(f"Failed to load referral data for user {user_id}. Returning fallback summary.", exc_info=True)
        db.rollback()
        return empty_summary(user_id, fallback=True, error="Referral data is temporarily unavailable")

    level1 = _to_entries(level1_rows, level=1)
    level2 = _to_entries(level2_rows, level=2)

    level1_total = to_money(sum((entry.total_invested for entry in level1), Decimal("0")))
    level2_total = to_money(sum((entry.total_invested for entry in level2), Decimal("0")))
    level1_commission = to_money(level1_total * settings.LEVEL1_COMMISSION_RATE)
    level2_commission = to_money(level2_total * settings.LEVEL2_COMMISSION_RATE)

    statistics = ReferralStatistics(
        level1_count=len(level1),
        level2_count=len(level2),
        total_referrals=len(level1) + len(level2),
        level1_total=level1_total,
        level2_total=level2_total,
        level1_commission=level1_commission,
        level2_commission=level2_commission,
        total_commission=to_money(level1_commission + level2_commission),
    )
    logger.info(
        f"Referral summary for user {user_id}: {statistics.level1_count} L1, "
        f"{statistics.level2_count} L2, commission {statistics.total_commission}."
    )
    return ReferralSummary(
        user=owner,
        referrals=ReferralLevels(level1=level1, level2=level2),
        statistics=statistics,
    )
