# invest_api/services/admin.py
import logging
import math
from datetime import datetime, timezone

from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from invest_api.core.redis import redis_client
from invest_api.crud import deposit as crud_deposit
from invest_api.crud import user as crud_user
from invest_api.crud import withdrawal as crud_withdrawal
from invest_api.models.deposit import DepositStatus
from invest_api.models.withdrawal import WithdrawalStatus
from invest_api.schemas.admin import DashboardStats
from invest_api.schemas.deposit import AdminDepositDetails, PaginatedAdminDeposits
from invest_api.schemas.withdrawal import AdminWithdrawalDetails, PaginatedAdminWithdrawals
from invest_api.services.verification import parse_deposit_status, parse_withdrawal_status

logger = logging.getLogger(__name__)

DASHBOARD_CACHE_KEY = "admin:dashboard_stats"
DASHBOARD_CACHE_TTL_SECONDS = 300


def _total_pages(total_items: int, size: int) -> int:
    return math.ceil(total_items / size) if total_items > 0 else 1


async def get_dashboard_stats(db: Session) -> DashboardStats:
    """Собирает счетчики для админской панели. Результат кешируется в Redis на 5 минут."""
    try:
        cached_data = await redis_client.get(DASHBOARD_CACHE_KEY)
    except RedisError:
        logger.warning("Redis is unavailable. Calculating dashboard stats without cache.", exc_info=True)
        cached_data = None
    if cached_data:
        logger.info("Serving dashboard stats from cache.")
        return DashboardStats.model_validate_json(cached_data)

    logger.info("Calculating fresh dashboard stats.")
    today_start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    stats_data = DashboardStats(
        total_users=crud_user.count_all_users(db),
        new_users_today=crud_user.count_new_users_since(db, since=today_start),
        pending_deposits=crud_deposit.count_deposits(db, status=DepositStatus.PENDING),
        verified_deposits=crud_deposit.count_deposits(db, status=DepositStatus.VERIFIED),
        rejected_deposits=crud_deposit.count_deposits(db, status=DepositStatus.REJECTED),
        total_verified_amount=crud_deposit.sum_deposits_by_status(db, status=DepositStatus.VERIFIED),
        pending_withdrawals=crud_withdrawal.count_withdrawals(db, status=WithdrawalStatus.PENDING),
        approved_withdrawals=crud_withdrawal.count_withdrawals(db, status=WithdrawalStatus.APPROVED),
    )

    try:
        await redis_client.set(DASHBOARD_CACHE_KEY, stats_data.model_dump_json(), ex=DASHBOARD_CACHE_TTL_SECONDS)
    except RedisError:
        logger.warning("Failed to cache dashboard stats.", exc_info=True)
    return stats_data


async def invalidate_dashboard_cache():
    """Сбрасывает кеш статистики после изменения статусов."""
    try:
        await redis_client.delete(DASHBOARD_CACHE_KEY)
    except RedisError:
        logger.warning("Failed to invalidate dashboard stats cache.", exc_info=True)


def get_paginated_deposits(db: Session, page: int, size: int, status: str | None = None) -> PaginatedAdminDeposits:
    """Собирает пагинированный список депозитов для админки."""
    status_filter = parse_deposit_status(status) if status else None
    skip = (page - 1) * size

    deposits = crud_deposit.get_deposits(db, skip=skip, limit=size, status=status_filter)
    total_items = crud_deposit.count_deposits(db, status=status_filter)

    return PaginatedAdminDeposits(
        total_items=total_items, total_pages=_total_pages(total_items, size),
        current_page=page, size=size,
        items=[AdminDepositDetails.model_validate(d) for d in deposits]
    )


def get_paginated_withdrawals(db: Session, page: int, size: int, status: str | None = None) -> PaginatedAdminWithdrawals:
    status_filter = parse_withdrawal_status(status) if status else None
    skip = (page - 1) * size

    withdrawals = crud_withdrawal.get_withdrawals(db, skip=skip, limit=size, status=status_filter)
    total_items = crud_withdrawal.count_withdrawals(db, status=status_filter)

    return PaginatedAdminWithdrawals(
        total_items=total_items, total_pages=_total_pages(total_items, size),
        current_page=page, size=size,
        items=[AdminWithdrawalDetails.model_validate(w) for w in withdrawals]
    )
