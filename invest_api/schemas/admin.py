# invest_api/schemas/admin.py
from decimal import Decimal
from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Счетчики для главной страницы админки."""
    total_users: int
    new_users_today: int
    pending_deposits: int
    verified_deposits: int
    rejected_deposits: int
    total_verified_amount: Decimal
    pending_withdrawals: int
    approved_withdrawals: int
