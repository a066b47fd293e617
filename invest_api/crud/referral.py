# invest_api/crud/referral.py
from typing import List

from sqlalchemy import and_, func
from sqlalchemy.orm import Session, aliased

from invest_api.models.deposit import Deposit, DepositStatus
from invest_api.models.user import User


def _deposit_join_condition(user_column, verified_only: bool):
    # Фильтр по статусу стоит в ON, а не в WHERE, иначе LEFT JOIN
    # выкинет рефералов без подтвержденных депозитов.
    condition = Deposit.user_id == user_column
    if verified_only:
        condition = and_(condition, Deposit.status == DepositStatus.VERIFIED)
    return condition


def get_level1_referrals(db: Session, user_id: int, verified_only: bool = True) -> List:
    """
    Прямые рефералы пользователя с суммой и количеством депозитов.
    Возвращает строки (id, name, email, created_at, total_invested, deposit_count).
    """
    return db.query(
        User.id,
        User.name,
        User.email,
        User.created_at,
        func.coalesce(func.sum(Deposit.amount), 0).label("total_invested"),
        func.count(Deposit.id).label("deposit_count"),
    ).outerjoin(
        Deposit, _deposit_join_condition(User.id, verified_only)
    ).filter(
        User.referrer_id == user_id
    ).group_by(
        User.id, User.name, User.email, User.created_at
    ).order_by(User.created_at.desc(), User.id.desc()).all()


def get_level2_referrals(db: Session, user_id: int, verified_only: bool = True) -> List:
    """
    Рефералы второго уровня: пользователи, приглашенные прямыми рефералами.
    К каждой строке добавляется имя реферала первого уровня (level1_referral_name).
    """
    level1 = aliased(User)
    return db.query(
        User.id,
        User.name,
        User.email,
        User.created_at,
        level1.name.label("level1_referral_name"),
        func.coalesce(func.sum(Deposit.amount), 0).label("total_invested"),
        func.count(Deposit.id).label("deposit_count"),
    ).join(
        level1, User.referrer_id == level1.id
    ).outerjoin(
        Deposit, _deposit_join_condition(User.id, verified_only)
    ).filter(
        level1.referrer_id == user_id
    ).group_by(
        User.id, User.name, User.email, User.created_at, level1.name
    ).order_by(User.created_at.desc(), User.id.desc()).all()
