# invest_api/crud/withdrawal.py
from decimal import Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from invest_api.models.deposit import DepositNetwork
from invest_api.models.withdrawal import Withdrawal, WithdrawalStatus


def create_withdrawal(
    db: Session,
    user_id: int,
    amount: Decimal,
    network: DepositNetwork,
    wallet_address: str,
) -> Withdrawal:
    """Создает заявку на вывод в статусе 'pending'."""
    withdrawal = Withdrawal(
        user_id=user_id,
        amount=amount,
        network=network,
        wallet_address=wallet_address,
        status=WithdrawalStatus.PENDING,
    )
    db.add(withdrawal)
    db.commit()
    db.refresh(withdrawal)
    return withdrawal

def get_withdrawal_by_id(db: Session, withdrawal_id: int) -> Withdrawal | None:
    return db.query(Withdrawal).options(joinedload(Withdrawal.user)).filter(Withdrawal.id == withdrawal_id).first()

def get_withdrawal_for_update(db: Session, withdrawal_id: int) -> Withdrawal | None:
    return db.query(Withdrawal).filter(Withdrawal.id == withdrawal_id).with_for_update().first()

def get_withdrawals(
    db: Session,
    skip: int = 0,
    limit: int = 20,
    status: WithdrawalStatus | None = None,
) -> List[Withdrawal]:
    query = db.query(Withdrawal).options(joinedload(Withdrawal.user))
    if status:
        query = query.filter(Withdrawal.status == status)
    return query.order_by(Withdrawal.created_at.desc(), Withdrawal.id.desc()).offset(skip).limit(limit).all()

def count_withdrawals(db: Session, status: WithdrawalStatus | None = None) -> int:
    query = db.query(func.count(Withdrawal.id))
    if status:
        query = query.filter(Withdrawal.status == status)
    return query.scalar()

def get_user_withdrawals(db: Session, user_id: int, skip: int = 0, limit: int = 20) -> List[Withdrawal]:
    return db.query(Withdrawal).filter(
        Withdrawal.user_id == user_id
    ).order_by(Withdrawal.created_at.desc(), Withdrawal.id.desc()).offset(skip).limit(limit).all()

def count_user_withdrawals(db: Session, user_id: int) -> int:
    return db.query(func.count(Withdrawal.id)).filter(Withdrawal.user_id == user_id).scalar()
