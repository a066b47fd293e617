# invest_api/crud/deposit.py
from decimal import Decimal
from typing import Iterable, List

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from invest_api.models.deposit import Deposit, DepositNetwork, DepositStatus


def create_deposit(
    db: Session,
    user_id: int,
    referrer_id: int | None,
    name: str,
    email: str,
    amount: Decimal,
    network: DepositNetwork,
    image_url: str,
    transaction_hash: str | None = None,
) -> Deposit:
    """
    Создает заявку на депозит в статусе 'pending'.
    Требует внешнего вызова db.commit().
    """
    deposit = Deposit(
        user_id=user_id,
        referrer_id=referrer_id,
        name=name,
        email=email,
        amount=amount,
        network=network,
        image_url=image_url,
        transaction_hash=transaction_hash,
        status=DepositStatus.PENDING,
    )
    db.add(deposit)
    db.flush()
    return deposit

def get_deposit_by_id(db: Session, deposit_id: int) -> Deposit | None:
    return db.query(Deposit).options(
        joinedload(Deposit.user), joinedload(Deposit.referrer)
    ).filter(Deposit.id == deposit_id).first()

def get_deposit_for_update(db: Session, deposit_id: int) -> Deposit | None:
    """Блокирует строку депозита до конца транзакции, чтобы два админа не провели его дважды."""
    return db.query(Deposit).filter(Deposit.id == deposit_id).with_for_update().first()

def get_deposits(
    db: Session,
    skip: int = 0,
    limit: int = 20,
    status: DepositStatus | None = None,
) -> List[Deposit]:
    """Пагинированный список депозитов (от новых к старым) с фильтром по статусу."""
    query = db.query(Deposit).options(joinedload(Deposit.user), joinedload(Deposit.referrer))
    if status:
        query = query.filter(Deposit.status == status)
    return query.order_by(Deposit.created_at.desc(), Deposit.id.desc()).offset(skip).limit(limit).all()

def count_deposits(db: Session, status: DepositStatus | None = None) -> int:
    query = db.query(func.count(Deposit.id))
    if status:
        query = query.filter(Deposit.status == status)
    return query.scalar()

def get_user_deposits(db: Session, user_id: int, skip: int = 0, limit: int = 20) -> List[Deposit]:
    return db.query(Deposit).filter(
        Deposit.user_id == user_id
    ).order_by(Deposit.created_at.desc(), Deposit.id.desc()).offset(skip).limit(limit).all()

def count_user_deposits(db: Session, user_id: int) -> int:
    return db.query(func.count(Deposit.id)).filter(Deposit.user_id == user_id).scalar()

def sum_deposits_by_status(db: Session, status: DepositStatus) -> Decimal:
    total = db.query(func.sum(Deposit.amount)).filter(Deposit.status == status).scalar()
    return Decimal(total or 0)

def get_referenced_image_urls(db: Session, image_urls: Iterable[str]) -> set[str]:
    """Возвращает те из переданных путей к файлам, на которые ссылается хотя бы один депозит."""
    image_urls = list(image_urls)
    if not image_urls:
        return set()
    rows = db.query(Deposit.image_url).filter(Deposit.image_url.in_(image_urls)).all()
    return {row[0] for row in rows}
