# invest_api/crud/transaction.py

from decimal import Decimal
from typing import List
from sqlalchemy.orm import Session

from invest_api.models.transaction import Transaction, TransactionType


def create_transaction(
    db: Session,
    user_id: int,
    amount: Decimal,
    type: TransactionType,
    description: str,
    deposit_id: int | None = None,
    withdrawal_id: int | None = None,
) -> Transaction:
    """
    Создает объект транзакции и добавляет его в сессию.
    Требует внешнего вызова db.commit().
    """
    transaction = Transaction(
        user_id=user_id,
        amount=amount,
        type=type,
        description=description,
        status="completed",
        deposit_id=deposit_id,
        withdrawal_id=withdrawal_id,
    )
    db.add(transaction)
    return transaction

def get_user_transactions(
    db: Session,
    user_id: int,
    skip: int = 0,
    limit: int = 20
) -> List[Transaction]:
    """Получает пагинированный список транзакций пользователя (от новых к старым)."""
    return db.query(Transaction).filter(
        Transaction.user_id == user_id
    ).order_by(Transaction.created_at.desc(), Transaction.id.desc()).offset(skip).limit(limit).all()

def count_user_transactions(db: Session, user_id: int) -> int:
    return db.query(Transaction).filter(Transaction.user_id == user_id).count()
