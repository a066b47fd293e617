# invest_api/models/transaction.py
import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from invest_api.db.session import Base
from invest_api.models.deposit import _enum_values


class TransactionType(str, enum.Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class Transaction(Base):
    """Запись журнала движения средств. Только добавление, без изменений."""
    __tablename__ = "transactions"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    type = Column(
        Enum(TransactionType, name="transaction_type", native_enum=False, values_callable=_enum_values, length=16),
        nullable=False,
    )
    # Положительное число - начисление, отрицательное - списание
    amount = Column(Numeric(18, 2), nullable=False)
    description = Column(String, nullable=False)
    status = Column(String, default="completed", nullable=False)

    # unique: один депозит (одна выплата) - ровно одна проводка
    deposit_id = Column(Integer, ForeignKey("deposits.id"), unique=True, nullable=True)
    withdrawal_id = Column(Integer, ForeignKey("withdrawals.id"), unique=True, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="transactions")
