# invest_api/models/withdrawal.py
import enum
import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Numeric, Enum, func
from sqlalchemy.orm import relationship
from invest_api.db.session import Base
from invest_api.models.deposit import DepositNetwork, _enum_values


class WithdrawalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"

    def can_transition_to(self, target: "WithdrawalStatus") -> bool:
        return target in WITHDRAWAL_TRANSITIONS[self]


# Статус двигается только вперед
WITHDRAWAL_TRANSITIONS = {
    WithdrawalStatus.PENDING: {WithdrawalStatus.APPROVED, WithdrawalStatus.REJECTED},
    WithdrawalStatus.APPROVED: {WithdrawalStatus.COMPLETED},
    WithdrawalStatus.REJECTED: set(),
    WithdrawalStatus.COMPLETED: set(),
}


def generate_transaction_uid() -> str:
    return uuid.uuid4().hex


class Withdrawal(Base):
    __tablename__ = "withdrawals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(18, 2), nullable=False)
    network = Column(
        Enum(DepositNetwork, name="withdrawal_network", native_enum=False, values_callable=_enum_values, length=16),
        nullable=False,
    )
    wallet_address = Column(String, nullable=False)

    # Внутренний идентификатор заявки и хеш выплаты в блокчейне (заполняет админ)
    transaction_uid = Column(String(32), unique=True, nullable=False, default=generate_transaction_uid)
    transaction_hash = Column(String, nullable=True)

    status = Column(
        Enum(WithdrawalStatus, name="withdrawal_status", native_enum=False, values_callable=_enum_values, length=16),
        default=WithdrawalStatus.PENDING,
        nullable=False,
        index=True,
    )
    admin_notes = Column(Text, nullable=True)
    processed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", foreign_keys=[user_id], back_populates="withdrawals")
