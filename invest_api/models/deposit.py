# invest_api/models/deposit.py
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Numeric, Enum, func
from sqlalchemy.orm import relationship
from invest_api.db.session import Base


class DepositNetwork(str, enum.Enum):
    TRC20 = "TRC20"  # USDT в сети Tron
    BEP20 = "BEP20"  # USDT в BNB Smart Chain


class DepositStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"

    def can_transition_to(self, target: "DepositStatus") -> bool:
        return target in DEPOSIT_TRANSITIONS[self]


DEPOSIT_TRANSITIONS = {
    DepositStatus.PENDING: {DepositStatus.VERIFIED, DepositStatus.REJECTED},
    DepositStatus.VERIFIED: set(),
    DepositStatus.REJECTED: set(),
}


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Deposit(Base):
    __tablename__ = "deposits"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Копия user.referrer_id на момент отправки
    referrer_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Что пользователь указал в форме
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    network = Column(
        Enum(DepositNetwork, name="deposit_network", native_enum=False, values_callable=_enum_values, length=16),
        nullable=False,
    )
    image_url = Column(String, nullable=False)
    transaction_hash = Column(String, nullable=True)

    status = Column(
        Enum(DepositStatus, name="deposit_status", native_enum=False, values_callable=_enum_values, length=16),
        default=DepositStatus.PENDING,
        nullable=False,
        index=True,
    )
    admin_notes = Column(Text, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", foreign_keys=[user_id], back_populates="deposits")
    referrer = relationship("User", foreign_keys=[referrer_id])
