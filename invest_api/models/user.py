# invest_api/models/user.py

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, func
from sqlalchemy.orm import relationship
from invest_api.db.session import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    # NULL у пользователей, созданных автоматически при отправке депозита
    password_hash = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    referral_code = Column(String, unique=True, index=True, nullable=False)
    # Кто пригласил этого пользователя
    referrer_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    account_balance = Column(Numeric(18, 2), nullable=False, default=0, server_default="0")
    total_earning = Column(Numeric(18, 2), nullable=False, default=0, server_default="0")
    rewards = Column(Numeric(18, 2), nullable=False, default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Связи для реферальной системы
    referrer = relationship("User", remote_side=[id], back_populates="referrals")
    # Кого пригласил этот пользователь (1-й уровень)
    referrals = relationship("User", back_populates="referrer")

    deposits = relationship("Deposit", foreign_keys="Deposit.user_id", back_populates="user")
    withdrawals = relationship("Withdrawal", foreign_keys="Withdrawal.user_id", back_populates="user")
    transactions = relationship("Transaction", back_populates="user")
