# invest_api/services/withdrawal.py
import asyncio
import logging
from decimal import InvalidOperation

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from invest_api.bot.services import notification as bot_notification_service
from invest_api.core.config import settings
from invest_api.crud import withdrawal as crud_withdrawal
from invest_api.models.deposit import DepositNetwork
from invest_api.models.user import User
from invest_api.models.withdrawal import Withdrawal
from invest_api.schemas.withdrawal import WithdrawalCreate, WithdrawalRead
from invest_api.services.referral import to_money

logger = logging.getLogger(__name__)


async def create_withdrawal_request(db: Session, current_user: User, data: WithdrawalCreate) -> Withdrawal:
    """
    Создает заявку на вывод средств.
    Баланс здесь только проверяется, списание происходит при одобрении админом.
    """
    if not data.amount.is_finite() or data.amount <= 0 or data.amount >= settings.MAX_AMOUNT:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid amount")
    try:
        amount = to_money(data.amount)
    except InvalidOperation:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid amount")
    if amount <= 0 or amount >= settings.MAX_AMOUNT:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid amount")

    try:
        network = DepositNetwork(data.network.strip().upper())
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid network selection")

    wallet_address = data.wallet_address.strip()
    if not wallet_address:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Wallet address is required")

    if amount > (current_user.account_balance or 0):
        logger.warning(
            f"User {current_user.id} requested withdrawal of {amount} with balance {current_user.account_balance}."
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Insufficient balance")

    withdrawal = crud_withdrawal.create_withdrawal(
        db,
        user_id=current_user.id,
        amount=amount,
        network=network,
        wallet_address=wallet_address,
    )
    logger.info(f"Withdrawal {withdrawal.id} ({withdrawal.transaction_uid}) of {amount} requested by user {current_user.id}.")

    asyncio.create_task(
        bot_notification_service.send_new_withdrawal_to_admin(
            WithdrawalRead.model_validate(withdrawal), user_email=current_user.email
        )
    )
    return withdrawal
