# invest_api/services/deposit.py
import asyncio
import logging
import os
from decimal import Decimal, InvalidOperation
from typing import Optional

from fastapi import HTTPException, UploadFile, status
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from invest_api.bot.services import notification as bot_notification_service
from invest_api.core.config import settings
from invest_api.crud import deposit as crud_deposit
from invest_api.crud import user as crud_user
from invest_api.models.deposit import Deposit, DepositNetwork
from invest_api.models.user import User
from invest_api.schemas.deposit import DepositRead
from invest_api.services import storage as storage_service
from invest_api.services.auth import generate_referral_code
from invest_api.services.referral import to_money

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png"}


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _parse_amount(raw_amount: Optional[str]) -> Optional[Decimal]:
    if raw_amount is None or not str(raw_amount).strip():
        return None
    try:
        amount = Decimal(str(raw_amount).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount >= settings.MAX_AMOUNT:
        return None
    return amount


def _get_upload_size(image: UploadFile) -> int:
    if image.size is not None:
        return image.size
    image.file.seek(0, os.SEEK_END)
    size = image.file.tell()
    image.file.seek(0)
    return size


def validate_deposit_form(
    name: Optional[str],
    email: Optional[str],
    raw_amount: Optional[str],
    network: Optional[str],
    image: Optional[UploadFile],
) -> tuple[Decimal, DepositNetwork]:
    """
    Проверяет форму депозита строго по порядку:
    минимальная сумма, обязательные поля, сеть, тип файла, размер файла.
    Возвращает разобранные сумму и сеть.
    """
    amount = _parse_amount(raw_amount)

    # 1. Сумма ниже минимума - отказ независимо от остальных полей
    if amount is not None and amount < settings.MIN_DEPOSIT_AMOUNT:
        raise _bad_request(f"Minimum deposit is {settings.MIN_DEPOSIT_AMOUNT} USDT")

    # 2. Обязательные поля
    has_image = image is not None and bool(image.filename)
    if not all(value and str(value).strip() for value in (name, email, raw_amount, network)) or not has_image:
        raise _bad_request("All fields are required")
    if amount is None:
        raise _bad_request("Invalid amount")
    try:
        validate_email(email.strip())
    except PydanticCustomError:
        raise _bad_request("Invalid email address")

    # 3. Сеть
    try:
        deposit_network = DepositNetwork(network.strip().upper())
    except ValueError:
        raise _bad_request("Invalid network selection")

    # 4. Тип файла
    if image.content_type not in ALLOWED_CONTENT_TYPES:
        raise _bad_request("Only JPG and PNG files are allowed")

    # 5. Размер файла
    if _get_upload_size(image) > settings.MAX_UPLOAD_SIZE_BYTES:
        raise _bad_request(f"File size must be less than {settings.MAX_UPLOAD_SIZE_MB}MB")

    try:
        deposit_amount = to_money(amount)
    except InvalidOperation:
        raise _bad_request("Invalid amount")
    if deposit_amount >= settings.MAX_AMOUNT:
        raise _bad_request("Invalid amount")

    return deposit_amount, deposit_network


def _resolve_deposit_owner(db: Session, current_user: Optional[User], name: str, email: str) -> User:
    """
    Владелец депозита: авторизованный пользователь, иначе пользователь с таким email,
    иначе новый пользователь без пароля (он сможет "присвоить" аккаунт при регистрации).
    """
    if current_user:
        return current_user

    user = crud_user.get_user_by_email(db, email=email)
    if user:
        return user

    logger.info(f"No user with email '{email}'. Creating one for the deposit.")
    return crud_user.create_user(db, name=name, email=email, referral_code=generate_referral_code(db))


async def submit_deposit(
    db: Session,
    current_user: Optional[User],
    name: Optional[str],
    email: Optional[str],
    amount: Optional[str],
    network: Optional[str],
    transaction_hash: Optional[str],
    image: Optional[UploadFile],
) -> Deposit:
    """Принимает заявку на депозит: проверка формы, сохранение файла, запись в БД."""
    deposit_amount, deposit_network = validate_deposit_form(name, email, amount, network, image)
    name = name.strip()
    email = email.strip().lower()
    transaction_hash = transaction_hash.strip() if transaction_hash and transaction_hash.strip() else None

    image_url = await storage_service.save_deposit_proof(image)

    try:
        owner = _resolve_deposit_owner(db, current_user, name=name, email=email)
        deposit = crud_deposit.create_deposit(
            db,
            user_id=owner.id,
            referrer_id=owner.referrer_id,
            name=name,
            email=email,
            amount=deposit_amount,
            network=deposit_network,
            image_url=image_url,
            transaction_hash=transaction_hash,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to insert deposit for '{email}'. Removing uploaded file.", exc_info=True)
        await storage_service.remove_deposit_proof(image_url)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save deposit")

    db.refresh(deposit)
    logger.info(f"Deposit {deposit.id} of {deposit.amount} {deposit.network.value} submitted by user {deposit.user_id}.")

    asyncio.create_task(bot_notification_service.send_new_deposit_to_admin(DepositRead.model_validate(deposit)))
    return deposit
