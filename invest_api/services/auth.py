# invest_api/services/auth.py

import logging
import secrets
import string
from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import HTTPException, status
from jose import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from invest_api.core.config import settings
from invest_api.crud import user as crud_user
from invest_api.schemas.user import RegisterRequest, RegisterResponse, UserRead

logger = logging.getLogger(__name__)

REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits
REFERRAL_CODE_LENGTH = 7
MIN_PASSWORD_LENGTH = 6
# bcrypt учитывает только первые 72 байта пароля
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Создает JWT токен."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def generate_referral_code(db: Session) -> str:
    """
    Генерирует уникальный реферальный код вида BDS + 7 символов [A-Z0-9].
    Уникальность проверяется по БД, при коллизии код генерируется заново.
    """
    while True:
        suffix = "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH))
        code = f"{settings.REFERRAL_CODE_PREFIX}{suffix}"
        if not crud_user.get_user_by_referral_code(db, code=code):
            return code
        logger.info(f"Referral code collision on '{code}', generating a new one.")


def _validate_registration(data: RegisterRequest):
    if not data.name.strip() or not data.password or not data.confirm_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required")
    if data.password != data.confirm_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Passwords do not match")
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )
    if len(data.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password is too long")


def register_user(db: Session, data: RegisterRequest) -> RegisterResponse:
    """
    Регистрирует пользователя.

    1. Проверяет форму (обязательные поля, совпадение паролей, длина).
    2. Ищет пригласившего по реферальному коду. Неизвестный код игнорируется.
    3. Если email уже занят пользователем с паролем - ошибка 400.
       Если email есть, но без пароля (пользователь создан при отправке депозита),
       аккаунт "присваивается": ставим пароль, имя и, если не было, реферера.
    4. Возвращает пользователя и JWT токен.
    """
    _validate_registration(data)
    email = data.email.strip().lower()
    name = data.name.strip()

    referrer = None
    if data.referral_code and data.referral_code.strip():
        code = data.referral_code.strip().upper()
        referrer = crud_user.get_user_by_referral_code(db, code=code)
        if referrer:
            logger.info(f"Registration of '{email}' uses referral code '{code}' of user {referrer.id}.")
        else:
            logger.info(f"Referral code '{code}' not found. Registering '{email}' without referrer.")

    existing_user = crud_user.get_user_by_email(db, email=email)
    if existing_user and existing_user.password_hash:
        logger.warning(f"Registration rejected: email '{email}' is already registered.")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User with this email already exists")

    try:
        if existing_user:
            logger.info(f"Claiming password-less account {existing_user.id} for '{email}'.")
            user = existing_user
            user.name = name
            user.password_hash = hash_password(data.password)
            if user.referrer_id is None and referrer and referrer.id != user.id:
                user.referrer_id = referrer.id
        else:
            user = crud_user.create_user(
                db,
                name=name,
                email=email,
                referral_code=generate_referral_code(db),
                password_hash=hash_password(data.password),
                referrer_id=referrer.id if referrer else None,
            )
        db.commit()
    except IntegrityError:
        # Параллельная регистрация с тем же email
        db.rollback()
        logger.warning(f"Integrity error while registering '{email}'.", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User with this email already exists")

    db.refresh(user)
    logger.info(f"User {user.id} registered (referrer: {user.referrer_id}).")

    access_token = create_access_token(data={"sub": str(user.id)})
    return RegisterResponse(access_token=access_token, user=UserRead.model_validate(user))
