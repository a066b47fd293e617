# invest_api/dependencies.py

import logging
from typing import Iterator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from invest_api.core.config import settings
from invest_api.crud import user as crud_user
from invest_api.models.user import User

# --- Инициализация логгера ---
logger = logging.getLogger(__name__)

# --- Схема аутентификации ---
# auto_error=False: отсутствие токена обрабатываем сами, чтобы всегда отдавать 401
bearer_scheme = HTTPBearer(auto_error=False)

# --- Управление сессией БД ---
def get_db(request: Request) -> Iterator[Session]:
    """
    Основная зависимость FastAPI для получения сессии БД.
    Сессия берется из объекта Database, созданного в lifespan приложения.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()

# --- Зависимости аутентификации и авторизации ---

def _decode_user_id(token: str) -> Optional[int]:
    """Достает ID пользователя из JWT. None, если токен невалиден."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT Error during token decoding: {e}")
        return None

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        logger.warning("Token payload is missing a valid 'sub' (user_id).")
        return None
    return int(user_id)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    ОБЯЗАТЕЛЬНАЯ зависимость.
    Требует валидный токен. Если его нет или он невалиден - вызывает ошибку 401.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not credentials:
        raise credentials_exception

    user_id = _decode_user_id(credentials.credentials)
    if user_id is None:
        raise credentials_exception

    user = crud_user.get_user_by_id(db, user_id=user_id)
    if user is None:
        logger.warning(f"User with ID {user_id} from token not found in DB.")
        raise credentials_exception
    request.state.user = user
    logger.debug(f"Successfully authenticated user ID: {user.id}")
    return user


def get_optional_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    ОПЦИОНАЛЬНАЯ зависимость.
    Если токен предоставлен и валиден - возвращает пользователя.
    Если токен не предоставлен или невалиден - возвращает None.
    """
    if not credentials:
        return None

    user_id = _decode_user_id(credentials.credentials)
    if user_id is None:
        return None

    user = crud_user.get_user_by_id(db, user_id=user_id)
    request.state.user = user
    if not user:
        logger.warning(f"Optional user with ID {user_id} from token not found in DB.")
    return user


def is_admin(user: User) -> bool:
    return bool(user.email) and user.email.lower() in settings.ADMIN_EMAILS


def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Зависимость для защиты админских эндпоинтов.
    Администраторы задаются списком email в ADMIN_EMAILS.
    """
    if not is_admin(current_user):
        logger.warning(f"Permission denied for user {current_user.id}: not in ADMIN_EMAILS.")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this resource."
        )

    logger.info(f"Admin access GRANTED for user {current_user.id}.")
    return current_user
