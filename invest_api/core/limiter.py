# invest_api/core/limiter.py

import logging
from typing import Optional

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from invest_api.core.config import settings
from invest_api.models.user import User

logger = logging.getLogger(__name__)

# --- Функция-ключ для идентификации запросов ---

def key_func(request: Request) -> str:
    """
    Определяет, как идентифицировать запрос для применения лимита.
    Приоритет: ID пользователя (если авторизован) -> IP-адрес.
    """
    # Пользователь кладется в request.state зависимостями аутентификации
    user: Optional[User] = getattr(request.state, "user", None)

    if user and user.id:
        return f"user:{user.id}"

    return get_remote_address(request)

# --- Создание и конфигурация лимитера ---
# Счетчики хранятся в Redis, стратегия 'moving-window'.
# При RATE_LIMIT_ENABLED=false лимитер отключен и Redis ему не нужен.
limiter = Limiter(
    key_func=key_func,
    storage_uri=settings.REDIS_URL if settings.RATE_LIMIT_ENABLED else "memory://",
    strategy="moving-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)
