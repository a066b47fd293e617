# invest_api/core/redis.py
import redis.asyncio as redis
from invest_api.core.config import settings

# Асинхронный клиент Redis: кеш статистики админки и блокировка старта воркеров.
# decode_responses=True автоматически декодирует ответы из байтов в строки
redis_client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
