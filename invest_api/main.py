# invest_api/main.py

import asyncio
import logging
import traceback
from contextlib import asynccontextmanager
from html import escape

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Конфигурация и ядро
from invest_api.core.config import settings as config
from invest_api.core.limiter import limiter
from invest_api.core.logging_config import setup_logging
from invest_api.core.redis import redis_client
from invest_api.db.session import Database
import invest_api.db.base  # noqa: F401  регистрирует все модели

# Роутеры FastAPI
from invest_api.routers.v1.api import api_router

# Уведомления и фоновые задачи
from invest_api.bot.core import bot
from invest_api.bot.services import notification as bot_notification_service
from invest_api.services.upload_cleanup import cleanup_orphaned_uploads_task

# --- Инициализация ---
logger = logging.getLogger(__name__)
scheduler = AsyncIOScheduler()

STARTUP_LOCK_KEY = "invest_api_startup_lock"


MAX_ALERT_URL_LENGTH = 500


# --- Обработчики ошибок ---
def build_error_message(request: Request, exc: Exception) -> str:
    """
    HTML-сообщение об ошибке для Telegram.
    Traceback обрезается до вставки в <pre>, чтобы теги всегда оставались закрытыми.
    """
    header = (
        f"🚨 <b>Критическая ошибка в API!</b>\n\n"
        f"<b>URL:</b> <code>{request.method} {escape(str(request.url)[:MAX_ALERT_URL_LENGTH])}</code>\n\n"
        f"<b>Traceback:</b>\n<pre>"
    )
    footer = "</pre>"
    budget = bot_notification_service.MAX_MESSAGE_LENGTH - len(header) - len(footer)

    error_details = escape("".join(traceback.format_exception(exc)))
    if len(error_details) > budget:
        # Оставляем конец traceback, там само исключение
        error_details = "...\n" + error_details[-(budget - 4):]
    return header + error_details + footer


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Глобальный обработчик для всех необработанных исключений.
    Логирует ошибку и отправляет уведомление в админский чат.
    """
    logger.critical(f"Unhandled exception for request: {request.method} {request.url}", exc_info=True)

    error_message = build_error_message(request, exc)
    asyncio.create_task(bot_notification_service.send_error_to_admins(error_message))

    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


async def _acquire_startup_lock() -> bool:
    """Блокировка через Redis: фоновые задачи запускает только один воркер."""
    try:
        return bool(await redis_client.set(STARTUP_LOCK_KEY, "1", ex=60, nx=True))
    except RedisError:
        logger.warning("Redis is unavailable. Starting scheduler in this worker.", exc_info=True)
        return True


# --- Lifespan Manager (запуск и остановка приложения) ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Application lifespan startup...")

    # Движок БД живет столько же, сколько приложение
    database = Database(config.DATABASE_URL)
    app.state.database = database

    is_main_worker = await _acquire_startup_lock()
    if is_main_worker:
        logger.info("This is the main worker. Starting background jobs...")
        if not scheduler.running:
            scheduler.add_job(
                cleanup_orphaned_uploads_task, 'cron', hour=4, minute=0,
                args=[database], id="cleanup_orphaned_uploads", replace_existing=True
            )
            scheduler.start()
            logger.info("Scheduler started with background jobs.")
    else:
        logger.info("This is a secondary worker. Skipping scheduler setup.")

    yield

    # Код при остановке
    if is_main_worker:
        logger.info("Main worker shutting down...")
        if scheduler.running:
            scheduler.shutdown()
            logger.info("Scheduler shut down.")
        try:
            await redis_client.delete(STARTUP_LOCK_KEY)
        except RedisError:
            logger.warning("Failed to release startup lock.", exc_info=True)
    else:
        logger.info("Secondary worker shutting down.")

    if bot is not None:
        await bot.session.close()
    database.dispose()


# --- Создание FastAPI приложения ---
app = FastAPI(
    title="USDT Investment Platform API",
    description="Backend for USDT deposits, withdrawals and a two-level referral program",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Лимиты запросов ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Регистрация обработчиков исключений ---
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Подключение роутеров FastAPI ---
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok"}
