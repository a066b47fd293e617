# invest_api/bot/core.py
from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from invest_api.core.config import settings

# Бот нужен только для уведомлений администраторов.
# Без TELEGRAM_BOT_TOKEN уведомления просто не отправляются.
default_properties = DefaultBotProperties(parse_mode=ParseMode.HTML)

bot = Bot(token=settings.TELEGRAM_BOT_TOKEN, default=default_properties) if settings.TELEGRAM_BOT_TOKEN else None
