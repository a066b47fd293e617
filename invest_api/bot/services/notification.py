# invest_api/bot/services/notification.py
import logging
from html import escape

from aiogram.exceptions import TelegramAPIError

from invest_api.bot.core import bot
from invest_api.core.config import settings
from invest_api.schemas.deposit import DepositRead
from invest_api.schemas.withdrawal import WithdrawalRead

logger = logging.getLogger(__name__)

# Лимит Telegram на длину сообщения
MAX_MESSAGE_LENGTH = 4096


async def _send_to_admin_chat(text: str) -> bool:
    """
    Отправляет сообщение в админский чат.
    Возвращает False, если бот не настроен или Telegram вернул ошибку.
    """
    if bot is None or not settings.ADMIN_CHAT_ID:
        logger.debug("Telegram bot or ADMIN_CHAT_ID is not configured. Skipping admin notification.")
        return False

    if len(text) > MAX_MESSAGE_LENGTH:
        text = text[:MAX_MESSAGE_LENGTH - 6] + "\n[...]"

    try:
        await bot.send_message(chat_id=settings.ADMIN_CHAT_ID, text=text)
        return True
    except TelegramAPIError as e:
        logger.error(f"Failed to send notification to admin chat {settings.ADMIN_CHAT_ID}: {e}")
        return False


async def send_new_deposit_to_admin(deposit: DepositRead) -> bool:
    """Уведомление о новой заявке на депозит."""
    message = (
        f"💰 <b>Новый депозит #{deposit.id}</b>\n\n"
        f"<b>Пользователь:</b> {escape(deposit.name)} ({escape(deposit.email)})\n"
        f"<b>Сумма:</b> {deposit.amount} USDT ({deposit.network.value})\n"
        f"<b>Хеш:</b> <code>{escape(deposit.transaction_hash or '-')}</code>\n\n"
        f"Ожидает проверки."
    )
    return await _send_to_admin_chat(message)


async def send_new_withdrawal_to_admin(withdrawal: WithdrawalRead, user_email: str) -> bool:
    """Уведомление о новой заявке на вывод средств."""
    message = (
        f"📤 <b>Заявка на вывод #{withdrawal.id}</b>\n\n"
        f"<b>Пользователь:</b> {escape(user_email)}\n"
        f"<b>Сумма:</b> {withdrawal.amount} USDT ({withdrawal.network.value})\n"
        f"<b>Кошелек:</b> <code>{escape(withdrawal.wallet_address)}</code>\n"
        f"<b>UID:</b> <code>{withdrawal.transaction_uid}</code>"
    )
    return await _send_to_admin_chat(message)


async def send_error_to_admins(error_message: str) -> bool:
    """Отправляет сообщение о критической ошибке API в админский чат."""
    return await _send_to_admin_chat(error_message)
