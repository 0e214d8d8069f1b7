"""
Проверка доступа к боту.

Обработчик регистрируется в группе -1, поэтому срабатывает раньше команд
и текстовых сообщений. Если доступ ограничен и беседы нет в allowed_users,
пользователь получает отказ, а дальнейшая обработка обновления
останавливается через ApplicationHandlerStop: ядро такие сообщения
не видит.
"""

from typing import Optional

from telegram import Update
from telegram.ext import Application, ApplicationHandlerStop, ContextTypes, TypeHandler

from expense_bot.config.settings import Settings
from expense_bot.core import texts
from expense_bot.core.logger import get_logger

logger = get_logger(__name__)


def is_chat_allowed(chat_id: Optional[int], settings: Settings) -> bool:
    """Разрешена ли беседа при текущих настройках белого списка."""
    if not settings.restrict_access:
        return True
    return chat_id is not None and chat_id in settings.allowed_users


async def check_access(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    settings: Settings = context.bot_data["settings"]
    chat_id = update.effective_chat.id if update.effective_chat else None

    if is_chat_allowed(chat_id, settings):
        return

    logger.warning("Попытка доступа без разрешения: chat=%s", chat_id)
    if update.effective_message:
        await update.effective_message.reply_text(texts.NOT_AUTHORIZED)
    raise ApplicationHandlerStop


def register_access(app: Application) -> None:
    app.add_handler(TypeHandler(Update, check_access), group=-1)
