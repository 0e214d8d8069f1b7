"""
Обработчик непредвиденных ошибок.

Ошибка одного обновления пишется в лог с трассировкой, а пользователь
получает короткое сообщение. Остальные беседы продолжают работать.
"""

from telegram import Update
from telegram.ext import Application, ContextTypes

from expense_bot.core import texts
from expense_bot.core.logger import get_logger

logger = get_logger(__name__)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Критическая ошибка при обработке обновления: %s", context.error, exc_info=context.error)

    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text(texts.UNEXPECTED_ERROR)


def register_errors(app: Application) -> None:
    app.add_error_handler(on_error)
