"""
Обработчик текстовых сообщений диалога добавления расхода.

Любой текст, который не является командой, передаётся в ConversationEngine.
Какой шаг его обработает (категория, подкатегория или сумма), решает
движок по состоянию сессии беседы. Ключом сессии служит chat id.
"""

from telegram import Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from expense_bot.core.engine import ConversationEngine
from expense_bot.handlers.presenter import TelegramPresenter


async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message or not update.message.text:
        return

    chat_id = update.effective_chat.id
    engine: ConversationEngine = context.bot_data["engine"]
    await engine.handle_text(
        chat_id, update.message.text, TelegramPresenter(context.bot, chat_id)
    )


def register_expenses(app: Application) -> None:
    """
    Подключить MessageHandler для любых текстовых сообщений (filters.TEXT),
    кроме команд (filters.COMMAND).
    """
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text))
