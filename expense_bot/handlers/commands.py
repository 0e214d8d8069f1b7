"""
Обработчики команд Telegram‑бота: /start, /help и /new.

Модуль инкапсулирует регистрацию и реализацию команд бота:
- /start: приветствие и публикация меню команд;
- /help: список доступных команд;
- /new: начать добавление расхода (сбрасывает незавершённый диалог).

Функция register_commands() выступает единой точкой подключения хендлеров
к экземпляру Application из python-telegram-bot.
"""

from typing import Final

from telegram import BotCommand, Update
from telegram.constants import ParseMode
from telegram.ext import Application, CommandHandler, ContextTypes

from expense_bot.core import texts
from expense_bot.core.engine import ConversationEngine
from expense_bot.core.logger import get_logger
from expense_bot.handlers.presenter import TelegramPresenter

logger = get_logger(__name__)

BOT_COMMANDS: Final[list[BotCommand]] = [
    BotCommand("start", "start the bot and show welcome message"),
    BotCommand("help", "display the list of available commands"),
    BotCommand("new", "add a new expense to the database"),
]


def help_text() -> str:
    lines = ["These commands are supported:"]
    lines.extend(f"/{command.command} - {command.description}" for command in BOT_COMMANDS)
    return "\n".join(lines)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Обработчик команды /start.

    Отправляет приветствие и публикует меню команд бота. Состояние диалога
    не трогает: добавление расхода начинается с /new.
    """
    await update.message.reply_text(texts.WELCOME, parse_mode=ParseMode.HTML)
    await context.bot.set_my_commands(BOT_COMMANDS)
    logger.info("Старт от chat=%s", update.effective_chat.id)


async def show_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(help_text())


async def new_expense(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработчик команды /new: перезапуск диалога с выбора категории."""
    chat_id = update.effective_chat.id
    engine: ConversationEngine = context.bot_data["engine"]
    await engine.begin(chat_id, TelegramPresenter(context.bot, chat_id))


def register_commands(app: Application) -> None:
    """
    Зарегистрировать обработчики команд в приложении Telegram‑бота.

    Parameters
    ----------
    app : Application
        Экземпляр приложения python-telegram-bot, на котором регистрируются
        обработчики команд.
    """
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("help", show_help))
    app.add_handler(CommandHandler("new", new_expense))
