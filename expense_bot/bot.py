"""
Сборка приложения python-telegram-bot.

create_application() связывает настройки, хранилище сессий, реестр Notion
и движок диалога и кладёт их в bot_data, откуда их берут хендлеры.
Обновления обрабатываются конкурентно, а сообщения одной беседы
упорядочивает блокировка её сессии.
"""

from telegram.ext import Application

from expense_bot.config.config import Config
from expense_bot.config.settings import Settings
from expense_bot.core.engine import ConversationEngine
from expense_bot.handlers import register_handlers
from expense_bot.ledger.destinations import DestinationRegistry
from expense_bot.ledger.notion import NotionLedger
from expense_bot.storage.sessions import SessionStore


def build_engine(settings: Settings) -> ConversationEngine:
    ledger = NotionLedger(Config.NOTION_TOKEN, DestinationRegistry(Config.DESTINATIONS_PATH))
    return ConversationEngine(
        store=SessionStore(),
        vocabulary=settings.vocabulary,
        ledger=ledger,
        currency=settings.default_currency,
        comment=settings.comment,
    )


def create_application(settings: Settings) -> Application:
    app = (
        Application.builder()
        .token(Config.TELEGRAM_TOKEN)
        .concurrent_updates(True)
        .build()
    )
    app.bot_data["settings"] = settings
    app.bot_data["engine"] = build_engine(settings)

    register_handlers(app)
    return app
