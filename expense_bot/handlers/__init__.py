"""
Handlers Registry
Единая точка регистрации всех handlers
"""

from telegram.ext import Application

from expense_bot.handlers.access import register_access
from expense_bot.handlers.commands import register_commands
from expense_bot.handlers.errors import register_errors
from expense_bot.handlers.expenses import register_expenses


def register_handlers(app: Application) -> None:
    """Регистрация всех handlers."""
    register_access(app)
    register_commands(app)
    register_expenses(app)
    register_errors(app)
