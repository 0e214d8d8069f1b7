"""
Expense Bot Entry Point
Единая точка входа (main)
"""

import sys

from expense_bot.config.config import Config
from expense_bot.core.logger import setup_logger
from expense_bot.core.validators import validate_environment
from expense_bot.bot import create_application


def main() -> None:
    """Главная точка входа."""
    logger = setup_logger(level=Config.LOG_LEVEL)

    try:
        logger.info("🚀 Запускаем Expense Bot...")
        settings = validate_environment()
        logger = setup_logger(level=Config.LOG_LEVEL, log_path=settings.log_path)

        app = create_application(settings)
        app.run_polling(drop_pending_updates=True)
        logger.info("🛑 Бот остановлен")

    except KeyboardInterrupt:
        logger.info("🛑 Остановка по Ctrl+C")
    except Exception as e:
        logger.error(f"💥 Критическая ошибка: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
