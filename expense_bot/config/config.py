"""
Конфигурация приложения и переменные окружения
"""

from pathlib import Path
from typing import Final
from dotenv import load_dotenv
import os

from expense_bot.domain.errors import ConfigError

load_dotenv()


class Config:
    TELEGRAM_TOKEN: Final[str] = os.getenv("TELEGRAM_TOKEN", "")
    NOTION_TOKEN: Final[str] = os.getenv("NOTION_TOKEN", "")
    CONFIG_PATH: Final[Path] = Path(os.getenv("CONFIG_PATH", "config.toml"))
    DESTINATIONS_PATH: Final[Path] = Path(os.getenv("DESTINATIONS_PATH", "data.json"))
    LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """SRP: проверка обязательных переменных."""
        if not cls.TELEGRAM_TOKEN:
            raise ConfigError("❌ TELEGRAM_TOKEN не найден в .env!")
        if not cls.NOTION_TOKEN:
            raise ConfigError("❌ NOTION_TOKEN не найден в .env!")
