"""
Валидаторы конфигурации
"""

from pathlib import Path
from typing import Optional

from expense_bot.config.config import Config
from expense_bot.config.settings import Settings, load_settings


def validate_environment(config_path: Optional[Path] = None) -> Settings:
    """Валидация окружения и загрузка config.toml."""
    Config.validate()
    return load_settings(config_path or Config.CONFIG_PATH)
