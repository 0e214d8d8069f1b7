"""
Настройка логирования приложения (единая точка входа).

Модуль инкапсулирует конфигурацию стандартного logging, чтобы в остальном
коде не дублировать настройку форматирования, уровней и хендлеров.

- setup_logger() вызывается из run.py: задаёт формат, уровень, вывод в
  stdout и, если указан путь, дублирует записи в файл;
- get_logger() используют остальные модули, ничего не перенастраивая.
"""

import logging
import sys
from pathlib import Path
from typing import Final, Optional
from logging import FileHandler, Handler, Logger, StreamHandler


LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logger(
    name: str = __name__,
    level: str = "INFO",
    log_path: Optional[Path] = None,
) -> Logger:
    """
    Создать и настроить логгер приложения.

    Функция задаёт формат сообщений, подключает вывод в stdout и устанавливает
    глобальный уровень логирования через logging.basicConfig(). Повторный
    вызов перезаписывает конфигурацию, поэтому run.py может сначала поднять
    логирование в консоль, а после чтения config.toml добавить файл.

    Parameters
    ----------
    name : str, optional
        Имя логгера, обычно __name__ модуля, который вызывает функцию.
    level : str, optional
        Строковый уровень логирования: "DEBUG", "INFO", "WARNING",
        "ERROR" или "CRITICAL". Значения в нижнем регистре также
        поддерживаются. При некорректном значении используется "INFO".
    log_path : Path, optional
        Файл, в который дополнительно пишутся логи.

    Returns
    -------
    Logger
        Сконфигурированный экземпляр логгера.
    """
    log_levels: dict[str, int] = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_levels.get(level.upper(), logging.INFO)

    handlers: list[Handler] = [StreamHandler(sys.stdout)]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,  # Явно перезаписывает предыдущую конфигурацию logging
    )
    # httpx пишет каждый запрос на INFO, а в запросах к Telegram есть токен
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger(name)


def get_logger(name: str) -> Logger:
    """Именованный логгер модуля без перенастройки хендлеров."""
    return logging.getLogger(name)
