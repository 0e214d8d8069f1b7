"""
Настройки диалога из config.toml.

Секреты живут в .env (см. Config), а здесь то, что владелец бота
правит руками: списки категорий и подкатегорий, валюта, белый список
пользователей и путь к файлу логов. Файл читается один раз при старте,
дальше настройки неизменны.

Пример config.toml::

    categories = ["Food", "Transport"]
    subcategories = ["Groceries", "Taxi", "[EMPTY]"]
    default_currency = "EUR"
    restrict_access = true
    allowed_users = [123456789]
    log_path = "bot.log"
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from expense_bot.domain.domain import DEFAULT_COMMENT, Vocabulary
from expense_bot.domain.errors import ConfigError


@dataclass(frozen=True)
class Settings:
    categories: tuple[str, ...]
    subcategories: tuple[str, ...]
    default_currency: str
    restrict_access: bool = False
    allowed_users: frozenset[int] = frozenset()
    log_path: Optional[Path] = None
    comment: str = DEFAULT_COMMENT

    @property
    def vocabulary(self) -> Vocabulary:
        return Vocabulary(categories=self.categories, subcategories=self.subcategories)


def _string_list(data: dict[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key)
    if not isinstance(value, list) or not value:
        raise ConfigError(f"❌ {key} должен быть непустым списком строк")
    if not all(isinstance(item, str) for item in value):
        raise ConfigError(f"❌ {key} должен содержать только строки")
    return tuple(value)


def parse_settings(data: dict[str, Any]) -> Settings:
    """
    Собрать Settings из уже разобранного TOML-словаря.

    Parameters
    ----------
    data : dict[str, Any]
        Содержимое config.toml.

    Returns
    -------
    Settings
        Проверенные настройки.

    Raises
    ------
    ConfigError
        Если обязательные ключи отсутствуют или имеют неверный тип.
    """
    categories = _string_list(data, "categories")
    subcategories = _string_list(data, "subcategories")

    currency = data.get("default_currency")
    if not isinstance(currency, str) or not currency.strip():
        raise ConfigError("❌ default_currency не задана в конфигурации")

    allowed_raw = data.get("allowed_users", [])
    if not isinstance(allowed_raw, list) or not all(
        isinstance(user_id, int) for user_id in allowed_raw
    ):
        raise ConfigError("❌ allowed_users должен быть списком целых чисел")

    restrict_access = data.get("restrict_access", False)
    if not isinstance(restrict_access, bool):
        raise ConfigError("❌ restrict_access должен быть true или false")

    log_path = data.get("log_path")
    comment = data.get("comment", DEFAULT_COMMENT)

    return Settings(
        categories=categories,
        subcategories=subcategories,
        default_currency=currency.strip(),
        restrict_access=restrict_access,
        allowed_users=frozenset(allowed_raw),
        log_path=Path(log_path) if log_path else None,
        comment=str(comment),
    )


def load_settings(path: Path) -> Settings:
    """Прочитать и проверить config.toml."""
    if not path.exists():
        raise ConfigError(f"❌ Файл конфигурации не найден: {path.absolute()}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"❌ Не удалось разобрать {path}: {e}") from e

    return parse_settings(data)
