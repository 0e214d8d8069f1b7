from __future__ import annotations

from pathlib import Path

import pytest

from expense_bot.config.settings import load_settings, parse_settings
from expense_bot.domain.errors import ConfigError

VALID_TOML = """
categories = ["Food", "Transport"]
subcategories = ["Groceries", "[EMPTY]"]
default_currency = "EUR"
restrict_access = true
allowed_users = [1001, 1002]
log_path = "logs/bot.log"
"""


def test_load_settings(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(VALID_TOML, encoding="utf-8")

    settings = load_settings(path)

    assert settings.categories == ("Food", "Transport")
    assert settings.vocabulary.has_subcategory("[EMPTY]")
    assert settings.default_currency == "EUR"
    assert settings.restrict_access is True
    assert settings.allowed_users == frozenset({1001, 1002})
    assert settings.log_path == Path("logs/bot.log")
    assert settings.comment == "Added by @NotExpenseBot"


def test_optional_keys_have_defaults() -> None:
    settings = parse_settings(
        {"categories": ["Food"], "subcategories": ["[EMPTY]"], "default_currency": "USD"}
    )

    assert settings.restrict_access is False
    assert settings.allowed_users == frozenset()
    assert settings.log_path is None


@pytest.mark.parametrize(
    "data",
    [
        {"subcategories": ["x"], "default_currency": "EUR"},
        {"categories": [], "subcategories": ["x"], "default_currency": "EUR"},
        {"categories": ["a", 1], "subcategories": ["x"], "default_currency": "EUR"},
        {"categories": ["a"], "subcategories": ["x"]},
        {"categories": ["a"], "subcategories": ["x"], "default_currency": "EUR", "allowed_users": ["1"]},
        {"categories": ["a"], "subcategories": ["x"], "default_currency": "EUR", "restrict_access": "false"},
        {"categories": ["a"], "subcategories": ["x"], "default_currency": "EUR", "restrict_access": 1},
    ],
)
def test_invalid_settings_raise(data: dict) -> None:
    with pytest.raises(ConfigError):
        parse_settings(data)


def test_missing_or_broken_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "absent.toml")

    broken = tmp_path / "broken.toml"
    broken.write_text("categories = [", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(broken)
