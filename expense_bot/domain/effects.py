"""
Эффекты отображения, которые ядро отдаёт транспорту.

Ядро не знает о Telegram: оно возвращает описания того, что показать,
а адаптер (handlers.presenter) превращает их в сообщения и клавиатуры.
"""

from dataclasses import dataclass
from typing import Any, Protocol, Union


@dataclass(frozen=True)
class ShowChoices:
    """Показать упорядоченный список вариантов с подписью."""

    label: str
    choices: tuple[str, ...]


@dataclass(frozen=True)
class ShowText:
    text: str
    rich: bool = False


@dataclass(frozen=True)
class ShowTextRemoveChoices:
    """Показать текст и убрать активную клавиатуру выбора."""

    text: str
    rich: bool = False


Effect = Union[ShowChoices, ShowText, ShowTextRemoveChoices]


class Presenter(Protocol):
    async def render(self, effect: Effect) -> None: ...

    async def show_waiting(self) -> Any: ...

    async def clear_waiting(self, handle: Any) -> None: ...
