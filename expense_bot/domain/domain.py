"""
Доменные типы диалога добавления расхода.

Модуль описывает всё, что конвейер «категория → подкатегория → сумма»
хранит между сообщениями пользователя:
- Phase: текущий шаг диалога;
- Session: состояние одной беседы (шаг и сделанный выбор);
- Vocabulary: допустимые категории и подкатегории из конфигурации;
- ExpenseRecord: запись, которая уходит во внешний реестр;
- Period: месяц, в базу которого пишется запись.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import IntEnum, auto
from typing import Final, Optional

EMPTY_SUBCATEGORY: Final[str] = "[EMPTY]"
DEFAULT_COMMENT: Final[str] = "Added by @NotExpenseBot"


def is_empty_subcategory(subcategory: Optional[str]) -> bool:
    """Пустая строка и маркер [EMPTY] означают «без подкатегории»."""
    return not subcategory or subcategory == EMPTY_SUBCATEGORY


class Phase(IntEnum):
    """Шаги диалога. Порядок значений совпадает с порядком переходов."""

    IDLE = auto()
    AWAITING_CATEGORY = auto()
    AWAITING_SUBCATEGORY = auto()
    AWAITING_AMOUNT = auto()


@dataclass(frozen=True)
class Session:
    """
    Состояние одной беседы.

    Экземпляр неизменяемый: переходы возвращают новую сессию, а хранилище
    подменяет её под блокировкой.

    Attributes
    ----------
    phase : Phase
        Текущий шаг диалога.
    category : str, optional
        Выбранная категория, задана начиная с AWAITING_SUBCATEGORY.
    subcategory : str, optional
        Выбранная подкатегория, задана только в AWAITING_AMOUNT. Может быть
        маркером EMPTY_SUBCATEGORY.

    Raises
    ------
    ValueError
        Если поля не согласованы с шагом диалога.
    """

    phase: Phase = Phase.IDLE
    category: Optional[str] = None
    subcategory: Optional[str] = None

    def __post_init__(self) -> None:
        if self.subcategory is not None and self.category is None:
            raise ValueError("subcategory задана без category")
        if self.category is not None and self.phase < Phase.AWAITING_SUBCATEGORY:
            raise ValueError(f"category недопустима на шаге {self.phase.name}")
        if self.subcategory is not None and self.phase is not Phase.AWAITING_AMOUNT:
            raise ValueError(f"subcategory недопустима на шаге {self.phase.name}")
        if self.phase >= Phase.AWAITING_SUBCATEGORY and self.category is None:
            raise ValueError(f"на шаге {self.phase.name} нужна category")
        if self.phase is Phase.AWAITING_AMOUNT and self.subcategory is None:
            raise ValueError("на шаге AWAITING_AMOUNT нужна subcategory")


@dataclass(frozen=True)
class Vocabulary:
    """Упорядоченные списки допустимых категорий и подкатегорий."""

    categories: tuple[str, ...]
    subcategories: tuple[str, ...]

    def has_category(self, text: str) -> bool:
        return text in self.categories

    def has_subcategory(self, text: str) -> bool:
        return text in self.subcategories


@dataclass(frozen=True)
class ExpenseRecord:
    amount: Decimal
    category: str
    subcategory: str
    comment: str = DEFAULT_COMMENT

    @property
    def has_subcategory(self) -> bool:
        return not is_empty_subcategory(self.subcategory)


@dataclass(frozen=True)
class Period:
    """Календарный месяц, для которого ищется база в реестре."""

    year: int
    month: int

    @classmethod
    def from_datetime(cls, moment: Optional[datetime] = None) -> "Period":
        moment = moment or datetime.now()
        return cls(year=moment.year, month=moment.month)

    def __str__(self) -> str:
        return f"{self.year}-{self.month:02d}"
