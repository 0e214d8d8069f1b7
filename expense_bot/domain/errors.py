"""
Иерархия ошибок бота.

Ошибки ввода наследуют ValueError, как и в парсере сумм: пользователь
получает подсказку и может повторить шаг. Ошибки реестра несут этап
(resolve/submit), на котором сорвалась запись, чтобы лог был понятен
без воспроизведения.
"""

from typing import Optional


class ConfigError(ValueError):
    """Некорректная или неполная конфигурация при старте."""


class InvalidAmountError(ValueError):
    """Сумма не распознана как конечное число."""


class NegativeAmountError(ValueError):
    """Сумма меньше нуля."""


class InvalidTransitionError(RuntimeError):
    """Переход вызван на неподходящем шаге диалога."""


class LedgerError(Exception):
    """Базовая ошибка внешнего реестра расходов."""

    stage: str = "ledger"


class DestinationNotFoundError(LedgerError):
    """Для текущего периода не найдена база в реестре."""

    stage = "resolve"


class SubmissionRejectedError(LedgerError):
    """Реестр ответил кодом, отличным от успешного."""

    stage = "submit"

    def __init__(self, status_code: int, detail: Optional[str] = None) -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"реестр вернул статус {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class LedgerTransportError(LedgerError):
    """Сетевая ошибка или таймаут при обращении к реестру."""

    stage = "submit"
