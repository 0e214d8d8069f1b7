"""
Контракт внешнего реестра расходов.

Ядру нужны ровно две операции: найти базу для текущего периода и добавить
в неё запись. Обе сообщают о сбое исключениями из иерархии LedgerError.
"""

from typing import Protocol

from expense_bot.domain.domain import ExpenseRecord, Period


class Ledger(Protocol):
    async def resolve_destination(self, period: Period) -> str:
        """Вернуть идентификатор базы для периода или бросить DestinationNotFoundError."""
        ...

    async def submit_record(self, destination: str, record: ExpenseRecord) -> None:
        """Добавить запись или бросить SubmissionRejectedError/LedgerTransportError."""
        ...
