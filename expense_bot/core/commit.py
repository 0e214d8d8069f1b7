"""
Фиксация расхода во внешнем реестре.

Конвейер из трёх шагов: найти базу текущего месяца, собрать запись,
отправить её ровно один раз. Итог возвращается в CommitResult: успех или
ошибка с указанием этапа. Частичных результатов нет, а детали сбоя
пишутся в лог, пользователю они не показываются.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from expense_bot.core.logger import get_logger
from expense_bot.domain.domain import ExpenseRecord, Period
from expense_bot.domain.errors import LedgerError
from expense_bot.ledger.base import Ledger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommitResult:
    period: Period
    destination: Optional[str] = None
    error: Optional[LedgerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def commit_expense(
    ledger: Ledger, record: ExpenseRecord, now: Optional[datetime] = None
) -> CommitResult:
    """
    Записать расход в базу текущего периода.

    Parameters
    ----------
    ledger : Ledger
        Реестр расходов.
    record : ExpenseRecord
        Проверенная запись (сумма уже округлена).
    now : datetime, optional
        Момент, по которому выбирается период. По умолчанию текущий.

    Returns
    -------
    CommitResult
        Итог записи. Исключения LedgerError не пробрасываются.

    Notes
    -----
    Если база не найдена, запись не отправляется. Повторов нет: на один вызов
    приходится не больше одного запроса на запись.
    """
    period = Period.from_datetime(now)

    try:
        destination = await ledger.resolve_destination(period)
    except LedgerError as e:
        logger.error(
            "Ошибка записи расхода: этап=%s, период=%s, причина=%s",
            e.stage,
            period,
            e,
        )
        return CommitResult(period=period, error=e)

    try:
        await ledger.submit_record(destination, record)
    except LedgerError as e:
        logger.error(
            "Ошибка записи расхода: этап=%s, период=%s, база=%s, причина=%s",
            e.stage,
            period,
            destination,
            e,
        )
        return CommitResult(period=period, destination=destination, error=e)

    logger.info(
        "Расход добавлен: %s (%s / %s) в базу %s за %s",
        record.amount,
        record.category,
        record.subcategory,
        destination,
        period,
    )
    return CommitResult(period=period, destination=destination)
