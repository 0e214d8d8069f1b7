"""
Конечный автомат диалога добавления расхода.

Диалог идёт по шагам IDLE → AWAITING_CATEGORY → AWAITING_SUBCATEGORY →
AWAITING_AMOUNT → IDLE. Модуль состоит из двух частей:

- чистые функции переходов (begin, select_category, select_subcategory,
  parse_amount). Они принимают сессию и текст и возвращают новую сессию
  вместе с эффектами отображения, ничего не меняя на месте;
- ConversationEngine. Он берёт блокировку сессии, выбирает переход по
  текущему шагу и отрисовывает эффекты через Presenter. На шаге суммы он
  же запускает запись в реестр.

Текст принимается только обработчиком активного шага: название категории,
присланное на шаге суммы, считается некорректной суммой, а не сменой
категории. Начать заново можно только командой /new.
"""

from collections.abc import Hashable, Iterable
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from html import escape
from typing import Final

from expense_bot.core import texts
from expense_bot.core.commit import commit_expense
from expense_bot.core.logger import get_logger
from expense_bot.domain.domain import (
    DEFAULT_COMMENT,
    EMPTY_SUBCATEGORY,
    ExpenseRecord,
    Phase,
    Session,
    Vocabulary,
    is_empty_subcategory,
)
from expense_bot.domain.effects import (
    Effect,
    Presenter,
    ShowChoices,
    ShowText,
    ShowTextRemoveChoices,
)
from expense_bot.domain.errors import (
    InvalidAmountError,
    InvalidTransitionError,
    NegativeAmountError,
)
from expense_bot.ledger.base import Ledger
from expense_bot.storage.sessions import SessionSlot, SessionStore

logger = get_logger(__name__)

AMOUNT_PRECISION: Final[Decimal] = Decimal("0.01")


@dataclass(frozen=True)
class Transition:
    session: Session
    effects: tuple[Effect, ...] = ()


def _choices(label: str, choices: Iterable[str]) -> ShowChoices:
    return ShowChoices(label=texts.CHOOSE_TEMPLATE.format(label=label), choices=tuple(choices))


def _require_phase(session: Session, expected: Phase) -> None:
    if session.phase is not expected:
        raise InvalidTransitionError(
            f"ожидался шаг {expected.name}, текущий {session.phase.name}"
        )


def begin(session: Session, vocabulary: Vocabulary) -> Transition:
    """Начать диалог заново с любого шага."""
    return Transition(
        session=Session(phase=Phase.AWAITING_CATEGORY),
        effects=(
            ShowText(texts.NEW_EXPENSE),
            _choices(texts.CATEGORY_LABEL, vocabulary.categories),
        ),
    )


def select_category(session: Session, text: str, vocabulary: Vocabulary) -> Transition:
    """
    Принять категорию на шаге AWAITING_CATEGORY.

    Parameters
    ----------
    session : Session
        Текущая сессия.
    text : str
        Текст сообщения пользователя.
    vocabulary : Vocabulary
        Допустимые категории и подкатегории.

    Returns
    -------
    Transition
        Новая сессия на шаге AWAITING_SUBCATEGORY и меню подкатегорий либо,
        если категории нет в списке, та же сессия и сообщение об ошибке.

    Raises
    ------
    InvalidTransitionError
        Если сессия не на шаге AWAITING_CATEGORY.
    """
    _require_phase(session, Phase.AWAITING_CATEGORY)
    category = text.strip()
    if not vocabulary.has_category(category):
        return Transition(session=session, effects=(ShowText(texts.INVALID_CATEGORY),))

    return Transition(
        session=replace(session, phase=Phase.AWAITING_SUBCATEGORY, category=category),
        effects=(_choices(texts.SUBCATEGORY_LABEL, vocabulary.subcategories),),
    )


def select_subcategory(
    session: Session, text: str, vocabulary: Vocabulary, currency: str
) -> Transition:
    """Принять подкатегорию на шаге AWAITING_SUBCATEGORY и запросить сумму."""
    _require_phase(session, Phase.AWAITING_SUBCATEGORY)
    subcategory = text.strip()
    if not vocabulary.has_subcategory(subcategory):
        return Transition(session=session, effects=(ShowText(texts.INVALID_SUBCATEGORY),))

    return Transition(
        session=replace(session, phase=Phase.AWAITING_AMOUNT, subcategory=subcategory),
        effects=(
            ShowTextRemoveChoices(texts.AMOUNT_PROMPT_TEMPLATE.format(currency=currency)),
        ),
    )


def parse_amount(text: str) -> Decimal:
    """
    Распарсить сумму расхода.

    Допускается точка или запятая в качестве разделителя, но не
    подчёркивания вроде "1_000". "-0" считается нулём. Результат округляется
    до копеек по правилу half-up: "12.345" → 12.35.

    Raises
    ------
    InvalidAmountError
        Если текст не является конечным числом.
    NegativeAmountError
        Если сумма меньше нуля.
    """
    raw = text.strip().replace(",", ".")
    if "_" in raw:
        raise InvalidAmountError(texts.INVALID_AMOUNT)
    try:
        amount = Decimal(raw)
    except InvalidOperation as e:
        raise InvalidAmountError(texts.INVALID_AMOUNT) from e

    if not amount.is_finite():
        raise InvalidAmountError(texts.INVALID_AMOUNT)
    if amount < 0:
        raise NegativeAmountError(texts.NEGATIVE_AMOUNT)
    if amount.is_zero():
        amount = amount.copy_abs()

    try:
        return amount.quantize(AMOUNT_PRECISION, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidAmountError(texts.INVALID_AMOUNT) from e


def confirmation_text(
    amount: Decimal, currency: str, category: str, subcategory: str
) -> str:
    """HTML-подтверждение; строка подкатегории только если она выбрана."""
    lines = [
        "✅ <b>Expense added</b>!",
        "",
        f"<b>Amount</b>: {amount:.2f} {escape(currency)}",
        f"<b>Category</b>: {escape(category)}",
    ]
    if not is_empty_subcategory(subcategory):
        lines.append(f"<b>Subcategory</b>: {escape(subcategory)}")
    return "\n".join(lines)


class ConversationEngine:
    """
    Диалог добавления расхода поверх хранилища сессий.

    Каждый вызов держит блокировку сессии на всё время перехода, включая
    запись в реестр. Второе сообщение той же беседы ждёт, пока первое
    не вернёт сессию в IDLE.
    """

    def __init__(
        self,
        store: SessionStore,
        vocabulary: Vocabulary,
        ledger: Ledger,
        currency: str,
        comment: str = DEFAULT_COMMENT,
    ) -> None:
        self._store = store
        self._vocabulary = vocabulary
        self._ledger = ledger
        self._currency = currency
        self._comment = comment

    async def begin(self, key: Hashable, presenter: Presenter) -> None:
        async with self._store.locked(key) as slot:
            transition = begin(slot.session, self._vocabulary)
            slot.session = transition.session
            logger.info("Новый расход: chat=%s", key)
            await self._render(presenter, transition.effects)

    async def handle_text(self, key: Hashable, text: str, presenter: Presenter) -> None:
        """Передать текст обработчику текущего шага диалога."""
        async with self._store.locked(key) as slot:
            phase = slot.session.phase

            if phase is Phase.AWAITING_AMOUNT:
                await self.submit_amount(slot, text, presenter)
                return

            if phase is Phase.AWAITING_CATEGORY:
                transition = select_category(slot.session, text, self._vocabulary)
            elif phase is Phase.AWAITING_SUBCATEGORY:
                transition = select_subcategory(
                    slot.session, text, self._vocabulary, self._currency
                )
            else:
                transition = Transition(slot.session, (ShowText(texts.IDLE_HINT),))

            if transition.session is slot.session and phase is not Phase.IDLE:
                logger.warning("Отклонён ввод на шаге %s: chat=%s", phase.name, key)
            slot.session = transition.session
            await self._render(presenter, transition.effects)

    async def submit_amount(
        self, slot: SessionSlot, text: str, presenter: Presenter
    ) -> None:
        """
        Принять сумму и записать расход.

        Вызывается с уже захваченной ячейкой сессии (см. SessionStore.locked).
        Некорректная сумма оставляет сессию как есть. После попытки записи
        сессия сбрасывается в IDLE при любом исходе, а индикатор ожидания
        убирается, даже если запись упала с непредвиденной ошибкой.
        """
        session = slot.session
        _require_phase(session, Phase.AWAITING_AMOUNT)

        try:
            amount = parse_amount(text)
        except (InvalidAmountError, NegativeAmountError) as e:
            await presenter.render(ShowText(str(e)))
            return

        record = ExpenseRecord(
            amount=amount,
            category=session.category or "",
            subcategory=session.subcategory or EMPTY_SUBCATEGORY,
            comment=self._comment,
        )

        waiting = await presenter.show_waiting()
        try:
            result = await commit_expense(self._ledger, record)
        finally:
            slot.session = Session()
            await presenter.clear_waiting(waiting)

        if result.ok:
            await presenter.render(
                ShowText(
                    confirmation_text(
                        record.amount, self._currency, record.category, record.subcategory
                    ),
                    rich=True,
                )
            )
        else:
            await presenter.render(ShowTextRemoveChoices(texts.COMMIT_FAILED))

    async def _render(self, presenter: Presenter, effects: Iterable[Effect]) -> None:
        for effect in effects:
            await presenter.render(effect)
