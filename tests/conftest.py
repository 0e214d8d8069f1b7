"""Общие тестовые двойники: реестр, презентер и собранный движок."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import pytest

from expense_bot.core.engine import ConversationEngine
from expense_bot.domain.domain import ExpenseRecord, Period, Vocabulary
from expense_bot.domain.effects import Effect
from expense_bot.domain.errors import DestinationNotFoundError
from expense_bot.storage.sessions import SessionStore

CURRENCY = "EUR"


class FakeLedger:
    """Реестр в памяти с возможностью придержать запись до сигнала."""

    def __init__(self, destination: Optional[str] = "db-current") -> None:
        self.destination = destination
        self.submit_error: Optional[BaseException] = None
        self.resolved: list[Period] = []
        self.attempts: list[tuple[str, ExpenseRecord]] = []
        self.submitted: list[tuple[str, ExpenseRecord]] = []
        self.gate: Optional[asyncio.Event] = None
        self.release_at: Optional[int] = None
        self.in_flight = 0
        self.max_in_flight = 0

    async def resolve_destination(self, period: Period) -> str:
        self.resolved.append(period)
        if self.destination is None:
            raise DestinationNotFoundError(f"нет базы за {period}")
        return self.destination

    async def submit_record(self, destination: str, record: ExpenseRecord) -> None:
        self.attempts.append((destination, record))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                if self.release_at is not None and self.in_flight >= self.release_at:
                    self.gate.set()
                await self.gate.wait()
            if self.submit_error is not None:
                raise self.submit_error
            self.submitted.append((destination, record))
        finally:
            self.in_flight -= 1


class FakePresenter:
    def __init__(self) -> None:
        self.effects: list[Effect] = []
        self.waiting_shown = 0
        self.waiting_cleared: list[Any] = []

    async def render(self, effect: Effect) -> None:
        self.effects.append(effect)

    async def show_waiting(self) -> str:
        self.waiting_shown += 1
        return f"waiting-{self.waiting_shown}"

    async def clear_waiting(self, handle: Any) -> None:
        self.waiting_cleared.append(handle)

    @property
    def last(self) -> Effect:
        return self.effects[-1]


@pytest.fixture
def vocabulary() -> Vocabulary:
    return Vocabulary(
        categories=("Food", "Transport", "Housing"),
        subcategories=("Groceries", "Taxi", "Rent", "[EMPTY]"),
    )


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def presenter() -> FakePresenter:
    return FakePresenter()


@pytest.fixture
def make_presenter():
    return FakePresenter


@pytest.fixture
def engine(store: SessionStore, vocabulary: Vocabulary, ledger: FakeLedger) -> ConversationEngine:
    return ConversationEngine(store=store, vocabulary=vocabulary, ledger=ledger, currency=CURRENCY)


async def advance_to_amount(
    engine: ConversationEngine,
    key: int,
    presenter: FakePresenter,
    category: str = "Food",
    subcategory: str = "Groceries",
) -> None:
    await engine.begin(key, presenter)
    await engine.handle_text(key, category, presenter)
    await engine.handle_text(key, subcategory, presenter)


@pytest.fixture
def to_amount():
    return advance_to_amount
