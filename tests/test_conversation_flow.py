from __future__ import annotations

import random
from decimal import Decimal

import pytest

from expense_bot.core import texts
from expense_bot.domain.domain import Phase, Session
from expense_bot.domain.effects import ShowText, ShowTextRemoveChoices
from expense_bot.domain.errors import SubmissionRejectedError

CHAT = 1001


@pytest.mark.asyncio
async def test_full_flow_commits_rounded_amount(engine, store, ledger, presenter, to_amount) -> None:
    await to_amount(engine, CHAT, presenter)
    await engine.handle_text(CHAT, "12.345", presenter)

    assert len(ledger.submitted) == 1
    destination, record = ledger.submitted[0]
    assert destination == "db-current"
    assert record.amount == Decimal("12.35")
    assert (record.category, record.subcategory) == ("Food", "Groceries")

    confirmation = presenter.last
    assert isinstance(confirmation, ShowText) and confirmation.rich
    assert "12.35 EUR" in confirmation.text
    assert "Food" in confirmation.text
    assert "Groceries" in confirmation.text
    assert store.get_or_create(CHAT) == Session()


@pytest.mark.asyncio
async def test_unknown_category_is_rejected(engine, store, presenter) -> None:
    await engine.begin(CHAT, presenter)
    await engine.handle_text(CHAT, "Bogus", presenter)

    session = store.get_or_create(CHAT)
    assert session.phase is Phase.AWAITING_CATEGORY
    assert session.category is None
    assert presenter.last == ShowText(texts.INVALID_CATEGORY)


@pytest.mark.asyncio
async def test_empty_subcategory_is_left_out(engine, ledger, presenter, to_amount) -> None:
    await to_amount(engine, CHAT, presenter, subcategory="[EMPTY]")
    await engine.handle_text(CHAT, "5", presenter)

    _, record = ledger.submitted[0]
    assert record.amount == Decimal("5.00")
    assert not record.has_subcategory
    assert "Subcategory" not in presenter.last.text
    assert "5.00 EUR" in presenter.last.text


@pytest.mark.asyncio
async def test_missing_destination_fails_and_resets(engine, store, ledger, presenter, to_amount) -> None:
    ledger.destination = None
    await to_amount(engine, CHAT, presenter)
    await engine.handle_text(CHAT, "5", presenter)

    assert ledger.attempts == []
    assert presenter.last == ShowTextRemoveChoices(texts.COMMIT_FAILED)
    assert presenter.waiting_cleared == ["waiting-1"]
    assert store.get_or_create(CHAT) == Session()


@pytest.mark.asyncio
async def test_rejected_submission_is_not_retried(engine, store, ledger, presenter, to_amount) -> None:
    ledger.submit_error = SubmissionRejectedError(400, "validation_error")
    await to_amount(engine, CHAT, presenter)
    await engine.handle_text(CHAT, "7.5", presenter)

    assert len(ledger.attempts) == 1
    assert presenter.last == ShowTextRemoveChoices(texts.COMMIT_FAILED)
    assert store.get_or_create(CHAT).phase is Phase.IDLE


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", ["-1", "-0.01", "-1000"])
async def test_negative_amount_never_reaches_ledger(engine, store, ledger, presenter, to_amount, amount) -> None:
    await to_amount(engine, CHAT, presenter)
    before = store.get_or_create(CHAT)

    await engine.handle_text(CHAT, amount, presenter)

    assert ledger.resolved == [] and ledger.attempts == []
    assert presenter.last == ShowText(texts.NEGATIVE_AMOUNT)
    assert presenter.waiting_shown == 0
    assert store.get_or_create(CHAT) == before


@pytest.mark.asyncio
async def test_invalid_amount_allows_retry(engine, store, ledger, presenter, to_amount) -> None:
    await to_amount(engine, CHAT, presenter)

    await engine.handle_text(CHAT, "twelve", presenter)
    assert presenter.last == ShowText(texts.INVALID_AMOUNT)
    assert store.get_or_create(CHAT).phase is Phase.AWAITING_AMOUNT

    await engine.handle_text(CHAT, "12", presenter)
    assert len(ledger.submitted) == 1
    assert store.get_or_create(CHAT).phase is Phase.IDLE


@pytest.mark.asyncio
async def test_category_text_during_amount_step_is_not_rerouted(engine, store, ledger, presenter, to_amount) -> None:
    await to_amount(engine, CHAT, presenter)

    await engine.handle_text(CHAT, "Transport", presenter)

    assert store.get_or_create(CHAT) == Session(
        phase=Phase.AWAITING_AMOUNT, category="Food", subcategory="Groceries"
    )
    assert presenter.last == ShowText(texts.INVALID_AMOUNT)
    assert ledger.attempts == []


@pytest.mark.asyncio
async def test_text_while_idle_gets_a_hint(engine, store, presenter) -> None:
    await engine.handle_text(CHAT, "Food", presenter)

    assert presenter.effects == [ShowText(texts.IDLE_HINT)]
    assert store.get_or_create(CHAT) == Session()


@pytest.mark.asyncio
async def test_restart_clears_selections(engine, store, presenter, to_amount) -> None:
    await to_amount(engine, CHAT, presenter)

    await engine.begin(CHAT, presenter)

    assert store.get_or_create(CHAT) == Session(phase=Phase.AWAITING_CATEGORY)


@pytest.mark.asyncio
async def test_unexpected_failure_still_resets_and_clears_indicator(engine, store, ledger, presenter, to_amount) -> None:
    ledger.submit_error = RuntimeError("boom")
    await to_amount(engine, CHAT, presenter)

    with pytest.raises(RuntimeError):
        await engine.handle_text(CHAT, "3", presenter)

    assert presenter.waiting_cleared == ["waiting-1"]
    assert store.get_or_create(CHAT) == Session()


@pytest.mark.asyncio
async def test_identities_do_not_share_selections(engine, store, ledger, make_presenter, to_amount) -> None:
    alice, bob = make_presenter(), make_presenter()

    await to_amount(engine, 1, alice, category="Food", subcategory="Groceries")
    await engine.begin(2, bob)
    await engine.handle_text(2, "Transport", bob)

    assert store.get_or_create(1) == Session(
        phase=Phase.AWAITING_AMOUNT, category="Food", subcategory="Groceries"
    )
    assert store.get_or_create(2) == Session(phase=Phase.AWAITING_SUBCATEGORY, category="Transport")

    await engine.handle_text(2, "Taxi", bob)
    await engine.handle_text(2, "20", bob)
    await engine.handle_text(1, "10", alice)

    records = {record.category: record for _, record in ledger.submitted}
    assert records["Transport"].subcategory == "Taxi"
    assert records["Transport"].amount == Decimal("20.00")
    assert records["Food"].subcategory == "Groceries"
    assert records["Food"].amount == Decimal("10.00")


ALLOWED_STEPS = {
    (Phase.IDLE, Phase.IDLE),
    (Phase.AWAITING_CATEGORY, Phase.AWAITING_CATEGORY),
    (Phase.AWAITING_CATEGORY, Phase.AWAITING_SUBCATEGORY),
    (Phase.AWAITING_SUBCATEGORY, Phase.AWAITING_SUBCATEGORY),
    (Phase.AWAITING_SUBCATEGORY, Phase.AWAITING_AMOUNT),
    (Phase.AWAITING_AMOUNT, Phase.AWAITING_AMOUNT),
    (Phase.AWAITING_AMOUNT, Phase.IDLE),
}


@pytest.mark.asyncio
async def test_random_walk_follows_state_diagram(engine, store, presenter) -> None:
    inputs = ["/new", "Food", "Transport", "Groceries", "[EMPTY]", "5", "-1", "abc", "Bogus"]
    rng = random.Random(20261017)

    for _ in range(300):
        before = store.get_or_create(CHAT).phase
        text = rng.choice(inputs)
        if text == "/new":
            await engine.begin(CHAT, presenter)
            assert store.get_or_create(CHAT).phase is Phase.AWAITING_CATEGORY
            continue

        await engine.handle_text(CHAT, text, presenter)
        after = store.get_or_create(CHAT).phase
        assert (before, after) in ALLOWED_STEPS
