"""
Отрисовка эффектов ядра в Telegram.

- ShowChoices: сообщение с reply-клавиатурой, по две кнопки в ряду;
- ShowText: обычное сообщение (HTML, если эффект помечен как rich);
- ShowTextRemoveChoices: сообщение, которое убирает клавиатуру.

Индикатор ожидания: отдельное сообщение «⌛️», которое удаляется после
записи расхода.
"""

from collections.abc import Sequence
from typing import Optional

from telegram import Bot, KeyboardButton, Message, ReplyKeyboardMarkup, ReplyKeyboardRemove
from telegram.constants import ParseMode
from telegram.error import TelegramError

from expense_bot.core import texts
from expense_bot.core.logger import get_logger
from expense_bot.domain.effects import Effect, ShowChoices, ShowTextRemoveChoices

logger = get_logger(__name__)

BUTTONS_PER_ROW = 2


def build_keyboard(
    choices: Sequence[str], per_row: int = BUTTONS_PER_ROW
) -> ReplyKeyboardMarkup:
    """Разложить варианты по рядам клавиатуры."""
    rows = [
        [KeyboardButton(choice) for choice in choices[start : start + per_row]]
        for start in range(0, len(choices), per_row)
    ]
    return ReplyKeyboardMarkup(rows, resize_keyboard=True)


class TelegramPresenter:
    """Presenter для одной беседы Telegram."""

    def __init__(self, bot: Bot, chat_id: int) -> None:
        self._bot = bot
        self._chat_id = chat_id

    async def render(self, effect: Effect) -> None:
        if isinstance(effect, ShowChoices):
            await self._bot.send_message(
                chat_id=self._chat_id,
                text=effect.label,
                reply_markup=build_keyboard(effect.choices),
            )
            return

        parse_mode: Optional[str] = ParseMode.HTML if effect.rich else None
        reply_markup = (
            ReplyKeyboardRemove() if isinstance(effect, ShowTextRemoveChoices) else None
        )
        await self._bot.send_message(
            chat_id=self._chat_id,
            text=effect.text,
            parse_mode=parse_mode,
            reply_markup=reply_markup,
        )

    async def show_waiting(self) -> Message:
        return await self._bot.send_message(chat_id=self._chat_id, text=texts.WAITING)

    async def clear_waiting(self, handle: Message) -> None:
        try:
            await self._bot.delete_message(chat_id=self._chat_id, message_id=handle.message_id)
        except TelegramError as e:
            logger.warning("Не удалось удалить индикатор ожидания chat=%s: %s", self._chat_id, e)
