"""
Хранилище сессий диалога в памяти процесса.

Модуль инкапсулирует всю работу с состоянием бесед:
- ленивое создание сессии при первом обращении;
- эксклюзивный доступ к сессии одного ключа на время перехода;
- сброс сессии в исходное состояние.

Ключом служит идентификатор беседы (chat id), поэтому пользователи не видят
выбор друг друга. У каждого ключа своя asyncio.Lock: изменения одной сессии
выполняются строго по очереди, а сессии разных ключей друг друга не ждут.
Состояние не переживает перезапуск процесса.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Hashable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TypeVar

from expense_bot.domain.domain import Session

T = TypeVar("T")


@dataclass
class SessionSlot:
    """Изменяемая ячейка, через которую владелец блокировки подменяет сессию."""

    session: Session = field(default_factory=Session)


class SessionStore:
    """
    Репозиторий сессий с поключевой блокировкой.

    Attributes
    ----------
    _slots : dict[Hashable, SessionSlot]
        Ячейки сессий по ключу беседы.
    _locks : dict[Hashable, asyncio.Lock]
        Блокировки по тому же ключу.
    """

    def __init__(self) -> None:
        self._slots: dict[Hashable, SessionSlot] = {}
        self._locks: dict[Hashable, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._slots

    def _slot(self, key: Hashable) -> SessionSlot:
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = SessionSlot()
        return slot

    def _lock(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def get_or_create(self, key: Hashable) -> Session:
        """
        Вернуть текущую сессию ключа, создав пустую при отсутствии.

        Сессия неизменяемая, так что возвращаемое значение является снимком;
        менять состояние можно только через locked() или with_lock().
        """
        return self._slot(key).session

    @asynccontextmanager
    async def locked(self, key: Hashable) -> AsyncIterator[SessionSlot]:
        """
        Захватить сессию ключа на время блока ``async with``.

        Yields
        ------
        SessionSlot
            Ячейка сессии. Присвоение ``slot.session`` внутри блока и есть
            переход; другие сообщения того же ключа ждут выхода из блока.
        """
        async with self._lock(key):
            yield self._slot(key)

    async def with_lock(
        self, key: Hashable, fn: Callable[[SessionSlot], Awaitable[T]]
    ) -> T:
        """Выполнить ``fn`` с эксклюзивным доступом к сессии ключа."""
        async with self.locked(key) as slot:
            return await fn(slot)

    async def reset(self, key: Hashable) -> None:
        async with self.locked(key) as slot:
            slot.session = Session()
