"""
Реестр расходов поверх Notion API.

Каждый расход записывается страницей в базу текущего месяца со свойствами:
- Amount: число;
- Category: select;
- Subcategory: select, только если подкатегория выбрана;
- Comment: rich text с пометкой, откуда пришла запись.

Клиент делает ровно один запрос на запись и не повторяет его: повтор
при сбое остаётся за пользователем, который заново пройдёт диалог.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Final, Optional

import httpx

from expense_bot.core.logger import get_logger
from expense_bot.domain.domain import ExpenseRecord, Period
from expense_bot.domain.errors import LedgerTransportError, SubmissionRejectedError
from expense_bot.ledger.destinations import DestinationRegistry

logger = get_logger(__name__)

NOTION_API_URL: Final[str] = "https://api.notion.com/v1"
NOTION_VERSION: Final[str] = "2022-06-28"


def build_page_properties(record: ExpenseRecord) -> dict[str, Any]:
    """Собрать свойства страницы Notion из записи расхода."""
    properties: dict[str, Any] = {
        "Amount": {"number": float(record.amount)},
        "Category": {"select": {"name": record.category}},
    }
    if record.has_subcategory:
        properties["Subcategory"] = {"select": {"name": record.subcategory}}
    properties["Comment"] = {
        "rich_text": [{"type": "text", "text": {"content": record.comment}}]
    }
    return properties


def build_page_payload(destination: str, record: ExpenseRecord) -> dict[str, Any]:
    return {
        "parent": {"type": "database_id", "database_id": destination},
        "properties": build_page_properties(record),
    }


class NotionLedger:
    """
    Адаптер Notion для конвейера записи расхода.

    Parameters
    ----------
    token : str
        Токен интеграции Notion.
    registry : DestinationRegistry
        Источник идентификаторов баз по месяцам.
    client : httpx.AsyncClient, optional
        Готовый клиент (например, с MockTransport в тестах). Если не задан,
        на каждую запись открывается свой клиент.
    timeout : float
        Таймаут HTTP-запроса в секундах.
    """

    def __init__(
        self,
        token: str,
        registry: DestinationRegistry,
        *,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = NOTION_API_URL,
        timeout: float = 15.0,
    ) -> None:
        self._registry = registry
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Notion-Version": NOTION_VERSION,
            "Content-Type": "application/json",
        }

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    async def resolve_destination(self, period: Period) -> str:
        return self._registry.resolve(period)

    async def submit_record(self, destination: str, record: ExpenseRecord) -> None:
        """
        Создать страницу расхода в базе ``destination``.

        Raises
        ------
        LedgerTransportError
            Сетевая ошибка или таймаут.
        SubmissionRejectedError
            Notion ответил кодом, отличным от 200.
        """
        payload = build_page_payload(destination, record)
        try:
            async with self._http() as client:
                response = await client.post(
                    f"{self._base_url}/pages", json=payload, headers=self._headers
                )
        except httpx.HTTPError as e:
            raise LedgerTransportError(f"запрос к Notion не выполнен: {e}") from e

        if response.status_code != 200:
            raise SubmissionRejectedError(response.status_code, response.text[:200])

        logger.debug("Страница создана в базе %s", destination)
