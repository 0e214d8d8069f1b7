"""
Поиск базы Notion для текущего месяца.

Под каждый месяц в Notion заводится отдельная база, а их идентификаторы
перечислены в data.json::

    {
        "2026": [
            {"month": 9, "id": "1f0c..."},
            {"month": 10, "id": "2a7d..."}
        ]
    }

Файл читается при каждом поиске, поэтому новую базу можно добавить без
перезапуска бота.
"""

import json
from pathlib import Path

from expense_bot.core.logger import get_logger
from expense_bot.domain.domain import Period
from expense_bot.domain.errors import DestinationNotFoundError

logger = get_logger(__name__)


class DestinationRegistry:
    """Отвечает только за чтение карты «год → месяц → база» (SRP)."""

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)

    def load(self) -> dict[str, list[dict]]:
        if not self._file_path.exists():
            raise DestinationNotFoundError(
                f"файл баз не найден: {self._file_path.absolute()}"
            )

        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DestinationNotFoundError(
                f"не удалось прочитать {self._file_path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise DestinationNotFoundError(f"{self._file_path}: ожидался объект по годам")
        return data

    def resolve(self, period: Period) -> str:
        """
        Найти идентификатор базы для периода.

        Parameters
        ----------
        period : Period
            Год и месяц записи.

        Returns
        -------
        str
            Идентификатор базы Notion.

        Raises
        ------
        DestinationNotFoundError
            Если файла нет, он повреждён или в нём нет нужного года/месяца.
        """
        months = self.load().get(str(period.year))
        if not isinstance(months, list) or not months:
            logger.error("Нет баз за %s год", period.year)
            raise DestinationNotFoundError(f"нет баз за {period.year} год")

        for entry in months:
            if isinstance(entry, dict) and entry.get("month") == period.month:
                database_id = entry.get("id")
                if isinstance(database_id, str) and database_id:
                    return database_id

        logger.error("Нет базы за месяц %s года %s", period.month, period.year)
        raise DestinationNotFoundError(f"нет базы за {period}")
