# 🧩 storefront/domain/custom_print/interfaces.py
"""🧩 Контракт сховища запитів на друк."""

from __future__ import annotations

# 🔠 Системні імпорти
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .entities import CustomPrintRequest


class ICustomPrintRepository(ABC):
    """🗃️ Сховище запитів на друк (читання та збереження цілих записів)."""

    @abstractmethod
    async def get(self, request_id: str) -> Optional[CustomPrintRequest]:
        """Повертає запит або None."""

    @abstractmethod
    async def get_many(self, request_ids: Iterable[str]) -> List[CustomPrintRequest]:
        """Пакетне читання; відсутні ідентифікатори пропускаються."""

    @abstractmethod
    async def save(self, request: CustomPrintRequest) -> None:
        """Зберігає запит (last-writer-wins)."""
