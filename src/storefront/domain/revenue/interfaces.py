# 🧩 storefront/domain/revenue/interfaces.py
"""🧩 Контракт журналу checkout-сесій."""

from __future__ import annotations

# 🔠 Системні імпорти
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Tuple

from .entities import CheckoutSession


class ISessionRepository(ABC):
    """📒 Append-only журнал сесій, ідемпотентний за `session_id`."""

    @abstractmethod
    async def get(self, session_id: str) -> Optional[CheckoutSession]:
        """Сесія або None."""

    @abstractmethod
    async def add_if_absent(self, session: CheckoutSession) -> Tuple[CheckoutSession, bool]:
        """Записує сесію, якщо її ще нема; повертає (збережена сесія, чи створено зараз)."""

    @abstractmethod
    async def replace(self, session: CheckoutSession) -> None:
        """Перезаписує наявну сесію (processed / видача цифрових товарів)."""

    @abstractmethod
    async def list(
        self,
        *,
        processed: Optional[bool] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
    ) -> List[CheckoutSession]:
        """Найновіші спершу, з фільтрами."""
