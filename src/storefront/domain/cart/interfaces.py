# 🧩 storefront/domain/cart/interfaces.py
"""🧩 Контракти сховищ кошика та адрес."""

from __future__ import annotations

# 🔠 Системні імпорти
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .entities import Address, CartLine


class ICartRepository(ABC):
    """🗃️ Серверне сховище кошиків (last-writer-wins на рівні кошика)."""

    @abstractmethod
    async def get_lines(self, user_id: str) -> List[CartLine]:
        """Поточні рядки кошика користувача (порожній список, якщо кошика нема)."""

    @abstractmethod
    async def save_lines(self, user_id: str, lines: Sequence[CartLine]) -> None:
        """Повністю перезаписує кошик користувача."""


class IAddressStore(ABC):
    """📍 Джерело адрес доставки."""

    @abstractmethod
    async def get_user_address(self, user_id: str) -> Optional[Address]:
        """Адреса користувача або None."""
