# 🧩 storefront/domain/catalog/interfaces.py
"""
🧩 Контракти зовнішніх колабораторів каталогу.

🔹 `ICatalogStore` — товари (поодинці та пакетами).
🔹 `IDeliveryTypeStore` — адмінські типи доставки (лише читання).
🔹 `IEventStore` — глобальні акції.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, List, Optional

from .entities import DeliveryTypeDescriptor, Event, ProductSnapshot


class ICatalogStore(ABC):
    """🛍️ Джерело знімків товарів."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[ProductSnapshot]:
        """Один товар або None."""

    @abstractmethod
    async def get_products(self, product_ids: Iterable[str]) -> List[ProductSnapshot]:
        """Пакет товарів; відсутні пропускаються."""


class IDeliveryTypeStore(ABC):
    """🚚 Адмінське сховище типів доставки."""

    @abstractmethod
    async def get_active_delivery_types(self) -> List[DeliveryTypeDescriptor]:
        """Лише активні дескриптори."""


class IEventStore(ABC):
    """🎉 Сховище акцій."""

    @abstractmethod
    async def get_global_events(self, on: date) -> List[Event]:
        """Активні глобальні акції, вікно яких містить `on`."""
