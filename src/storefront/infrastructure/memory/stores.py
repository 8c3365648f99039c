# 🧠 storefront/infrastructure/memory/stores.py
"""
🧠 In-memory сховища для каталогу, акцій, адрес, кошиків та запитів на друк.

🔹 Поводяться як віддалені колаборатори: повертають копії незмінних сутностей.
🔹 Кошик зберігається цілком (last-writer-wins), без compare-and-swap.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

# 🧩 Внутрішні модулі проєкту
from storefront.domain.cart.entities import Address, CartLine
from storefront.domain.cart.interfaces import IAddressStore, ICartRepository
from storefront.domain.catalog.entities import Event, ProductSnapshot
from storefront.domain.catalog.interfaces import ICatalogStore, IEventStore
from storefront.domain.custom_print.entities import CustomPrintRequest
from storefront.domain.custom_print.interfaces import ICustomPrintRepository
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.memory")


class InMemoryCatalogStore(ICatalogStore):
    """🛍️ Каталог у памʼяті; `remove()` імітує видалення товару."""

    def __init__(self, products: Iterable[ProductSnapshot] = ()) -> None:
        self._products: Dict[str, ProductSnapshot] = {p.product_id: p for p in products}

    def put(self, product: ProductSnapshot) -> None:
        self._products[product.product_id] = product

    def remove(self, product_id: str) -> None:
        self._products.pop(product_id, None)

    async def get_product(self, product_id: str) -> Optional[ProductSnapshot]:
        return self._products.get(product_id)

    async def get_products(self, product_ids: Iterable[str]) -> List[ProductSnapshot]:
        return [self._products[pid] for pid in dict.fromkeys(product_ids) if pid in self._products]


class InMemoryEventStore(IEventStore):
    def __init__(self, events: Iterable[Event] = ()) -> None:
        self._events: List[Event] = list(events)

    def put(self, event: Event) -> None:
        self._events.append(event)

    async def get_global_events(self, on: date) -> List[Event]:
        return [e for e in self._events if e.is_current(on)]


class InMemoryAddressStore(IAddressStore):
    def __init__(self, addresses: Iterable[Address] = ()) -> None:
        self._addresses: Dict[str, Address] = {a.user_id: a for a in addresses}

    def put(self, address: Address) -> None:
        self._addresses[address.user_id] = address

    async def get_user_address(self, user_id: str) -> Optional[Address]:
        return self._addresses.get(user_id)


class InMemoryCartRepository(ICartRepository):
    def __init__(self) -> None:
        self._carts: Dict[str, List[CartLine]] = {}
        self._lock = asyncio.Lock()

    async def get_lines(self, user_id: str) -> List[CartLine]:
        return list(self._carts.get(user_id, ()))

    async def save_lines(self, user_id: str, lines: Sequence[CartLine]) -> None:
        async with self._lock:
            self._carts[user_id] = list(lines)
        logger.debug("🛒 Cart saved | user=%s lines=%d", user_id, len(lines))


class InMemoryCustomPrintRepository(ICustomPrintRepository):
    def __init__(self, requests: Iterable[CustomPrintRequest] = ()) -> None:
        self._requests: Dict[str, CustomPrintRequest] = {r.request_id: r for r in requests}

    async def get(self, request_id: str) -> Optional[CustomPrintRequest]:
        return self._requests.get(request_id)

    async def get_many(self, request_ids: Iterable[str]) -> List[CustomPrintRequest]:
        return [self._requests[rid] for rid in dict.fromkeys(request_ids) if rid in self._requests]

    async def save(self, request: CustomPrintRequest) -> None:
        self._requests[request.request_id] = request
        logger.debug("🖨️ Print request saved | id=%s status=%s", request.request_id, request.status.value)
