# 🧠 storefront/infrastructure/memory/__init__.py
"""🧠 In-memory реалізації сховищ (локальний запуск, тести)."""

from .stores import (
    InMemoryAddressStore,
    InMemoryCartRepository,
    InMemoryCatalogStore,
    InMemoryCustomPrintRepository,
    InMemoryEventStore,
)

__all__ = [
    "InMemoryAddressStore",
    "InMemoryCartRepository",
    "InMemoryCatalogStore",
    "InMemoryCustomPrintRepository",
    "InMemoryEventStore",
]
