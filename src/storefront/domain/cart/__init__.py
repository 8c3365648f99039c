# 🛒 storefront/domain/cart/__init__.py
"""🛒 Домен кошика: рядки, розрахунок, контракти сховищ."""

from .entities import (
    Address,
    BlockedLine,
    BreakdownLine,
    CartBreakdown,
    CartLine,
    DroppedLine,
    LineKey,
    variant_key,
)
from .interfaces import IAddressStore, ICartRepository

__all__ = [
    "Address",
    "BlockedLine",
    "BreakdownLine",
    "CartBreakdown",
    "CartLine",
    "DroppedLine",
    "IAddressStore",
    "ICartRepository",
    "LineKey",
    "variant_key",
]
