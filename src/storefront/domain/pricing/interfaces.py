# 🧩 storefront/domain/pricing/interfaces.py
"""
🧩 interfaces.py — Контракти та DTO ціноутворення одиниці товару.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from storefront.domain.catalog.entities import ProductSnapshot


# ================================
# 🏛️ СТРУКТУРИ ДАНИХ (DTO)
# ================================
@dataclass(frozen=True, slots=True)
class AppliedDiscount:
    """Яка саме знижка спрацювала: `product` або `event` (з назвою акції)."""

    source: str
    percentage: int
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """Ефективна ціна одиниці; обидві суми вже округлені до центів."""

    price: Decimal
    price_before_discount: Decimal
    discount: Optional[AppliedDiscount] = None


# ================================
# 💰 ІНТЕРФЕЙС РЕЗОЛВЕРА ЗНИЖОК
# ================================
class IDiscountResolver(ABC):
    """💰 Контракт: `effectivePrice(ProductSnapshot, referenceDate)`."""

    @abstractmethod
    def effective_price(self, product: ProductSnapshot, reference_date: date) -> PriceQuote:
        """Розраховує ціну одиниці після знижки."""
