# 🖨️ storefront/domain/custom_print/entities.py
"""
🖨️ Сутності запиту на кастомний друк.

🔹 `CustomPrintRequest` незмінний: кожен перехід автомата повертає нову копію.
🔹 Історія статусів накопичується у `status_history`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import Dimensions, custom_print_product_id
from storefront.domain.pricing.rounding import ZERO

from .status import PrintStatus


@dataclass(frozen=True, slots=True)
class ModelFile:
    """Посилання на завантажену модель в обʼєктному сховищі (байти ядро не читає)."""

    s3_key: str = ""
    original_name: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.s3_key.strip()) and bool(self.original_name.strip())


@dataclass(frozen=True, slots=True)
class PrintConfiguration:
    is_configured: bool = False
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class DeliveryOffer:
    """Тип доставки, який персонал запропонував для друку; `custom_price` має пріоритет."""

    type: str
    price: Optional[Decimal] = None
    custom_price: Optional[Decimal] = None

    @property
    def effective_price(self) -> Optional[Decimal]:
        return self.custom_price if self.custom_price is not None else self.price


@dataclass(frozen=True, slots=True)
class StatusHistoryEntry:
    status: PrintStatus
    at: datetime
    note: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CustomPrintRequest:
    """Один індивідуальний запит на друк, що належить користувачу `user_id`."""

    request_id: str
    user_id: str
    status: PrintStatus = PrintStatus.PENDING_UPLOAD
    model_file: Optional[ModelFile] = None
    print_configuration: Optional[PrintConfiguration] = None
    delivery_types: Tuple[DeliveryOffer, ...] = ()
    dimensions: Optional[Dimensions] = None
    base_price: Optional[Decimal] = ZERO
    print_fee: Optional[Decimal] = None
    currency: str = "SGD"
    staff_note: Optional[str] = None
    status_history: Tuple[StatusHistoryEntry, ...] = ()
    paid_at: Optional[datetime] = None
    config_deadline: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def product_id(self) -> str:
        """Синтетичний ідентифікатор товару для кошика."""
        return custom_print_product_id(self.request_id)

    @property
    def total_price(self) -> Optional[Decimal]:
        """`basePrice + printFee`, або None поки ціну не встановлено."""
        if self.base_price is None or self.print_fee is None:
            return None
        return self.base_price + self.print_fee

    @property
    def offered_delivery_types(self) -> Tuple[str, ...]:
        return tuple(offer.type for offer in self.delivery_types)
