# 💼 storefront/domain/revenue/entities.py
"""
💼 Сутності checkout-сесії та розподілу виручки між креаторами.

🔹 `SoldItem` несе знімок креатора на момент продажу (пізніша зміна власника
   товару не переписує історичні виплати).
🔹 `CheckoutSession` — append-only, змінюється лише прапорець `processed`
   та відмітки видачі цифрових товарів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.pricing.rounding import ZERO, money_str
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.domain.revenue")


@dataclass(frozen=True, slots=True)
class SoldItem:
    """Проданий рядок: ціни за одиницю, як їх зафіксовано під час checkout."""

    product_id: str
    quantity: int
    unit_price: Decimal
    delivery_fee: Decimal = ZERO
    delivery_type: str = ""
    creator_id: Optional[str] = None
    variant_id: Optional[str] = None
    selected_variants: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    name: str = ""
    digital_links: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            logger.error("❌ SoldItem %s: quantity=%r", self.product_id, self.quantity)
            raise ValueError("SoldItem.quantity must be an integer >= 1")
        if self.unit_price < 0 or self.delivery_fee < 0:
            logger.error("❌ SoldItem %s: відʼємні суми", self.product_id)
            raise ValueError("SoldItem amounts must be >= 0")
        object.__setattr__(self, "selected_variants", MappingProxyType(dict(self.selected_variants or {})))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "variantId": self.variant_id,
            "selectedVariants": dict(self.selected_variants),
            "name": self.name,
            "quantity": self.quantity,
            "unitPrice": money_str(self.unit_price),
            "deliveryFee": money_str(self.delivery_fee),
            "deliveryType": self.delivery_type,
            "creatorId": self.creator_id,
        }


@dataclass(frozen=True, slots=True)
class CreatorSales:
    """Підсумок продажів одного креатора в межах сесії."""

    creator_id: str
    product_revenue: Decimal
    shipping_revenue: Decimal
    items: Tuple[SoldItem, ...] = ()
    is_unresolved: bool = False

    @property
    def total_amount(self) -> Decimal:
        return self.product_revenue + self.shipping_revenue

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalAmount": money_str(self.total_amount),
            "productRevenue": money_str(self.product_revenue),
            "shippingRevenue": money_str(self.shipping_revenue),
            "items": [item.to_dict() for item in self.items],
            "unresolved": self.is_unresolved,
        }


@dataclass(frozen=True, slots=True)
class DigitalGrant:
    """Право покупця на завантаження цифрового товару; `granted` ставиться один раз."""

    product_id: str
    buyer: str
    links: Tuple[str, ...] = ()
    granted: bool = False
    granted_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buyer": self.buyer,
            "links": list(self.links),
            "granted": self.granted,
            "grantedAt": self.granted_at.isoformat() if self.granted_at else None,
        }


@dataclass(frozen=True, slots=True)
class CheckoutSession:
    session_id: str
    user_id: str
    currency: str
    total_amount: Decimal
    sales_data: Mapping[str, CreatorSales]
    digital_product_data: Mapping[str, DigitalGrant] = field(default_factory=lambda: MappingProxyType({}))
    processed: bool = False
    created_at: Optional[datetime] = None
    shared_shipping: Decimal = ZERO
    captured_amount: Optional[Decimal] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "sales_data", MappingProxyType(dict(self.sales_data)))
        object.__setattr__(self, "digital_product_data", MappingProxyType(dict(self.digital_product_data)))

    @property
    def creator_total(self) -> Decimal:
        """Σ(productRevenue + shippingRevenue) по всіх креаторах."""
        return sum((sales.total_amount for sales in self.sales_data.values()), ZERO)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "userId": self.user_id,
            "currency": self.currency,
            "totalAmount": money_str(self.total_amount),
            "sharedShipping": money_str(self.shared_shipping),
            "capturedAmount": money_str(self.captured_amount) if self.captured_amount is not None else None,
            "salesData": {cid: sales.to_dict() for cid, sales in self.sales_data.items()},
            "digitalProductData": {pid: grant.to_dict() for pid, grant in self.digital_product_data.items()},
            "processed": self.processed,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
