# 🛒 storefront/domain/cart/entities.py
"""
🛒 Сутності кошика та його розрахунку.

🔹 `CartLine` — рядок кошика; ідентичність рядка визначає нормалізований ключ
   (товар, legacy-варіант, відсортовані пари `axis=option`, тип доставки).
🔹 `BreakdownLine` зберігає ціну та доставку ЗА ОДИНИЦЮ; множення — лише при підсумовуванні.
🔹 `CartBreakdown` — канонічний результат перерахунку з підсумками та
   переліком виключених/заблокованих рядків.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import custom_print_request_id, is_custom_print_id
from storefront.domain.pricing.interfaces import AppliedDiscount
from storefront.domain.pricing.rounding import ZERO, money_str, q2
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.domain.cart")


# ================================
# 🧊 ІММ'ЮТАБЕЛЬНІ МАПИ
# ================================
def _mp(data: Optional[Mapping[str, Any]]) -> Mapping[str, str]:
    """Копія вибору варіантів у незмінному вигляді; порожні значення відкидаються."""
    clean = {str(k).strip(): str(v).strip() for k, v in (data or {}).items() if str(k).strip() and v is not None}
    return MappingProxyType(clean)


def variant_key(selected_variants: Optional[Mapping[str, str]]) -> str:
    """
    Порядконезалежний складений ключ вибору варіантів.

    >>> variant_key({"Size": "L", "Color": "Red"})
    'Color=Red|Size=L'
    """
    pairs = sorted(f"{k}={v}" for k, v in (selected_variants or {}).items())
    return "|".join(pairs)


class LineKey(NamedTuple):
    """Нормалізована ідентичність рядка кошика."""

    product_id: str
    variant_id: str
    variant_key: str
    delivery_type: str


# ================================
# 📍 АДРЕСА
# ================================
@dataclass(frozen=True, slots=True)
class Address:
    user_id: str
    line1: str = ""
    line2: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = ""


# ================================
# 🧾 РЯДОК КОШИКА
# ================================
@dataclass(frozen=True, slots=True)
class CartLine:
    """Рядок кошика користувача (legacy `variant_id` АБО `selected_variants`)."""

    product_id: str
    quantity: int = 1
    chosen_delivery_type: str = ""
    variant_id: Optional[str] = None
    selected_variants: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    order_note: Optional[str] = None

    def __post_init__(self) -> None:
        product_id = str(self.product_id or "").strip()
        if not product_id:
            logger.error("❌ CartLine: порожній product_id")
            raise ValueError("CartLine.product_id is required")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            logger.error("❌ CartLine %s: quantity=%r", product_id, self.quantity)
            raise ValueError("CartLine.quantity must be an integer >= 1")
        object.__setattr__(self, "product_id", product_id)
        object.__setattr__(self, "variant_id", (str(self.variant_id).strip() or None) if self.variant_id else None)
        object.__setattr__(self, "selected_variants", _mp(self.selected_variants))
        object.__setattr__(self, "chosen_delivery_type", str(self.chosen_delivery_type or "").strip())

    @property
    def variant_key(self) -> str:
        return variant_key(self.selected_variants)

    @property
    def key(self) -> LineKey:
        return LineKey(self.product_id, self.variant_id or "", self.variant_key, self.chosen_delivery_type)

    @property
    def is_custom_print(self) -> bool:
        return is_custom_print_id(self.product_id)

    @property
    def custom_print_request_id(self) -> Optional[str]:
        return custom_print_request_id(self.product_id) if self.is_custom_print else None

    def matches_selector(
        self,
        product_id: str,
        variant_id: Optional[str] = None,
        selected_variants: Optional[Mapping[str, str]] = None,
    ) -> bool:
        """Той самий товар і той самий вибір варіанта (тип доставки не враховується)."""
        return (
            self.product_id == product_id
            and (self.variant_id or "") == (variant_id or "")
            and self.variant_key == variant_key(selected_variants)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "variantId": self.variant_id,
            "selectedVariants": dict(self.selected_variants),
            "quantity": self.quantity,
            "chosenDeliveryType": self.chosen_delivery_type,
            "orderNote": self.order_note,
        }


# ================================
# 💵 РЯДОК РОЗРАХУНКУ
# ================================
@dataclass(frozen=True, slots=True)
class BreakdownLine:
    """Оцінений рядок; `price` та `delivery_fee` — за одиницю."""

    product_id: str
    name: str
    quantity: int
    price: Decimal
    price_before_discount: Decimal
    delivery_fee: Decimal
    chosen_delivery_type: str
    currency: str
    variant_id: Optional[str] = None
    selected_variants: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    creator_id: Optional[str] = None
    discount: Optional[AppliedDiscount] = None
    is_custom_print: bool = False
    order_note: Optional[str] = None

    def __post_init__(self) -> None:
        if self.price > self.price_before_discount:
            logger.error("❌ BreakdownLine %s: price %s > before %s", self.product_id, self.price, self.price_before_discount)
            raise ValueError("Discounted price must not exceed the price before discount")

    @property
    def line_subtotal(self) -> Decimal:
        return self.price * self.quantity

    @property
    def line_delivery_fee(self) -> Decimal:
        return self.delivery_fee * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "variantId": self.variant_id,
            "selectedVariants": dict(self.selected_variants),
            "name": self.name,
            "quantity": self.quantity,
            "price": money_str(self.price),
            "priceBeforeDiscount": money_str(self.price_before_discount),
            "deliveryFee": money_str(self.delivery_fee),
            "chosenDeliveryType": self.chosen_delivery_type,
            "currency": self.currency,
            "creatorId": self.creator_id,
            "discount": (
                {"source": self.discount.source, "percentage": self.discount.percentage, "name": self.discount.name}
                if self.discount else None
            ),
            "orderNote": self.order_note,
        }


@dataclass(frozen=True, slots=True)
class DroppedLine:
    """Рядок, виключений з розрахунку через помилку рівня рядка."""

    product_id: str
    reason: str
    message: str
    chosen_delivery_type: str = ""
    variant_key: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "reason": self.reason,
            "message": self.message,
            "chosenDeliveryType": self.chosen_delivery_type,
            "variantKey": self.variant_key,
        }


@dataclass(frozen=True, slots=True)
class BlockedLine:
    """Рядок кастомного друку, який ще не можна оплачувати."""

    product_id: str
    request_id: str
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {"productId": self.product_id, "requestId": self.request_id, "status": self.status}


# ================================
# 📊 РЕЗУЛЬТАТ ПЕРЕРАХУНКУ
# ================================
@dataclass(frozen=True, slots=True)
class CartBreakdown:
    lines: Tuple[BreakdownLine, ...]
    currency: str
    dropped: Tuple[DroppedLine, ...] = ()
    blocked: Tuple[BlockedLine, ...] = ()

    @property
    def subtotal(self) -> Decimal:
        return q2(sum((line.line_subtotal for line in self.lines), ZERO))

    @property
    def total_delivery_fee(self) -> Decimal:
        return q2(sum((line.line_delivery_fee for line in self.lines), ZERO))

    @property
    def grand_total(self) -> Decimal:
        return self.subtotal + self.total_delivery_fee

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_dict(self) -> Dict[str, Any]:
        items: List[Dict[str, Any]] = [line.to_dict() for line in self.lines]
        return {
            "cartBreakdown": items,
            "subtotal": money_str(self.subtotal),
            "totalDeliveryFee": money_str(self.total_delivery_fee),
            "grandTotal": money_str(self.grand_total),
            "currency": self.currency,
            "blocked": [b.to_dict() for b in self.blocked],
            "dropped": [d.to_dict() for d in self.dropped],
        }
