# 🧾 storefront/api/schemas.py
"""
🧾 Pydantic-схеми запитів HTTP API (camelCase на дроті).

🔹 Лише форма запиту; доменна валідація живе в сутностях.
🔹 `to_domain()` перетворює схему в доменні обʼєкти.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# 🔠 Системні імпорти
from decimal import Decimal
from typing import Dict, List, Literal, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import Dimensions
from storefront.domain.custom_print.entities import DeliveryOffer
from storefront.domain.pricing.rounding import ZERO
from storefront.domain.revenue.entities import SoldItem


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ================================
# 🛒 КОШИК
# ================================
class LineSelector(CamelModel):
    """Ідентифікує рядок кошика: товар + вибір варіанта + тип доставки."""

    product_id: str
    chosen_delivery_type: str = ""
    variant_id: Optional[str] = None
    selected_variants: Dict[str, str] = Field(default_factory=dict)


class AddLineRequest(LineSelector):
    quantity: int = 1
    order_note: Optional[str] = None


class ChangeQuantityRequest(LineSelector):
    delta: int


class ChangeDeliveryRequest(CamelModel):
    product_id: str
    chosen_delivery_type: str
    variant_id: Optional[str] = None
    selected_variants: Dict[str, str] = Field(default_factory=dict)
    current_delivery_type: Optional[str] = None


class ChangeVariantRequest(LineSelector):
    new_variant_id: Optional[str] = None
    new_selected_variants: Dict[str, str] = Field(default_factory=dict)


# ================================
# 💰 ВЕБХУК ПЛАТЕЖУ
# ================================
class SoldItemModel(CamelModel):
    product_id: str
    quantity: int = 1
    unit_price: Decimal
    delivery_fee: Decimal = ZERO
    delivery_type: str = ""
    creator_id: Optional[str] = None
    variant_id: Optional[str] = None
    selected_variants: Dict[str, str] = Field(default_factory=dict)
    name: str = ""

    def to_domain(self) -> SoldItem:
        return SoldItem(
            product_id=self.product_id,
            quantity=self.quantity,
            unit_price=self.unit_price,
            delivery_fee=self.delivery_fee,
            delivery_type=self.delivery_type,
            creator_id=self.creator_id,
            variant_id=self.variant_id,
            selected_variants=self.selected_variants,
            name=self.name,
        )


class PaymentCapturedRequest(CamelModel):
    session_id: str
    user_id: str
    currency: str = "SGD"
    items: List[SoldItemModel]
    shared_shipping: Decimal = ZERO
    amount_total: Optional[Decimal] = None


# ================================
# 🗂️ АДМІН
# ================================
class SessionPatchRequest(CamelModel):
    session_id: str
    processed: bool


class DimensionsModel(CamelModel):
    length: Decimal
    width: Decimal
    height: Decimal
    weight: Decimal

    def to_domain(self) -> Dimensions:
        return Dimensions(length=self.length, width=self.width, height=self.height, weight=self.weight)


class DeliveryOfferModel(CamelModel):
    type: str
    price: Optional[Decimal] = None
    custom_price: Optional[Decimal] = None

    def to_domain(self) -> DeliveryOffer:
        return DeliveryOffer(type=self.type, price=self.price, custom_price=self.custom_price)


class CustomPrintActionRequest(CamelModel):
    """`quote` потребує `printFee` і `deliveryTypes`; решта дій — лише `note`."""

    request_id: str
    action: Literal["quote", "cancel", "advance"]
    print_fee: Optional[Decimal] = None
    delivery_types: List[DeliveryOfferModel] = Field(default_factory=list)
    dimensions: Optional[DimensionsModel] = None
    note: Optional[str] = None
