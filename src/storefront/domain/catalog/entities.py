# 📦 storefront/domain/catalog/entities.py
"""
📦 Доменні сутності каталогу: товар-знімок, варіанти, доставка, знижки.

🔹 Усі сутності іммʼютабельні (frozen dataclass) і живуть рівно один розрахунок кошика.
🔹 Гроші — лише Decimal; розміри — сантиметри, вага — грами.
🔹 Валідація у `__post_init__` логує ❌ і кидає ValueError.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логування валідації
from dataclasses import dataclass                                   # 🧱 Опис сутностей
from datetime import date                                           # 📅 Вікна дії знижок
from decimal import Decimal                                         # 💰 Фінансові дані
from typing import Dict, Optional, Tuple                            # 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from storefront.domain.pricing.rounding import ZERO
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.domain.catalog")

CUSTOM_PRINT_PREFIX = "custom-print:"                               # 🖨️ Префікс синтетичних товарів друку


def is_custom_print_id(product_id: str) -> bool:
    """True, якщо ідентифікатор посилається на кастомний друк."""
    return str(product_id or "").startswith(CUSTOM_PRINT_PREFIX)


def custom_print_request_id(product_id: str) -> str:
    """`custom-print:<requestId>` → `<requestId>`."""
    return str(product_id)[len(CUSTOM_PRINT_PREFIX):]


def custom_print_product_id(request_id: str) -> str:
    """`<requestId>` → `custom-print:<requestId>`."""
    return f"{CUSTOM_PRINT_PREFIX}{request_id}"


# ================================
# 📐 ФІЗИЧНІ РОЗМІРИ
# ================================
@dataclass(frozen=True, slots=True)
class Dimensions:
    """Габарити однієї одиниці товару (см) та її вага (г)."""

    length: Decimal
    width: Decimal
    height: Decimal
    weight: Decimal

    @property
    def volume(self) -> Decimal:
        """Обʼєм у см³."""
        return self.length * self.width * self.height

    @property
    def is_complete(self) -> bool:
        """Усі чотири величини задані та додатні."""
        return all(v > 0 for v in (self.length, self.width, self.height, self.weight))

    def as_log_dict(self) -> Dict[str, str]:
        return {
            "length": str(self.length),
            "width": str(self.width),
            "height": str(self.height),
            "weight": str(self.weight),
        }


# ================================
# 🚚 ТАРИФИ ДОСТАВКИ
# ================================
@dataclass(frozen=True, slots=True)
class PricingTier:
    """Рядок таблиці тарифів: діапазони обʼєму (см³) та ваги (г), обидва включно."""

    min_volume: Decimal
    max_volume: Decimal
    min_weight: Decimal
    max_weight: Decimal
    price: Decimal

    def __post_init__(self) -> None:
        if self.min_volume > self.max_volume or self.min_weight > self.max_weight:
            logger.error("❌ PricingTier: некоректні межі %r", self)
            raise ValueError("PricingTier bounds must satisfy min <= max")
        if self.price < 0:
            logger.error("❌ PricingTier: відʼємна ціна %s", self.price)
            raise ValueError("PricingTier price must be >= 0")

    def contains(self, volume: Decimal, weight: Decimal) -> bool:
        return self.min_volume <= volume <= self.max_volume and self.min_weight <= weight <= self.max_weight


@dataclass(frozen=True, slots=True)
class FormulaPricing:
    """Формула `base + volume*volume_factor + weight*weight_factor`, обмежена [min, max]."""

    base_price: Decimal
    volume_factor: Decimal = ZERO
    weight_factor: Decimal = ZERO
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None

    def compute(self, volume: Decimal, weight: Decimal) -> Decimal:
        price = self.base_price + volume * self.volume_factor + weight * self.weight_factor
        if self.min_price is not None and price < self.min_price:
            price = self.min_price
        if self.max_price is not None and price > self.max_price:
            price = self.max_price
        return price


@dataclass(frozen=True, slots=True)
class CarrierBracket:
    """
    Рядок тарифної сітки перевізника для зони призначення.

    Вага (г) і габарити (см) — межі включно; `max_dimensions` порівнюється
    поелементно (довжина, ширина, висота).
    """

    zone: str
    max_weight: Decimal
    price: Decimal
    max_dimensions: Optional[Tuple[Decimal, Decimal, Decimal]] = None
    max_side: Optional[Decimal] = None
    max_dimension_sum: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.max_weight <= 0:
            logger.error("❌ CarrierBracket: некоректна межа ваги %r", self)
            raise ValueError("CarrierBracket max_weight must be > 0")
        if self.price < 0:
            logger.error("❌ CarrierBracket: відʼємна ціна %s", self.price)
            raise ValueError("CarrierBracket price must be >= 0")

    def accepts(self, dims: Dimensions) -> bool:
        if dims.weight > self.max_weight:
            return False
        sides = (dims.length, dims.width, dims.height)
        if self.max_dimensions is not None and any(s > limit for s, limit in zip(sides, self.max_dimensions)):
            return False
        if self.max_side is not None and max(sides) > self.max_side:
            return False
        if self.max_dimension_sum is not None and sum(sides) > self.max_dimension_sum:
            return False
        return True


@dataclass(frozen=True, slots=True)
class DeliveryTypeDescriptor:
    """Адмінський опис типу доставки (джерело: сховище конфігурації доставки)."""

    name: str
    is_active: bool = True
    price: Optional[Decimal] = None
    pricing_tiers: Tuple[PricingTier, ...] = ()
    base_pricing: Optional[FormulaPricing] = None
    carrier_rates: Tuple[CarrierBracket, ...] = ()
    description: str = ""


@dataclass(frozen=True, slots=True)
class DeliveryTypeOption:
    """
    Тип доставки, запропонований конкретним товаром.

    `custom_price` — персональна ціна продавця, має пріоритет над усім іншим.
    Тарифи та формула підтягуються з `DeliveryTypeDescriptor` під час lookup.
    `royalty_fee` — надбавка продавця, що додається до будь-якої фізичної доставки.
    """

    name: str
    price: Optional[Decimal] = None
    custom_price: Optional[Decimal] = None
    pricing_tiers: Tuple[PricingTier, ...] = ()
    base_pricing: Optional[FormulaPricing] = None
    carrier_rates: Tuple[CarrierBracket, ...] = ()
    royalty_fee: Decimal = ZERO
    is_active: bool = True

    def merged_with(self, descriptor: Optional[DeliveryTypeDescriptor]) -> "DeliveryTypeOption":
        """Накладає правила адмінського дескриптора; відсутній дескриптор → тип вимкнено."""
        if descriptor is None:
            return DeliveryTypeOption(
                name=self.name,
                price=self.price,
                custom_price=self.custom_price,
                pricing_tiers=self.pricing_tiers,
                base_pricing=self.base_pricing,
                carrier_rates=self.carrier_rates,
                royalty_fee=self.royalty_fee,
                is_active=False,
            )
        return DeliveryTypeOption(
            name=self.name,
            price=self.price if self.price is not None else descriptor.price,
            custom_price=self.custom_price,
            pricing_tiers=self.pricing_tiers or descriptor.pricing_tiers,
            base_pricing=self.base_pricing or descriptor.base_pricing,
            carrier_rates=self.carrier_rates or descriptor.carrier_rates,
            royalty_fee=self.royalty_fee,
            is_active=self.is_active and descriptor.is_active,
        )


# ================================
# 🎨 ВАРІАНТИ
# ================================
@dataclass(frozen=True, slots=True)
class VariantOption:
    """Опція осі варіантів (наприклад, `Size=L`) зі своєю доплатою та складом."""

    name: str
    additional_fee: Decimal = ZERO
    stock: Optional[int] = None


@dataclass(frozen=True, slots=True)
class VariantType:
    """Вісь варіантів (`Size`, `Color`) з упорядкованими опціями."""

    name: str
    options: Tuple[VariantOption, ...] = ()

    def option(self, name: str) -> Optional[VariantOption]:
        for opt in self.options:
            if opt.name == name:
                return opt
        return None


@dataclass(frozen=True, slots=True)
class LegacyVariant:
    """Одновісний варіант зі старих товарів (`variantId`), може мати власну ціну."""

    variant_id: str
    name: str = ""
    price: Optional[Decimal] = None
    stock: Optional[int] = None


# ================================
# 🏷️ ЗНИЖКИ ТА АКЦІЇ
# ================================
@dataclass(frozen=True, slots=True)
class DiscountDescriptor:
    """Знижка у відсотках, діє у вікні [start_date, end_date] включно від мінімальної ціни."""

    percentage: int
    minimum_price: Decimal = ZERO
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self) -> None:
        if not isinstance(self.percentage, int) or not 1 <= self.percentage <= 100:
            logger.error("❌ DiscountDescriptor: percentage=%r поза 1..100", self.percentage)
            raise ValueError("Discount percentage must be an integer in 1..100")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            logger.error("❌ DiscountDescriptor: start=%s > end=%s", self.start_date, self.end_date)
            raise ValueError("Discount start_date must not be after end_date")

    def is_in_window(self, on: date) -> bool:
        if self.start_date is not None and on < self.start_date:
            return False
        if self.end_date is not None and on > self.end_date:
            return False
        return True

    def is_eligible(self, price: Decimal, on: date) -> bool:
        return self.is_in_window(on) and price >= self.minimum_price


@dataclass(frozen=True, slots=True)
class Event:
    """Загальномагазинна акція, обмежена в часі."""

    name: str
    percentage: int
    minimum_price: Decimal = ZERO
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True
    is_global: bool = True

    def as_discount(self) -> DiscountDescriptor:
        return DiscountDescriptor(
            percentage=self.percentage,
            minimum_price=self.minimum_price,
            start_date=self.start_date,
            end_date=self.end_date,
        )

    def is_current(self, on: date) -> bool:
        """Активна, глобальна і `on` у вікні дії."""
        return self.is_active and self.is_global and self.as_discount().is_in_window(on)


# ================================
# 🛍️ ЗНІМОК ТОВАРУ
# ================================
@dataclass(frozen=True, slots=True)
class ProductSnapshot:
    """
    Незмінний знімок товару на час одного розрахунку кошика.

    Після `CatalogLookup.resolve` містить уже застосований вибір варіанта:
    `base_price` (з урахуванням ціни legacy-варіанта) та `variant_fee`
    (сума доплат обраних опцій).
    """

    product_id: str
    name: str
    creator_id: Optional[str]
    base_price: Decimal
    currency: str
    variant_types: Tuple[VariantType, ...] = ()
    variants: Tuple[LegacyVariant, ...] = ()
    delivery_types: Tuple[DeliveryTypeOption, ...] = ()
    discount: Optional[DiscountDescriptor] = None
    dimensions: Optional[Dimensions] = None
    product_type: str = "physical"
    digital_links: Tuple[str, ...] = ()
    is_custom_print: bool = False
    variant_fee: Decimal = ZERO

    def __post_init__(self) -> None:
        if self.base_price < 0:
            logger.error("❌ ProductSnapshot %s: відʼємна ціна %s", self.product_id, self.base_price)
            raise ValueError("Product base price must be >= 0")
        object.__setattr__(self, "currency", (self.currency or "").strip().upper())

    @property
    def list_price(self) -> Decimal:
        """Ціна одиниці до знижки: база + доплати варіантів (без округлення)."""
        return self.base_price + self.variant_fee

    def delivery_option(self, name: str) -> Optional[DeliveryTypeOption]:
        for option in self.delivery_types:
            if option.name == name:
                return option
        return None

    def variant_type(self, name: str) -> Optional[VariantType]:
        for vt in self.variant_types:
            if vt.name == name:
                return vt
        return None

    def legacy_variant(self, variant_id: str) -> Optional[LegacyVariant]:
        for variant in self.variants:
            if variant.variant_id == variant_id:
                return variant
        return None
