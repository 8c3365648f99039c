# 🚚 storefront/domain/delivery/services.py
"""
🚚 DeliveryFeeResolver — чиста функція вартості доставки ОДНІЄЇ одиниці.

Порядок правил для обраного типу:
  1. цифровий тип → 0;
  2. `custom_price` продавця;
  3. фіксована `price`;
  4. тарифна сітка перевізника за зоною країни призначення: перший рядок
     зони, що вміщує вагу й габарити;
  5. формула `base + volume*vf + weight*wf` з обмеженням [min, max];
  6. таблиця tiers: перший рядок, чиї діапазони обʼєму І ваги містять значення.

До будь-якої нецифрової вартості додається `royalty_fee` типу доставки товару.

Множення на кількість — відповідальність будівника кошика.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Iterable, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import DeliveryTypeOption, ProductSnapshot
from storefront.domain.pricing.rounding import ZERO
from storefront.errors import DeliveryTypeUnavailableError
from storefront.shared.utils.logger import LOG_NAME

from .zones import ShippingZones

if TYPE_CHECKING:
    from storefront.domain.cart.entities import Address

# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.domain.delivery")


class DeliveryFeeResolver:
    """💸 `deliveryFee(ProductSnapshot, chosenDeliveryType, quantity, destination) → amount`."""

    def __init__(self, digital_types: Iterable[str] = ("digital",), zones: Optional[ShippingZones] = None) -> None:
        self._digital_types: FrozenSet[str] = frozenset(digital_types)
        self._zones = zones or ShippingZones()

    def is_digital(self, delivery_type: str) -> bool:
        return delivery_type in self._digital_types

    def delivery_fee(
        self,
        product: ProductSnapshot,
        chosen_delivery_type: str,
        quantity: int = 1,
        destination: Optional[Address] = None,
    ) -> Decimal:
        """
        Повертає вартість доставки за одиницю (без округлення).

        Тариф береться за одиницю, `quantity` на результат не впливає.
        `destination` потрібна лише типам із тарифною сіткою перевізника.

        Raises:
            DeliveryTypeUnavailableError: тип відсутній, вимкнений або не має тарифу.
        """
        option = product.delivery_option(chosen_delivery_type)
        if option is None or not option.is_active:
            raise self._unavailable(product, chosen_delivery_type, "not offered or inactive")

        if self.is_digital(chosen_delivery_type):
            return ZERO
        return self._base_fee(product, option, destination) + option.royalty_fee

    # ================================
    # 🧠 ВНУТРІШНЯ ЛОГІКА РОЗРАХУНКУ
    # ================================
    def _base_fee(self, product: ProductSnapshot, option: DeliveryTypeOption, destination: Optional[Address]) -> Decimal:
        if option.custom_price is not None:
            return option.custom_price
        if option.price is not None:
            return option.price
        if option.carrier_rates:
            return self._carrier_fee(product, option, destination)
        if option.base_pricing is not None or option.pricing_tiers:
            return self._measured_fee(product, option)

        raise self._unavailable(product, option.name, "no pricing rule")

    def _carrier_fee(self, product: ProductSnapshot, option: DeliveryTypeOption, destination: Optional[Address]) -> Decimal:
        if destination is None:
            raise self._unavailable(product, option.name, "destination address is required")
        dims = product.dimensions
        if dims is None or not dims.is_complete:
            raise self._unavailable(product, option.name, "product dimensions are required")

        zone = self._zones.zone_for(destination.country)
        for bracket in option.carrier_rates:                            # 🔁 Перший підхожий рядок зони
            if bracket.zone == zone and bracket.accepts(dims):
                logger.debug("🌍 Carrier fee | product=%s type=%s country=%s zone=%s → %s", product.product_id, option.name, destination.country, zone, bracket.price)
                return bracket.price

        raise self._unavailable(product, option.name, f"no carrier rate for zone {zone}")

    def _measured_fee(self, product: ProductSnapshot, option: DeliveryTypeOption) -> Decimal:
        dims = product.dimensions
        if dims is None or not dims.is_complete:
            raise self._unavailable(product, option.name, "product dimensions are required")

        volume = dims.volume                                            # 📦 см³
        weight = dims.weight                                            # ⚖️ г
        if option.base_pricing is not None:
            fee = option.base_pricing.compute(volume, weight)
            logger.debug("🧮 Formula fee | product=%s type=%s volume=%s weight=%s → %s", product.product_id, option.name, volume, weight, fee)
            return fee

        for tier in option.pricing_tiers:                               # 🔁 Перший підхожий tier
            if tier.contains(volume, weight):
                logger.debug("📐 Tier fee | product=%s type=%s volume=%s weight=%s → %s", product.product_id, option.name, volume, weight, tier.price)
                return tier.price

        raise self._unavailable(product, option.name, "no pricing tier matches dimensions")

    @staticmethod
    def _unavailable(product: ProductSnapshot, delivery_type: str, reason: str) -> DeliveryTypeUnavailableError:
        dims: Optional[Dict[str, Any]] = product.dimensions.as_log_dict() if product.dimensions else None
        logger.warning(
            "🚫 Delivery type unavailable | product=%s type=%s reason=%s dimensions=%s",
            product.product_id,
            delivery_type,
            reason,
            dims,
        )
        return DeliveryTypeUnavailableError(
            f"Delivery type {delivery_type!r} is unavailable for product {product.product_id}: {reason}",
            product_id=product.product_id,
            delivery_type=delivery_type,
            dimensions=dims,
        )
