# 🚚 storefront/domain/delivery/__init__.py
"""🚚 Розрахунок вартості доставки однієї одиниці товару."""

from .services import DeliveryFeeResolver
from .zones import DOMESTIC_ZONE, ShippingZones

__all__ = ["DOMESTIC_ZONE", "DeliveryFeeResolver", "ShippingZones"]
