# 🚚 storefront/infrastructure/delivery/config_delivery_type_store.py
"""
🚚 ConfigDeliveryTypeStore — типи доставки з конфігурації (`delivery.types`).

Очікуваний формат конфіга:
delivery:
  types:
    - { name: "standard", is_active: true, price: 5 }
    - name: "express"
      pricing_tiers:
        - { min_volume: 0, max_volume: 1000, min_weight: 0, max_weight: 500, price: 8 }
    - name: "courier"
      base_pricing: { base_price: 4, volume_factor: 0.001, weight_factor: 0.002, min_price: 6 }
    - name: "singpost"
      carrier_rates:            # зона → рядки; зона визначається за `delivery.zones`
        domestic:
          - { max_weight: 2000, max_dimensions: [32.4, 22.9, 6.5], price: 3.0 }
        zone_a:
          - { max_weight: 250, price: 3.5 }
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Any, List

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import DeliveryTypeDescriptor
from storefront.domain.catalog.interfaces import IDeliveryTypeStore
from storefront.infrastructure.mappers import delivery_type_from_dict

# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(__name__)


class ConfigDeliveryTypeStore(IDeliveryTypeStore):
    """📋 Читає та валідує дескриптори один раз, під час створення."""

    def __init__(self, config_service: Any) -> None:
        raw = config_service.get("delivery.types", []) or []
        if not isinstance(raw, list):
            logger.error("❗ delivery.types має бути списком у config.yaml")
            raise ValueError("delivery.types must be a list")

        descriptors: List[DeliveryTypeDescriptor] = []
        for entry in raw:
            try:
                descriptors.append(delivery_type_from_dict(entry))
            except (KeyError, TypeError, ValueError):
                logger.warning("⚠️ Пропущено некоректний тип доставки: %r", entry, exc_info=True)
        self._descriptors = tuple(descriptors)
        logger.debug("📦 Завантажено типи доставки: %s", [d.name for d in self._descriptors])

    async def get_active_delivery_types(self) -> List[DeliveryTypeDescriptor]:
        return [d for d in self._descriptors if d.is_active]
