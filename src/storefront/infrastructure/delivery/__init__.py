# 🚚 storefront/infrastructure/delivery/__init__.py
"""🚚 Сховище адмінських типів доставки."""

from .config_delivery_type_store import ConfigDeliveryTypeStore

__all__ = ["ConfigDeliveryTypeStore"]
