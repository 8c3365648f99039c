# 📦 storefront/domain/catalog/__init__.py
"""📦 Домен каталогу: знімки товарів та контракти сховищ."""

from .entities import (
    CUSTOM_PRINT_PREFIX,
    CarrierBracket,
    DeliveryTypeDescriptor,
    DeliveryTypeOption,
    Dimensions,
    DiscountDescriptor,
    Event,
    FormulaPricing,
    LegacyVariant,
    PricingTier,
    ProductSnapshot,
    VariantOption,
    VariantType,
    custom_print_product_id,
    custom_print_request_id,
    is_custom_print_id,
)
from .interfaces import ICatalogStore, IDeliveryTypeStore, IEventStore

__all__ = [
    "CUSTOM_PRINT_PREFIX",
    "CarrierBracket",
    "DeliveryTypeDescriptor",
    "DeliveryTypeOption",
    "Dimensions",
    "DiscountDescriptor",
    "Event",
    "FormulaPricing",
    "ICatalogStore",
    "IDeliveryTypeStore",
    "IEventStore",
    "LegacyVariant",
    "PricingTier",
    "ProductSnapshot",
    "VariantOption",
    "VariantType",
    "custom_print_product_id",
    "custom_print_request_id",
    "is_custom_print_id",
]
