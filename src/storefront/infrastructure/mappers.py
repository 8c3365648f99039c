# 🔄 storefront/infrastructure/mappers.py
"""
🔄 Перетворення «сирих» JSON/YAML-словників у доменні сутності та назад.

🔹 Приймає camelCase (HTTP-каталог, вебхуки) і snake_case (config.yaml).
🔹 Гроші — через `to_decimal` (без float-похибок), дати — ISO-рядки.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.cart.entities import Address
from storefront.domain.catalog.entities import (
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
)
from storefront.domain.custom_print.entities import (
    CustomPrintRequest,
    DeliveryOffer,
    ModelFile,
    PrintConfiguration,
    StatusHistoryEntry,
)
from storefront.domain.delivery.zones import ShippingZones
from storefront.domain.custom_print.status import PrintStatus
from storefront.domain.pricing.rounding import ZERO, money_str, to_decimal
from storefront.domain.revenue.entities import CheckoutSession, CreatorSales, DigitalGrant, SoldItem
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.mappers")


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Перше непорожнє значення серед синонімів ключа."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _opt_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None or value == "" else to_decimal(value)


def parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# ================================
# 📦 КАТАЛОГ
# ================================
def dimensions_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[Dimensions]:
    if not data:
        return None
    return Dimensions(
        length=to_decimal(data.get("length"), default=ZERO),
        width=to_decimal(data.get("width"), default=ZERO),
        height=to_decimal(data.get("height"), default=ZERO),
        weight=to_decimal(data.get("weight"), default=ZERO),
    )


def dimensions_to_dict(dims: Optional[Dimensions]) -> Optional[Dict[str, str]]:
    return dims.as_log_dict() if dims else None


def tier_from_dict(data: Mapping[str, Any]) -> PricingTier:
    return PricingTier(
        min_volume=to_decimal(_pick(data, "minVolume", "min_volume"), default=ZERO),
        max_volume=to_decimal(_pick(data, "maxVolume", "max_volume")),
        min_weight=to_decimal(_pick(data, "minWeight", "min_weight"), default=ZERO),
        max_weight=to_decimal(_pick(data, "maxWeight", "max_weight")),
        price=to_decimal(data.get("price")),
    )


def formula_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[FormulaPricing]:
    if not data or _pick(data, "basePrice", "base_price") is None:
        return None
    return FormulaPricing(
        base_price=to_decimal(_pick(data, "basePrice", "base_price")),
        volume_factor=to_decimal(_pick(data, "volumeFactor", "volume_factor"), default=ZERO),
        weight_factor=to_decimal(_pick(data, "weightFactor", "weight_factor"), default=ZERO),
        min_price=_opt_decimal(_pick(data, "minPrice", "min_price")),
        max_price=_opt_decimal(_pick(data, "maxPrice", "max_price")),
    )


def _opt_sides(value: Any) -> Optional[Tuple[Decimal, Decimal, Decimal]]:
    if not value:
        return None
    length, width, height = (to_decimal(v) for v in value)
    return length, width, height


def carrier_rates_from_dict(data: Optional[Mapping[str, Any]]) -> Tuple[CarrierBracket, ...]:
    """`{zone: [bracket, ...]}` → плаский кортеж у порядку зон і рядків."""
    brackets = []
    for zone, rows in (data or {}).items():
        for row in rows or []:
            brackets.append(
                CarrierBracket(
                    zone=str(zone).strip().lower(),
                    max_weight=to_decimal(_pick(row, "maxWeight", "max_weight")),
                    price=to_decimal(row.get("price")),
                    max_dimensions=_opt_sides(_pick(row, "maxDimensions", "max_dimensions")),
                    max_side=_opt_decimal(_pick(row, "maxSide", "max_side")),
                    max_dimension_sum=_opt_decimal(_pick(row, "maxDimensionSum", "max_dimension_sum")),
                )
            )
    return tuple(brackets)


def shipping_zones_from_dict(data: Optional[Mapping[str, Any]]) -> ShippingZones:
    """`{default: zone_d, countries: {zone: [country, ...]}}` → `ShippingZones`."""
    data = data or {}
    countries: Dict[str, str] = {}
    for zone, names in (data.get("countries") or {}).items():
        for name in names or []:
            countries[str(name).strip().lower()] = str(zone).strip().lower()
    return ShippingZones(countries=countries, default_zone=str(data.get("default") or "zone_d").strip().lower())


def delivery_type_from_dict(data: Mapping[str, Any]) -> DeliveryTypeDescriptor:
    return DeliveryTypeDescriptor(
        name=str(data["name"]).strip(),
        is_active=bool(_pick(data, "isActive", "is_active", default=True)),
        price=_opt_decimal(data.get("price")),
        pricing_tiers=tuple(tier_from_dict(t) for t in _pick(data, "pricingTiers", "pricing_tiers", default=[])),
        base_pricing=formula_from_dict(_pick(data, "basePricing", "base_pricing")),
        carrier_rates=carrier_rates_from_dict(_pick(data, "carrierRates", "carrier_rates")),
        description=str(data.get("description") or ""),
    )


def discount_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[DiscountDescriptor]:
    if not data or not data.get("percentage"):
        return None
    return DiscountDescriptor(
        percentage=int(data["percentage"]),
        minimum_price=to_decimal(_pick(data, "minimumPrice", "minimum_price"), default=ZERO),
        start_date=parse_date(_pick(data, "startDate", "start_date")),
        end_date=parse_date(_pick(data, "endDate", "end_date")),
    )


def event_from_dict(data: Mapping[str, Any]) -> Event:
    return Event(
        name=str(data.get("name") or ""),
        percentage=int(data["percentage"]),
        minimum_price=to_decimal(_pick(data, "minimumPrice", "minimum_price"), default=ZERO),
        start_date=parse_date(_pick(data, "startDate", "start_date")),
        end_date=parse_date(_pick(data, "endDate", "end_date")),
        is_active=bool(_pick(data, "isActive", "is_active", default=True)),
        is_global=bool(_pick(data, "isGlobal", "is_global", default=True)),
    )


def product_from_dict(data: Mapping[str, Any]) -> ProductSnapshot:
    """Документ товару → `ProductSnapshot`; ціна може бути числом або `{amount, currency}`."""
    price = data.get("price")
    if isinstance(price, Mapping):
        amount, currency = price.get("amount"), price.get("currency")
    else:
        amount, currency = price, data.get("currency")

    delivery = data.get("delivery") or {}
    raw_types = _pick(delivery, "deliveryTypes", "delivery_types", default=None)
    if raw_types is None:
        raw_types = _pick(data, "deliveryTypes", "delivery_types", default=[])
    options = []
    for entry in raw_types:
        if isinstance(entry, str):
            options.append(DeliveryTypeOption(name=entry))
            continue
        options.append(
            DeliveryTypeOption(
                name=str(_pick(entry, "type", "name")),
                price=_opt_decimal(entry.get("price")),
                custom_price=_opt_decimal(_pick(entry, "customPrice", "custom_price")),
                royalty_fee=to_decimal(_pick(entry, "royaltyFee", "royalty_fee"), default=ZERO),
            )
        )

    return ProductSnapshot(
        product_id=str(_pick(data, "productId", "product_id", "_id", "id")),
        name=str(data.get("name") or ""),
        creator_id=_pick(data, "creatorUserId", "creatorId", "creator_id"),
        base_price=to_decimal(amount, default=ZERO),
        currency=str(currency or "SGD"),
        variant_types=tuple(
            VariantType(
                name=str(vt["name"]),
                options=tuple(
                    VariantOption(
                        name=str(opt["name"]),
                        additional_fee=to_decimal(_pick(opt, "additionalFee", "additional_fee"), default=ZERO),
                        stock=opt.get("stock"),
                    )
                    for opt in vt.get("options", [])
                ),
            )
            for vt in _pick(data, "variantTypes", "variant_types", default=[])
        ),
        variants=tuple(
            LegacyVariant(
                variant_id=str(_pick(v, "_id", "id", "variantId", "variant_id")),
                name=str(v.get("name") or ""),
                price=_opt_decimal(v.get("price")),
                stock=v.get("stock"),
            )
            for v in data.get("variants", []) or []
        ),
        delivery_types=tuple(options),
        discount=discount_from_dict(data.get("discount")),
        dimensions=dimensions_from_dict(data.get("dimensions")),
        product_type=str(_pick(data, "productType", "product_type", default="physical")),
        digital_links=tuple(str(x) for x in _pick(data, "paidAssets", "digitalLinks", "digital_links", default=[])),
    )


# ================================
# 🖨️ КАСТОМНИЙ ДРУК
# ================================
def delivery_offer_from_dict(data: Mapping[str, Any]) -> DeliveryOffer:
    return DeliveryOffer(
        type=str(_pick(data, "type", "name")),
        price=_opt_decimal(data.get("price")),
        custom_price=_opt_decimal(_pick(data, "customPrice", "custom_price")),
    )


def custom_print_from_dict(data: Mapping[str, Any]) -> CustomPrintRequest:
    model = data.get("modelFile") or data.get("model_file")
    config = data.get("printConfiguration") or data.get("print_configuration")
    delivery = data.get("delivery") or {}
    return CustomPrintRequest(
        request_id=str(_pick(data, "requestId", "request_id", "_id", "id")),
        user_id=str(_pick(data, "userId", "user_id", default="")),
        status=PrintStatus.parse(data.get("status") or PrintStatus.PENDING_UPLOAD.value),
        model_file=ModelFile(
            s3_key=str(_pick(model, "s3Key", "s3_key", default="")),
            original_name=str(_pick(model, "originalName", "original_name", default="")),
        ) if model else None,
        print_configuration=PrintConfiguration(
            is_configured=bool(_pick(config, "isConfigured", "is_configured", default=False)),
            options={k: v for k, v in config.items() if k not in ("isConfigured", "is_configured")},
        ) if config else None,
        delivery_types=tuple(
            delivery_offer_from_dict(d)
            for d in _pick(delivery, "deliveryTypes", "delivery_types", default=[])
        ),
        dimensions=dimensions_from_dict(data.get("dimensions")),
        base_price=_opt_decimal(_pick(data, "basePrice", "base_price", default="0")),
        print_fee=_opt_decimal(_pick(data, "printFee", "print_fee")),
        currency=str(data.get("currency") or "SGD").upper(),
        staff_note=_pick(data, "staffNote", "staff_note"),
        status_history=tuple(
            StatusHistoryEntry(
                status=PrintStatus.parse(h["status"]),
                at=parse_datetime(_pick(h, "at", "timestamp")),
                note=h.get("note"),
            )
            for h in _pick(data, "statusHistory", "status_history", default=[])
        ),
        paid_at=parse_datetime(_pick(data, "paidAt", "paid_at")),
        config_deadline=parse_datetime(_pick(data, "configDeadline", "config_deadline")),
        created_at=parse_datetime(_pick(data, "createdAt", "created_at")),
    )


def custom_print_to_dict(request: CustomPrintRequest) -> Dict[str, Any]:
    return {
        "requestId": request.request_id,
        "userId": request.user_id,
        "status": request.status.value,
        "modelFile": (
            {"s3Key": request.model_file.s3_key, "originalName": request.model_file.original_name}
            if request.model_file else None
        ),
        "printConfiguration": (
            {"isConfigured": request.print_configuration.is_configured, **dict(request.print_configuration.options)}
            if request.print_configuration else None
        ),
        "delivery": {
            "deliveryTypes": [
                {
                    "type": o.type,
                    "price": money_str(o.price) if o.price is not None else None,
                    "customPrice": money_str(o.custom_price) if o.custom_price is not None else None,
                }
                for o in request.delivery_types
            ]
        },
        "dimensions": dimensions_to_dict(request.dimensions),
        "basePrice": money_str(request.base_price) if request.base_price is not None else None,
        "printFee": money_str(request.print_fee) if request.print_fee is not None else None,
        "currency": request.currency,
        "staffNote": request.staff_note,
        "statusHistory": [
            {"status": h.status.value, "at": _iso(h.at), "note": h.note} for h in request.status_history
        ],
        "paidAt": _iso(request.paid_at),
        "configDeadline": _iso(request.config_deadline),
        "createdAt": _iso(request.created_at),
    }


# ================================
# 💼 СЕСІЇ
# ================================
def sold_item_from_dict(data: Mapping[str, Any]) -> SoldItem:
    return SoldItem(
        product_id=str(_pick(data, "productId", "product_id")),
        quantity=int(data.get("quantity", 1)),
        unit_price=to_decimal(_pick(data, "unitPrice", "unit_price")),
        delivery_fee=to_decimal(_pick(data, "deliveryFee", "delivery_fee"), default=ZERO),
        delivery_type=str(_pick(data, "deliveryType", "delivery_type", default="")),
        creator_id=_pick(data, "creatorId", "creator_id"),
        variant_id=_pick(data, "variantId", "variant_id"),
        selected_variants=dict(_pick(data, "selectedVariants", "selected_variants", default={})),
        name=str(data.get("name") or ""),
        digital_links=tuple(_pick(data, "digitalLinks", "digital_links", default=()) or ()),
    )


def session_from_dict(data: Mapping[str, Any]) -> CheckoutSession:
    sales = {}
    for creator_id, node in (data.get("salesData") or {}).items():
        sales[creator_id] = CreatorSales(
            creator_id=creator_id,
            product_revenue=to_decimal(node["productRevenue"]),
            shipping_revenue=to_decimal(node["shippingRevenue"]),
            items=tuple(sold_item_from_dict(i) for i in node.get("items", [])),
            is_unresolved=bool(node.get("unresolved", False)),
        )
    grants = {
        product_id: DigitalGrant(
            product_id=product_id,
            buyer=str(node.get("buyer") or ""),
            links=tuple(node.get("links") or ()),
            granted=bool(node.get("granted", False)),
            granted_at=parse_datetime(node.get("grantedAt")),
        )
        for product_id, node in (data.get("digitalProductData") or {}).items()
    }
    return CheckoutSession(
        session_id=str(data["sessionId"]),
        user_id=str(data.get("userId") or ""),
        currency=str(data.get("currency") or ""),
        total_amount=to_decimal(data["totalAmount"]),
        sales_data=sales,
        digital_product_data=grants,
        processed=bool(data.get("processed", False)),
        created_at=parse_datetime(data.get("createdAt")),
        shared_shipping=to_decimal(data.get("sharedShipping"), default=ZERO),
        captured_amount=_opt_decimal(data.get("capturedAmount")),
    )


# ================================
# 📍 АДРЕСИ
# ================================
def address_from_dict(data: Mapping[str, Any], user_id: Optional[str] = None) -> Address:
    return Address(
        user_id=str(user_id or _pick(data, "userId", "user_id", default="")),
        line1=str(_pick(data, "line1", "address", default="") or ""),
        line2=str(data.get("line2") or ""),
        city=str(data.get("city") or ""),
        postal_code=str(_pick(data, "postalCode", "postal_code", default="") or ""),
        country=str(data.get("country") or ""),
    )
