""" 🧪 test_delivery_fee_resolver.py — unit-тести для DeliveryFeeResolver.

Перевіряє:
- порядок правил: digital → customPrice → price → формула → тарифи
- тарифи та формулу лише з повними габаритами
- DeliveryTypeUnavailable для відсутніх, вимкнених і нетарифікованих типів
- тарифну сітку перевізника за зоною країни призначення (внутрішня та міжнародні зони)
- надбавку `royalty_fee` поверх будь-якого нецифрового тарифу
"""

from decimal import Decimal

import pytest

from storefront.domain.cart.entities import Address
from storefront.domain.catalog.entities import CarrierBracket, DeliveryTypeOption, Dimensions, FormulaPricing, PricingTier
from storefront.domain.delivery import DeliveryFeeResolver, ShippingZones
from storefront.errors import DeliveryTypeUnavailableError

TIERS = (
    PricingTier(Decimal("0"), Decimal("1000"), Decimal("0"), Decimal("500"), Decimal("8")),
    PricingTier(Decimal("0"), Decimal("8000"), Decimal("0"), Decimal("2000"), Decimal("12")),
)
FORMULA = FormulaPricing(Decimal("4"), Decimal("0.001"), Decimal("0.002"), Decimal("6"), Decimal("40"))
ZONES = ShippingZones({"sg": "domestic", "singapore": "domestic", "malaysia": "zone_a", "jp": "zone_b"}, default_zone="zone_d")
CARRIER = (
    CarrierBracket("domestic", Decimal("2000"), Decimal("3.0"), max_dimensions=(Decimal("32.4"), Decimal("22.9"), Decimal("6.5"))),
    CarrierBracket("domestic", Decimal("30000"), Decimal("6.0"), max_dimensions=(Decimal("60"), Decimal("40"), Decimal("30"))),
    CarrierBracket("domestic", Decimal("30000"), Decimal("12.0"), max_side=Decimal("150"), max_dimension_sum=Decimal("300")),
    CarrierBracket("zone_a", Decimal("250"), Decimal("3.5")),
    CarrierBracket("zone_a", Decimal("500"), Decimal("5.7")),
    CarrierBracket("zone_b", Decimal("2000"), Decimal("45.0")),
    CarrierBracket("zone_b", Decimal("5000"), Decimal("37")),
)


def dims(l, w, h, g):
    return Dimensions(Decimal(l), Decimal(w), Decimal(h), Decimal(g))


@pytest.fixture
def resolver():
    return DeliveryFeeResolver(["digital"])


def test_digital_is_free_even_with_price(product_factory, resolver):
    product = product_factory(delivery_types=(DeliveryTypeOption("digital", price=Decimal("9")),))

    assert resolver.delivery_fee(product, "digital") == Decimal("0")


def test_custom_price_beats_flat_price(product_factory, resolver):
    product = product_factory(delivery_types=(DeliveryTypeOption("standard", price=Decimal("5"), custom_price=Decimal("2")),))

    assert resolver.delivery_fee(product, "standard") == Decimal("2")


def test_flat_price(product_factory, resolver):
    product = product_factory(delivery_types=(DeliveryTypeOption("standard", price=Decimal("5")),))

    assert resolver.delivery_fee(product, "standard", quantity=3) == Decimal("5")


@pytest.mark.parametrize(
    "dimensions, expected",
    [
        (dims(10, 10, 10, 500), Decimal("8")),       # межі включно
        (dims(20, 10, 10, 600), Decimal("12")),
    ],
)
def test_first_matching_tier(product_factory, resolver, dimensions, expected):
    product = product_factory(
        dimensions=dimensions,
        delivery_types=(DeliveryTypeOption("express", pricing_tiers=TIERS),),
    )

    assert resolver.delivery_fee(product, "express") == expected


def test_no_matching_tier_is_unavailable(product_factory, resolver):
    product = product_factory(
        dimensions=dims(100, 100, 100, 5000),
        delivery_types=(DeliveryTypeOption("express", pricing_tiers=TIERS),),
    )

    with pytest.raises(DeliveryTypeUnavailableError):
        resolver.delivery_fee(product, "express")


def test_formula_is_clamped(product_factory, resolver):
    small = product_factory(dimensions=dims(1, 1, 1, 1), delivery_types=(DeliveryTypeOption("courier", base_pricing=FORMULA),))
    medium = product_factory(dimensions=dims(10, 10, 10, 1000), delivery_types=(DeliveryTypeOption("courier", base_pricing=FORMULA),))
    huge = product_factory(dimensions=dims(100, 100, 100, 50000), delivery_types=(DeliveryTypeOption("courier", base_pricing=FORMULA),))

    assert resolver.delivery_fee(small, "courier") == Decimal("6")
    assert resolver.delivery_fee(medium, "courier") == Decimal("7.000")
    assert resolver.delivery_fee(huge, "courier") == Decimal("40")


@pytest.mark.parametrize("dimensions", [None, dims(10, 10, 0, 300)])
def test_measured_types_require_complete_dimensions(product_factory, resolver, dimensions):
    product = product_factory(
        dimensions=dimensions,
        delivery_types=(DeliveryTypeOption("express", pricing_tiers=TIERS),),
    )

    with pytest.raises(DeliveryTypeUnavailableError) as exc_info:
        resolver.delivery_fee(product, "express")
    assert exc_info.value.details["delivery_type"] == "express"


@pytest.mark.parametrize(
    "options, chosen",
    [
        ((DeliveryTypeOption("standard", price=Decimal("5")),), "express"),
        ((DeliveryTypeOption("standard", price=Decimal("5"), is_active=False),), "standard"),
        ((DeliveryTypeOption("standard"),), "standard"),
    ],
)
def test_unavailable_types(product_factory, resolver, options, chosen):
    product = product_factory(delivery_types=options)

    with pytest.raises(DeliveryTypeUnavailableError):
        resolver.delivery_fee(product, chosen)


def ship_to(country):
    return Address(user_id="u1", line1="1 Main St", city="City", country=country)


@pytest.fixture
def carrier_resolver():
    return DeliveryFeeResolver(["digital"], zones=ZONES)


@pytest.mark.parametrize(
    "dimensions, country, expected",
    [
        (dims(30, 20, 5, 1500), "SG", Decimal("3.0")),              # конверт
        (dims(30, 20, 10, 1500), " Singapore ", Decimal("6.0")),    # висота понад 6.5 см
        (dims(120, 50, 50, 8000), "SG", Decimal("12.0")),           # лише сума сторін
        (dims(10, 10, 10, 250), "Malaysia", Decimal("3.5")),        # межа ваги включно
        (dims(10, 10, 10, 251), "MALAYSIA", Decimal("5.7")),
        (dims(20, 20, 20, 3000), "JP", Decimal("37")),              # понад 2 кг → speedpost
    ],
)
def test_carrier_rate_by_destination_zone(product_factory, carrier_resolver, dimensions, country, expected):
    product = product_factory(dimensions=dimensions, delivery_types=(DeliveryTypeOption("singpost", carrier_rates=CARRIER),))

    assert carrier_resolver.delivery_fee(product, "singpost", destination=ship_to(country)) == expected


@pytest.mark.parametrize(
    "dimensions, destination",
    [
        (dims(10, 10, 10, 500), None),                             # без адреси
        (dims(10, 10, 10, 500), ship_to("Brazil")),                # zone_d без рядків
        (dims(160, 50, 50, 8000), ship_to("SG")),                  # найдовша сторона понад 150 см
        (dims(10, 10, 10, 300), ship_to("")),                       # порожня країна → зона за замовчуванням
        (None, ship_to("SG")),
    ],
)
def test_unpriced_carrier_destination_is_unavailable(product_factory, carrier_resolver, dimensions, destination):
    product = product_factory(dimensions=dimensions, delivery_types=(DeliveryTypeOption("singpost", carrier_rates=CARRIER),))

    with pytest.raises(DeliveryTypeUnavailableError) as exc_info:
        carrier_resolver.delivery_fee(product, "singpost", destination=destination)
    assert exc_info.value.details["delivery_type"] == "singpost"


def test_royalty_fee_is_added_to_non_digital_fees(product_factory, carrier_resolver):
    product = product_factory(
        dimensions=dims(10, 10, 10, 200),
        delivery_types=(
            DeliveryTypeOption("singpost", carrier_rates=CARRIER, royalty_fee=Decimal("1.50")),
            DeliveryTypeOption("standard", price=Decimal("5"), royalty_fee=Decimal("0.25")),
            DeliveryTypeOption("digital", royalty_fee=Decimal("9")),
        ),
    )

    assert carrier_resolver.delivery_fee(product, "singpost", destination=ship_to("Malaysia")) == Decimal("5.00")
    assert carrier_resolver.delivery_fee(product, "standard") == Decimal("5.25")
    assert carrier_resolver.delivery_fee(product, "digital") == Decimal("0")
