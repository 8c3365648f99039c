""" 🧪 test_catalog_lookup.py — unit-тести для CatalogLookup.

Перевіряє:
- доплати опцій варіантів та ціну legacy-варіанта
- NotFound для невідомого товару, варіанта, осі чи опції
- злиття опцій доставки з дескрипторами (відсутній дескриптор → вимкнено)
- синтетичний знімок кастомного друку
"""

from decimal import Decimal

import pytest

from storefront.domain.catalog.entities import (
    DeliveryTypeOption,
    LegacyVariant,
    VariantOption,
    VariantType,
    custom_print_product_id,
)
from storefront.domain.catalog.services import CatalogLookup, CustomPrintTemplate
from storefront.domain.custom_print import PrintStatus
from storefront.errors import NotFoundError


def _shirt(product_factory):
    return product_factory(
        "shirt",
        base_price=Decimal("20"),
        variant_types=(
            VariantType("Size", (VariantOption("M"), VariantOption("XL", Decimal("3")))),
            VariantType("Color", (VariantOption("Black", Decimal("1.50")),)),
        ),
        variants=(LegacyVariant("v-gold", "Gold", price=Decimal("35")), LegacyVariant("v-plain", "Plain")),
        delivery_types=(
            DeliveryTypeOption("standard"),
            DeliveryTypeOption("express"),
            DeliveryTypeOption("pigeon", price=Decimal("1")),
            DeliveryTypeOption("digital"),
        ),
    )


def test_selected_variants_sum_additional_fees(product_factory, descriptors):
    lookup = CatalogLookup({"shirt": _shirt(product_factory)}, descriptors)

    product = lookup.resolve("shirt", selected_variants={"Size": "XL", "Color": "Black"})

    assert product.variant_fee == Decimal("4.50")
    assert product.list_price == Decimal("24.50")


def test_legacy_variant_price_overrides_base(product_factory):
    lookup = CatalogLookup({"shirt": _shirt(product_factory)})

    assert lookup.resolve("shirt", variant_id="v-gold").base_price == Decimal("35")
    assert lookup.resolve("shirt", variant_id="v-plain").base_price == Decimal("20")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"variant_id": "v-missing"},
        {"selected_variants": {"Size": "XXS"}},
        {"selected_variants": {"Material": "Silk"}},
    ],
)
def test_unknown_variant_raises_not_found(product_factory, kwargs):
    lookup = CatalogLookup({"shirt": _shirt(product_factory)})

    with pytest.raises(NotFoundError):
        lookup.resolve("shirt", **kwargs)


def test_unknown_product_raises_not_found():
    with pytest.raises(NotFoundError):
        CatalogLookup({}).resolve("ghost")


def test_delivery_options_are_merged_with_descriptors(product_factory, descriptors):
    product = CatalogLookup({"shirt": _shirt(product_factory)}, descriptors).resolve("shirt")

    standard = product.delivery_option("standard")
    assert standard.price == Decimal("5") and standard.is_active
    assert product.delivery_option("express").pricing_tiers
    assert product.delivery_option("pigeon").is_active is False
    assert product.delivery_option("digital").price == Decimal("0")


def test_digital_is_disabled_for_print_products(product_factory, descriptors):
    product = product_factory(product_type="print", delivery_types=(DeliveryTypeOption("digital"),))

    resolved = CatalogLookup({"p1": product}, descriptors).resolve("p1")

    assert resolved.delivery_option("digital").is_active is False


def test_custom_print_snapshot_uses_request_price_and_offers(print_request_factory):
    request = print_request_factory("r9")
    lookup = CatalogLookup({}, custom_prints={"r9": request}, template=CustomPrintTemplate(name="3D Print"))

    product = lookup.resolve(custom_print_product_id("r9"))

    assert product.is_custom_print
    assert product.name == "3D Print"
    assert product.creator_id == "platform"
    assert product.base_price == Decimal("50")
    assert [o.name for o in product.delivery_types] == ["printDelivery", "standard"]
    assert product.delivery_option("standard").custom_price == Decimal("4")


def test_unpriced_or_missing_custom_print_is_not_found(print_request_factory):
    unpriced = print_request_factory("r1", status=PrintStatus.CONFIGURED, print_fee=None)
    lookup = CatalogLookup({}, custom_prints={"r1": unpriced})

    with pytest.raises(NotFoundError):
        lookup.resolve(custom_print_product_id("r1"))
    with pytest.raises(NotFoundError):
        lookup.resolve(custom_print_product_id("nope"))
