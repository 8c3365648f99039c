# tests/conftest.py
import sys
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

# Додаємо src в sys.path, щоб працював імпорт "storefront.…"
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from storefront.config.config_service import ConfigService  # noqa: E402
from storefront.config.setup.container import Container  # noqa: E402
from storefront.domain.catalog.entities import (  # noqa: E402
    DeliveryTypeDescriptor,
    DeliveryTypeOption,
    Dimensions,
    DiscountDescriptor,
    FormulaPricing,
    PricingTier,
    ProductSnapshot,
)
from storefront.domain.custom_print import (  # noqa: E402
    CustomPrintRequest,
    DeliveryOffer,
    ModelFile,
    PrintConfiguration,
    PrintStatus,
)

TODAY = date(2026, 5, 15)
NOW = datetime(2026, 5, 15, 12, 0, tzinfo=timezone.utc)


# ──────────────────────────────────────────────────────────────────────────────
#                          🔧 Фабрики тестових даних
# ──────────────────────────────────────────────────────────────────────────────

def make_product(product_id="p1", **overrides) -> ProductSnapshot:
    data = dict(
        product_id=product_id,
        name=f"Product {product_id}",
        creator_id="creator-a",
        base_price=Decimal("100"),
        currency="SGD",
        delivery_types=(
            DeliveryTypeOption(name="standard"),
            DeliveryTypeOption(name="digital"),
        ),
    )
    data.update(overrides)
    return ProductSnapshot(**data)


def make_descriptors():
    return [
        DeliveryTypeDescriptor(name="digital", price=Decimal("0")),
        DeliveryTypeDescriptor(name="standard", price=Decimal("5")),
        DeliveryTypeDescriptor(
            name="express",
            pricing_tiers=(
                PricingTier(Decimal("0"), Decimal("1000"), Decimal("0"), Decimal("500"), Decimal("8")),
                PricingTier(Decimal("0"), Decimal("8000"), Decimal("0"), Decimal("2000"), Decimal("12")),
            ),
        ),
        DeliveryTypeDescriptor(
            name="courier",
            base_pricing=FormulaPricing(
                base_price=Decimal("4"),
                volume_factor=Decimal("0.001"),
                weight_factor=Decimal("0.002"),
                min_price=Decimal("6"),
                max_price=Decimal("40"),
            ),
        ),
        DeliveryTypeDescriptor(name="printDelivery", price=Decimal("6")),
    ]


def make_print_request(request_id="r1", status=PrintStatus.QUOTED, **overrides) -> CustomPrintRequest:
    data = dict(
        request_id=request_id,
        user_id="u1",
        status=status,
        model_file=ModelFile(s3_key=f"models/{request_id}.stl", original_name="model.stl"),
        print_configuration=PrintConfiguration(is_configured=True, options={"material": "PLA"}),
        delivery_types=(
            DeliveryOffer(type="printDelivery", price=Decimal("6")),
            DeliveryOffer(type="standard", price=Decimal("5"), custom_price=Decimal("4")),
        ),
        dimensions=Dimensions(Decimal("10"), Decimal("10"), Decimal("10"), Decimal("300")),
        base_price=Decimal("20"),
        print_fee=Decimal("30"),
    )
    data.update(overrides)
    return CustomPrintRequest(**data)


# ──────────────────────────────────────────────────────────────────────────────
#                          🧰 Фікстури
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def fixed_now():
    return NOW


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def print_request_factory():
    return make_print_request


@pytest.fixture
def descriptors():
    return make_descriptors()


@pytest.fixture
def sample_products():
    return [
        make_product(
            "p1",
            discount=DiscountDescriptor(
                percentage=10,
                minimum_price=Decimal("50"),
                start_date=date(2026, 5, 1),
                end_date=date(2026, 5, 31),
            ),
        ),
        make_product("p2", creator_id="creator-b", base_price=Decimal("40")),
        make_product(
            "ebook",
            creator_id="creator-b",
            base_price=Decimal("15"),
            product_type="digital",
            digital_links=("https://files.example/ebook.pdf",),
            delivery_types=(DeliveryTypeOption(name="digital"),),
        ),
    ]


def _product_doc(product_id, creator, price, delivery, **extra):
    doc = {
        "_id": product_id,
        "name": f"Product {product_id}",
        "creatorUserId": creator,
        "price": {"amount": price, "currency": "SGD"},
        "delivery": {"deliveryTypes": delivery},
    }
    doc.update(extra)
    return doc


@pytest.fixture
def storefront_config(tmp_path):
    """ConfigService з in-memory бекендами та сесіями у tmp_path."""
    ConfigService.reset()
    config = ConfigService()
    config.update({
        "catalog.backend": "memory",
        "address.backend": "memory",
        "metrics.enabled": False,
        "sessions.file": str(tmp_path / "sessions.json"),
        "catalog.products": [
            _product_doc(
                "p1", "creator-a", 100, [{"type": "standard"}, {"type": "express"}],
                discount={"percentage": 10, "minimumPrice": 50, "startDate": "2000-01-01", "endDate": "2099-12-31"},
                dimensions={"length": 10, "width": 10, "height": 5, "weight": 400},
            ),
            _product_doc("p2", "creator-b", 40, [{"type": "standard", "customPrice": 3}]),
            _product_doc(
                "ebook", "creator-b", 15, ["digital"],
                productType="digital", paidAssets=["https://files.example/ebook.pdf"],
            ),
        ],
        "address.addresses": [
            {"userId": "u1", "line1": "1 Orchard Rd", "city": "Singapore", "postalCode": "238801", "country": "SG"},
        ],
        "custom_print.requests": [
            {
                "requestId": "r-configured",
                "userId": "u1",
                "status": "configured",
                "modelFile": {"s3Key": "models/a.stl", "originalName": "a.stl"},
                "printConfiguration": {"isConfigured": True},
                "basePrice": 20,
            },
            {
                "requestId": "r-quoted",
                "userId": "u1",
                "status": "quoted",
                "modelFile": {"s3Key": "models/b.stl", "originalName": "b.stl"},
                "printConfiguration": {"isConfigured": True},
                "basePrice": 20,
                "printFee": 30,
                "delivery": {"deliveryTypes": [{"type": "printDelivery", "price": 6}]},
            },
        ],
    })
    yield config
    ConfigService.reset()


@pytest.fixture
def container(storefront_config):
    return Container(storefront_config)
