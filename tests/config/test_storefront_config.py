""" 🧪 test_storefront_config.py — ConfigService як singleton з оверрайдами.

Перевіряє:
- Базові значення з config.yaml
- Таблиця зон доставки та сітка перевізника з config.yaml
- update() з крапковими та вкладеними ключами
- Оверрайд через змінні середовища після reset()
- as_dict() повертає ізольовану копію
"""

import pytest

from storefront.config.config_service import ConfigService
from storefront.infrastructure.mappers import delivery_type_from_dict, shipping_zones_from_dict


@pytest.fixture(autouse=True)
def _fresh_config():
    ConfigService.reset()
    yield
    ConfigService.reset()


def test_yaml_defaults_loaded():
    config = ConfigService()

    assert config.get("checkout.settlement_currency") == "SGD"
    assert config.get("catalog.backend") == "memory"
    assert config.get("missing.key", 42) == 42


def test_singleton_returns_same_instance():
    assert ConfigService() is ConfigService()


def test_update_supports_dotted_and_nested_keys():
    config = ConfigService()
    config.update({"checkout.settlement_currency": "USD", "api": {"port": 9000}})

    assert config.get("checkout.settlement_currency") == "USD"
    assert config.get("api.port") == 9000
    assert config.get("checkout.digital_delivery_types") == ["digital"]


def test_env_override_after_reset(monkeypatch):
    monkeypatch.setenv("STOREFRONT_CATALOG_URL", "http://catalog.local")

    assert ConfigService().get("catalog.base_url") == "http://catalog.local"


def test_as_dict_returns_copy():
    config = ConfigService()
    section = config.as_dict("checkout")
    section["settlement_currency"] = "EUR"

    assert config.get("checkout.settlement_currency") == "SGD"
    assert config.as_dict("nope") == {}


def test_shipping_zones_and_carrier_grid_from_yaml():
    config = ConfigService()
    zones = shipping_zones_from_dict(config.get("delivery.zones"))
    singpost = next(delivery_type_from_dict(t) for t in config.get("delivery.types") if t["name"] == "singpost")

    assert zones.zone_for("Singapore") == "domestic"
    assert zones.zone_for("HK") == "zone_b"
    assert zones.zone_for("Atlantis") == "zone_d"
    assert {b.zone for b in singpost.carrier_rates} == {"domestic", "zone_a", "zone_b", "zone_c", "zone_d"}
