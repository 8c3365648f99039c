# 📦 storefront/config/setup/container.py
"""
📦 Контейнер залежностей вітрини.

🔹 Створює сховища за бекендом з конфігу (`memory` | `http`)
🔹 Збирає доменні резолвери, білдер розрахунку та агрегатор виручки
🔹 Дає єдину точку доступу до прикладних сервісів для API
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                           # 🧾 Базові засоби логування
from typing import TYPE_CHECKING, Any, List                    # 🧮 Допоміжні типи

# 🧩 Внутрішні модулі проєкту
from storefront.application import CartService, CheckoutService, CustomPrintService  # 🚀 Прикладні сервіси
from storefront.domain.cart.services import CartBreakdownBuilder         # 🧾 Канонічний розрахунок кошика
from storefront.domain.catalog.services import CustomPrintTemplate       # 🖨️ Базовий товар друку
from storefront.domain.custom_print import PrintStateMachine             # 🔀 Автомат статусів
from storefront.domain.delivery import DeliveryFeeResolver               # 🚚 Вартість доставки
from storefront.domain.revenue.services import RevenueSplitAggregator    # 💼 Розподіл виручки
from storefront.infrastructure.delivery import ConfigDeliveryTypeStore   # 🗂️ Типи доставки з конфігу
from storefront.infrastructure.http import HttpAddressStore, HttpCatalogStore, HttpEventStore  # 🌐 HTTP-клієнти
from storefront.infrastructure.mappers import (
    address_from_dict,
    custom_print_from_dict,
    event_from_dict,
    product_from_dict,
    shipping_zones_from_dict,
)                                                                        # 🔄 Сирі словники → сутності
from storefront.infrastructure.memory import (
    InMemoryAddressStore,
    InMemoryCartRepository,
    InMemoryCatalogStore,
    InMemoryCustomPrintRepository,
    InMemoryEventStore,
)                                                                        # 🧠 In-memory сховища
from storefront.infrastructure.sessions import JsonSessionRepository     # 💾 Сесії checkout у JSON
from storefront.shared.metrics.exporters import maybe_start_prometheus   # 📈 Bootstrap метрик
from storefront.shared.utils.logger import LOG_NAME, init_logging_from_config  # 🧾 Конфіг логування

if TYPE_CHECKING:
    from storefront.config.config_service import ConfigService           # 🗂️ Тип під час перевірки

logger = logging.getLogger(LOG_NAME)                                     # 🧾 Модульний логер контейнера


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _int_or_default(value: Any, default: int) -> int:
    """
    Повертає ціле число або запасне значення, якщо каст неможливий.
    """
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float_or_default(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _str_list(raw: Any, default: List[str]) -> List[str]:
    if not isinstance(raw, (list, tuple)):
        return list(default)
    return [str(item).strip() for item in raw if str(item).strip()]


def bootstrap_logging() -> logging.Logger:
    """
    Зчитує конфіг логування і запускає кореневий логер.
    """
    from storefront.config.config_service import ConfigService           # 🧭 Локальний імпорт для уникнення циклів

    cfg = ConfigService()
    node = cfg.get("logging", {}) or {}
    return init_logging_from_config(node)


# ================================
# 🏛️ КОНТЕЙНЕР ЗАЛЕЖНОСТЕЙ
# ================================
class Container:
    """
    Координує ініціалізацію сховищ, доменних та прикладних сервісів.
    """

    def __init__(self, config: "ConfigService"):
        self.config = config
        logger.info("🚀 Стартуємо побудову контейнера залежностей")
        self._bootstrap_metrics_if_enabled()
        self._setup_settings()
        self._setup_stores()
        self._setup_domain_services()
        self._setup_application_services()
        logger.info("✅ Контейнер ініціалізовано успішно")

    # ================================
    # 📈 МЕТРИКИ
    # ================================
    def _bootstrap_metrics_if_enabled(self) -> None:
        """
        Стартує Prometheus-експортер, якщо це дозволено конфігурацією.
        """
        if not bool(self.config.get("metrics.enabled", False)):
            logger.debug("📉 Prometheus вимкнено конфігом")
            return
        exporter_name = (self.config.get("metrics.exporter", "prometheus") or "prometheus").lower()
        if exporter_name != "prometheus":
            logger.debug("📉 Експортер %s не підтримується", exporter_name)
            return
        port = _int_or_default(self.config.get("metrics.prometheus.port", 9108), 9108)
        try:
            if maybe_start_prometheus(port):
                logger.info("📈 Prometheus запущено на порті %s", port)
        except OSError:
            logger.exception("⚠️ Не вдалося стартувати експортер метрик")

    # ================================
    # ⚙️ НАЛАШТУВАННЯ
    # ================================
    def _setup_settings(self) -> None:
        self.settlement_currency = str(self.config.get("checkout.settlement_currency", "SGD")).upper()
        self.digital_types = _str_list(self.config.get("checkout.digital_delivery_types"), ["digital"])
        self.non_divisible_types = _str_list(
            self.config.get("checkout.non_divisible_delivery_types"),
            ["digital", "printDelivery"],
        )
        self.timeout_sec = _float_or_default(self.config.get("io.timeout_sec", 5), 5.0)
        base = self.config.get("custom_print.base_product", {}) or {}
        self.print_template = CustomPrintTemplate(
            name=str(base.get("name") or "Custom 3D Print"),
            currency=str(base.get("currency") or self.settlement_currency).upper(),
            creator_id=base.get("creator_id", "platform"),
        )
        logger.debug(
            "⚙️ Налаштування: currency=%s digital=%s non_divisible=%s timeout=%ss",
            self.settlement_currency,
            self.digital_types,
            self.non_divisible_types,
            self.timeout_sec,
        )

    # ================================
    # 🗃️ СХОВИЩА
    # ================================
    def _setup_stores(self) -> None:
        """
        Обирає реалізації сховищ за `catalog.backend` та `address.backend`.
        """
        self._http_clients: list = []
        catalog_backend = str(self.config.get("catalog.backend", "memory")).lower()
        if catalog_backend == "http":
            base_url = str(self.config.get("catalog.base_url"))
            timeout = _float_or_default(self.config.get("catalog.timeout_sec"), self.timeout_sec)
            self.catalog_store = HttpCatalogStore(
                base_url,
                batch_size=_int_or_default(self.config.get("catalog.batch_size", 10), 10),
                timeout_sec=timeout,
            )
            self.event_store = HttpEventStore(base_url, timeout_sec=timeout)
            self._http_clients += [self.catalog_store, self.event_store]
        else:
            products = self.config.get("catalog.products", []) or []
            events = self.config.get("events", []) or []
            self.catalog_store = InMemoryCatalogStore(product_from_dict(p) for p in products)
            self.event_store = InMemoryEventStore(event_from_dict(e) for e in events)

        address_backend = str(self.config.get("address.backend", "memory")).lower()
        if address_backend == "http":
            self.address_store = HttpAddressStore(
                str(self.config.get("address.base_url")),
                timeout_sec=_float_or_default(self.config.get("address.timeout_sec"), self.timeout_sec),
            )
            self._http_clients.append(self.address_store)
        else:
            addresses = self.config.get("address.addresses", []) or []
            self.address_store = InMemoryAddressStore(address_from_dict(a) for a in addresses)

        requests = self.config.get("custom_print.requests", []) or []
        self.custom_print_repository = InMemoryCustomPrintRepository(custom_print_from_dict(r) for r in requests)
        self.cart_repository = InMemoryCartRepository()
        self.delivery_type_store = ConfigDeliveryTypeStore(self.config)
        self.session_repository = JsonSessionRepository(
            str(self.config.get("sessions.file", "data/checkout_sessions.json"))
        )
        logger.debug("🗃️ Сховища: catalog=%s address=%s", catalog_backend, address_backend)

    # ================================
    # 🏭 ДОМЕННІ СЕРВІСИ
    # ================================
    def _setup_domain_services(self) -> None:
        self.shipping_zones = shipping_zones_from_dict(self.config.get("delivery.zones", {}))
        self.fee_resolver = DeliveryFeeResolver(self.digital_types, zones=self.shipping_zones)
        self.breakdown_builder = CartBreakdownBuilder(
            self.fee_resolver,
            settlement_currency=self.settlement_currency,
            non_divisible_types=self.non_divisible_types,
        )
        self.state_machine = PrintStateMachine(
            config_deadline_days=_int_or_default(self.config.get("custom_print.payment_config_deadline_days", 7), 7)
        )
        self.revenue_aggregator = RevenueSplitAggregator(
            shipping_split=str(self.config.get("revenue.shipping_split", "even")),
            unknown_bucket=str(self.config.get("revenue.unknown_bucket", "__unknown__")),
            digital_types=self.digital_types,
        )

    # ================================
    # 🚀 ПРИКЛАДНІ СЕРВІСИ
    # ================================
    def _setup_application_services(self) -> None:
        self.cart_service = CartService(
            carts=self.cart_repository,
            catalog=self.catalog_store,
            delivery_types=self.delivery_type_store,
            events=self.event_store,
            addresses=self.address_store,
            custom_prints=self.custom_print_repository,
            builder=self.breakdown_builder,
            template=self.print_template,
            digital_types=self.digital_types,
            non_divisible_types=self.non_divisible_types,
            timeout_sec=self.timeout_sec,
        )
        self.custom_print_service = CustomPrintService(
            self.custom_print_repository,
            machine=self.state_machine,
            cart_service=self.cart_service,
        )
        self.checkout_service = CheckoutService(
            cart_service=self.cart_service,
            custom_prints=self.custom_print_repository,
            custom_print_service=self.custom_print_service,
            catalog=self.catalog_store,
            sessions=self.session_repository,
            aggregator=self.revenue_aggregator,
            digital_types=self.digital_types,
            timeout_sec=self.timeout_sec,
        )
        self.session_list_limit = _int_or_default(self.config.get("sessions.list_limit", 100), 100)

    # ================================
    # 🧹 ЗАВЕРШЕННЯ
    # ================================
    async def aclose(self) -> None:
        """Закриває HTTP-клієнти (якщо бекенд `http`)."""
        for client in self._http_clients:
            await client.close()
        logger.debug("🧹 Контейнер закрито (%d HTTP-клієнтів)", len(self._http_clients))


__all__ = ["Container", "bootstrap_logging"]
