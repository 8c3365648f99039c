# 🛒 storefront/application/cart_service.py
"""
🛒 CartService — серверний авторитетний кошик.

🔹 Кожна мутація (додати, кількість, видалити, доставка, варіант) зберігає кошик
   і повертає НОВИЙ канонічний розрахунок через `recompute_breakdown()`.
🔹 Для недільних типів доставки (`digital`, `printDelivery`) кількість завжди 1.
🔹 Зменшення кількості нижче 1 видаляє рядок.
🔹 Після перекотирування друку обраний тип доставки, якого більше нема в
   пропозиції, замінюється першим запропонованим і зберігається.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
import time
from dataclasses import replace
from datetime import date
from typing import Callable, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.cart.entities import Address, CartBreakdown, CartLine, LineKey, variant_key
from storefront.domain.cart.interfaces import IAddressStore, ICartRepository
from storefront.domain.cart.services import CartBreakdownBuilder
from storefront.domain.catalog.interfaces import ICatalogStore, IDeliveryTypeStore, IEventStore
from storefront.domain.catalog.services import CatalogLookup, CustomPrintTemplate
from storefront.domain.custom_print.entities import CustomPrintRequest
from storefront.domain.custom_print.interfaces import ICustomPrintRepository
from storefront.domain.pricing.services import DiscountResolver
from storefront.domain.revenue.entities import SoldItem
from storefront.errors import DeliveryTypeUnavailableError, NotFoundError
from storefront.shared.metrics import BREAKDOWN_BUILT, BREAKDOWN_LATENCY, LINES_DROPPED
from storefront.shared.utils.logger import LOG_NAME

from .timeouts import bounded

logger = logging.getLogger(f"{LOG_NAME}.application.cart")


class CartService:
    """🛒 Мутації кошика + `recompute_breakdown`."""

    def __init__(
        self,
        *,
        carts: ICartRepository,
        catalog: ICatalogStore,
        delivery_types: IDeliveryTypeStore,
        events: IEventStore,
        addresses: IAddressStore,
        custom_prints: ICustomPrintRepository,
        builder: CartBreakdownBuilder,
        template: Optional[CustomPrintTemplate] = None,
        digital_types: Iterable[str] = ("digital",),
        non_divisible_types: Iterable[str] = ("digital", "printDelivery"),
        timeout_sec: float = 5.0,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._carts = carts
        self._catalog = catalog
        self._delivery_types = delivery_types
        self._events = events
        self._addresses = addresses
        self._custom_prints = custom_prints
        self._builder = builder
        self._template = template or CustomPrintTemplate()
        self._digital_types: FrozenSet[str] = frozenset(digital_types)
        self._non_divisible: FrozenSet[str] = frozenset(non_divisible_types)
        self._timeout = float(timeout_sec)
        self._today = today

    # ================================
    # 🧾 РОЗРАХУНОК
    # ================================
    async def get_lines(self, user_id: str) -> List[CartLine]:
        return await bounded(self._carts.get_lines(user_id), self._timeout, "cart.get_lines")

    async def recompute_breakdown(self, user_id: str) -> CartBreakdown:
        """Єдина точка перерахунку: читає кошик і всі залежні дані, рахує чисто."""
        started = time.perf_counter()
        lines = await self.get_lines(user_id)
        address, lookup, discounts = await self._load_inputs(user_id, lines)
        breakdown = self._builder.build(
            lines,
            address=address,
            lookup=lookup,
            discounts=discounts,
            reference_date=self._today(),
        )
        BREAKDOWN_BUILT.inc()
        BREAKDOWN_LATENCY.observe(time.perf_counter() - started)
        for dropped in breakdown.dropped:
            LINES_DROPPED.labels(reason=dropped.reason).inc()
        return breakdown

    # ================================
    # ✏️ МУТАЦІЇ
    # ================================
    async def add_line(self, user_id: str, line: CartLine) -> CartBreakdown:
        """Додає рядок або зливає його з наявним за нормалізованим ключем."""
        line = self._normalize(line)
        lines = await self.get_lines(user_id)
        lines = self._merge(lines, line)
        await self._save(user_id, lines)
        logger.info("➕ Cart add | user=%s product=%s qty=%s type=%s", user_id, line.product_id, line.quantity, line.chosen_delivery_type)
        return await self.recompute_breakdown(user_id)

    async def change_quantity(self, user_id: str, key: LineKey, delta: int) -> CartBreakdown:
        lines = await self.get_lines(user_id)
        index = self._find(lines, key)
        current = lines[index]
        new_quantity = current.quantity + int(delta)

        if new_quantity < 1:
            del lines[index]
            logger.info("🗑️ Cart line removed by decrement | user=%s product=%s", user_id, current.product_id)
        elif current.chosen_delivery_type in self._non_divisible:
            logger.info(
                "🔒 Quantity fixed at 1 for %s delivery | user=%s product=%s",
                current.chosen_delivery_type,
                user_id,
                current.product_id,
            )
        else:
            lines[index] = replace(current, quantity=new_quantity)
        await self._save(user_id, lines)
        return await self.recompute_breakdown(user_id)

    async def remove_line(self, user_id: str, key: LineKey) -> CartBreakdown:
        lines = await self.get_lines(user_id)
        del lines[self._find(lines, key)]
        await self._save(user_id, lines)
        logger.info("🗑️ Cart remove | user=%s product=%s", user_id, key.product_id)
        return await self.recompute_breakdown(user_id)

    async def change_delivery(
        self,
        user_id: str,
        product_id: str,
        chosen_delivery_type: str,
        *,
        variant_id: Optional[str] = None,
        selected_variants: Optional[Mapping[str, str]] = None,
        current_delivery_type: Optional[str] = None,
    ) -> CartBreakdown:
        """
        `PUT cartLine.delivery(productId, variantSelector, chosenDeliveryType)`.

        Raises:
            NotFoundError: рядка або товару немає.
            DeliveryTypeUnavailableError: товар не пропонує цей тип.
        """
        lines = await self.get_lines(user_id)
        index = self._find_by_selector(lines, product_id, variant_id, selected_variants, current_delivery_type)
        current = lines[index]
        await self._ensure_offered(current, chosen_delivery_type)

        updated = self._normalize(replace(current, chosen_delivery_type=chosen_delivery_type))
        del lines[index]
        lines = self._merge(lines, updated, position=index)
        await self._save(user_id, lines)
        logger.info("🚚 Cart delivery | user=%s product=%s %s → %s", user_id, product_id, current.chosen_delivery_type, chosen_delivery_type)
        return await self.recompute_breakdown(user_id)

    async def change_variant(
        self,
        user_id: str,
        key: LineKey,
        *,
        variant_id: Optional[str] = None,
        selected_variants: Optional[Mapping[str, str]] = None,
    ) -> CartBreakdown:
        """Змінює вибір варіанта; невалідний вибір → NotFoundError."""
        lines = await self.get_lines(user_id)
        index = self._find(lines, key)
        current = lines[index]
        updated = replace(current, variant_id=variant_id, selected_variants=dict(selected_variants or {}))

        products = await bounded(self._catalog.get_products([current.product_id]), self._timeout, "catalog.get_products")
        CatalogLookup({p.product_id: p for p in products}).resolve(
            updated.product_id,
            variant_id=updated.variant_id,
            selected_variants=updated.selected_variants,
        )

        del lines[index]
        lines = self._merge(lines, updated, position=index)
        await self._save(user_id, lines)
        logger.info("🎨 Cart variant | user=%s product=%s → %s", user_id, current.product_id, updated.variant_key or updated.variant_id)
        return await self.recompute_breakdown(user_id)

    async def sync_custom_print_delivery(self, request: CustomPrintRequest) -> bool:
        """
        Після (пере)котирування: рядки друку з типом доставки поза пропозицією
        отримують перший запропонований тип. Повертає True, якщо кошик змінено.
        """
        offered = [t for t in request.offered_delivery_types if t not in self._digital_types]
        if not offered:
            return False
        lines = await self.get_lines(request.user_id)
        changed = False
        for i, line in enumerate(lines):
            if line.product_id == request.product_id and line.chosen_delivery_type not in offered:
                logger.info(
                    "🔁 Custom print %s: delivery %r no longer offered → %r",
                    request.request_id,
                    line.chosen_delivery_type,
                    offered[0],
                )
                lines[i] = self._normalize(replace(line, chosen_delivery_type=offered[0]))
                changed = True
        if changed:
            await self._save(request.user_id, lines)
        return changed

    async def remove_purchased(self, user_id: str, items: Sequence[SoldItem]) -> int:
        """Прибирає з кошика куплені рядки (за товаром і варіантом); повертає кількість."""
        lines = await self.get_lines(user_id)
        keep = [
            line for line in lines
            if not any(line.matches_selector(i.product_id, i.variant_id, i.selected_variants) for i in items)
        ]
        removed = len(lines) - len(keep)
        if removed:
            await self._save(user_id, keep)
            logger.info("🧹 Purchased lines removed | user=%s count=%d", user_id, removed)
        return removed

    # ================================
    # 🧠 ВНУТРІШНЄ
    # ================================
    async def _load_inputs(
        self,
        user_id: str,
        lines: Sequence[CartLine],
    ) -> Tuple[Optional[Address], CatalogLookup, DiscountResolver]:
        product_ids = [l.product_id for l in lines if not l.is_custom_print]
        request_ids = [l.custom_print_request_id for l in lines if l.is_custom_print]
        on = self._today()

        address, events, descriptors, products, requests = await asyncio.gather(
            bounded(self._addresses.get_user_address(user_id), self._timeout, "address.get_user_address"),
            bounded(self._events.get_global_events(on), self._timeout, "events.get_global_events"),
            bounded(self._delivery_types.get_active_delivery_types(), self._timeout, "delivery.get_active_delivery_types"),
            bounded(self._catalog.get_products(product_ids), self._timeout, "catalog.get_products"),
            bounded(self._custom_prints.get_many(request_ids), self._timeout, "custom_prints.get_many"),
        )
        lookup = CatalogLookup(
            {p.product_id: p for p in products},
            descriptors,
            {r.request_id: r for r in requests},
            self._template,
            self._digital_types,
        )
        return address, lookup, DiscountResolver(events)

    async def _ensure_offered(self, line: CartLine, delivery_type: str) -> None:
        if line.is_custom_print:
            request = await bounded(self._custom_prints.get(line.custom_print_request_id or ""), self._timeout, "custom_prints.get")
            if request is None:
                raise NotFoundError(f"Custom print request for {line.product_id} not found", details={"product_id": line.product_id})
            lookup = CatalogLookup({}, (), {request.request_id: request}, self._template, self._digital_types)
        else:
            products, descriptors = await asyncio.gather(
                bounded(self._catalog.get_products([line.product_id]), self._timeout, "catalog.get_products"),
                bounded(self._delivery_types.get_active_delivery_types(), self._timeout, "delivery.get_active_delivery_types"),
            )
            lookup = CatalogLookup({p.product_id: p for p in products}, descriptors, None, self._template, self._digital_types)

        product = lookup.resolve(line.product_id, variant_id=line.variant_id, selected_variants=line.selected_variants)
        option = product.delivery_option(delivery_type)
        if option is None or not option.is_active:
            raise DeliveryTypeUnavailableError(
                f"Delivery type {delivery_type!r} is not offered for product {line.product_id}",
                product_id=line.product_id,
                delivery_type=delivery_type,
            )

    def _normalize(self, line: CartLine) -> CartLine:
        if line.chosen_delivery_type in self._non_divisible and line.quantity != 1:
            return replace(line, quantity=1)
        return line

    def _merge(self, lines: List[CartLine], line: CartLine, position: Optional[int] = None) -> List[CartLine]:
        for i, existing in enumerate(lines):
            if existing.key == line.key:
                merged = self._normalize(replace(existing, quantity=existing.quantity + line.quantity))
                lines[i] = merged
                return lines
        if position is None:
            lines.append(line)
        else:
            lines.insert(position, line)
        return lines

    @staticmethod
    def _find(lines: Sequence[CartLine], key: LineKey) -> int:
        for i, line in enumerate(lines):
            if line.key == key:
                return i
        raise NotFoundError(f"Cart line for {key.product_id} not found", details={"product_id": key.product_id})

    @staticmethod
    def _find_by_selector(
        lines: Sequence[CartLine],
        product_id: str,
        variant_id: Optional[str],
        selected_variants: Optional[Mapping[str, str]],
        current_delivery_type: Optional[str],
    ) -> int:
        for i, line in enumerate(lines):
            if not line.matches_selector(product_id, variant_id, selected_variants):
                continue
            if current_delivery_type and line.chosen_delivery_type != current_delivery_type:
                continue
            return i
        raise NotFoundError(
            f"Cart line for {product_id} not found",
            details={"product_id": product_id, "variant_key": variant_key(selected_variants)},
        )

    async def _save(self, user_id: str, lines: Sequence[CartLine]) -> None:
        await bounded(self._carts.save_lines(user_id, lines), self._timeout, "cart.save_lines")


def line_key(
    product_id: str,
    chosen_delivery_type: str = "",
    variant_id: Optional[str] = None,
    selected_variants: Optional[Mapping[str, str]] = None,
) -> LineKey:
    """Будує `LineKey` з параметрів запиту так само, як його будує `CartLine`."""
    return CartLine(
        product_id=product_id,
        chosen_delivery_type=chosen_delivery_type,
        variant_id=variant_id,
        selected_variants=dict(selected_variants or {}),
    ).key


__all__ = ["CartService", "line_key"]
