# 🧮 storefront/domain/cart/services.py
"""
🧮 CartBreakdownBuilder — чистий оркестратор розрахунку кошика.

🔹 Спершу перевіряє адресу: фізична доставка без адреси → `MissingAddressError`
   ще до оцінки будь-якого рядка.
🔹 Далі для кожного рядка: CatalogLookup → DiscountResolver → DeliveryFeeResolver.
🔹 Помилки рівня рядка не валять розрахунок: рядок потрапляє в `dropped`
   (або в `blocked` для незакотированого друку) з повним контекстом у логах.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from datetime import date
from typing import FrozenSet, Iterable, List, Optional, Sequence

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import ProductSnapshot
from storefront.domain.catalog.services import CatalogLookup
from storefront.domain.custom_print.services import is_checkout_eligible
from storefront.domain.delivery.services import DeliveryFeeResolver
from storefront.domain.pricing.interfaces import IDiscountResolver
from storefront.domain.pricing.rounding import q2
from storefront.errors import (
    CurrencyMismatchError,
    MissingAddressError,
    StorefrontError,
)
from storefront.shared.utils.logger import LOG_NAME

from .entities import Address, BlockedLine, BreakdownLine, CartBreakdown, CartLine, DroppedLine

logger = logging.getLogger(f"{LOG_NAME}.domain.cart")


class CartBreakdownBuilder:
    """🧮 `breakdown(cartLines, userDeliveryAddress?) → CartBreakdown | MissingAddress`."""

    def __init__(
        self,
        fee_resolver: DeliveryFeeResolver,
        *,
        settlement_currency: str = "SGD",
        non_divisible_types: Iterable[str] = ("digital", "printDelivery"),
    ) -> None:
        self._fees = fee_resolver
        self._currency = settlement_currency.upper()
        self._non_divisible: FrozenSet[str] = frozenset(non_divisible_types)

    @property
    def settlement_currency(self) -> str:
        return self._currency

    def requires_address(self, lines: Iterable[CartLine]) -> bool:
        """Чи обрано хоча б один нецифровий тип доставки."""
        return any(not self._fees.is_digital(line.chosen_delivery_type) for line in lines)

    def build(
        self,
        lines: Sequence[CartLine],
        *,
        address: Optional[Address],
        lookup: CatalogLookup,
        discounts: IDiscountResolver,
        reference_date: date,
    ) -> CartBreakdown:
        """
        Будує канонічний розрахунок кошика.

        Raises:
            MissingAddressError: є фізична доставка, а адреси немає.
        """
        if address is None and self.requires_address(lines):
            logger.warning("🏠 Breakdown aborted: missing delivery address | lines=%d", len(lines))
            raise MissingAddressError()

        priced: List[BreakdownLine] = []
        dropped: List[DroppedLine] = []
        blocked: List[BlockedLine] = []

        for line in lines:
            request_id = line.custom_print_request_id
            if request_id is not None:
                request = lookup.custom_print(request_id)
                if request is not None and not is_checkout_eligible(request):
                    blocked.append(BlockedLine(line.product_id, request_id, request.status.value))
                    logger.info("⛔ Custom print %s is %s, line not priced", request_id, request.status.value)
                    continue
            try:
                priced.append(self._price_line(line, lookup, discounts, reference_date, address))
            except StorefrontError as exc:
                dropped.append(
                    DroppedLine(
                        product_id=line.product_id,
                        reason=exc.code,
                        message=exc.message,
                        chosen_delivery_type=line.chosen_delivery_type,
                        variant_key=line.variant_key,
                    )
                )
                logger.warning(
                    "🧹 Line dropped | product=%s type=%s reason=%s: %s",
                    line.product_id,
                    line.chosen_delivery_type,
                    exc.code,
                    exc.message,
                    extra=exc.to_log_extra(),
                )

        breakdown = CartBreakdown(
            lines=tuple(priced),
            currency=self._currency,
            dropped=tuple(dropped),
            blocked=tuple(blocked),
        )
        logger.info(
            "🧾 Breakdown | priced=%d dropped=%d blocked=%d subtotal=%s delivery=%s total=%s %s",
            len(priced),
            len(dropped),
            len(blocked),
            breakdown.subtotal,
            breakdown.total_delivery_fee,
            breakdown.grand_total,
            self._currency,
        )
        return breakdown

    # ================================
    # 🧠 ОЦІНКА ОДНОГО РЯДКА
    # ================================
    def _price_line(
        self,
        line: CartLine,
        lookup: CatalogLookup,
        discounts: IDiscountResolver,
        reference_date: date,
        address: Optional[Address] = None,
    ) -> BreakdownLine:
        product = lookup.resolve(
            line.product_id,
            variant_id=line.variant_id,
            selected_variants=line.selected_variants,
        )
        if product.currency != self._currency:
            raise CurrencyMismatchError(
                f"Product {product.product_id} is priced in {product.currency}, cart settles in {self._currency}",
                details={"product_id": product.product_id, "currency": product.currency},
            )

        quote = discounts.effective_price(product, reference_date)
        delivery_type = self._delivery_type_for(line, product)
        quantity = 1 if delivery_type in self._non_divisible else line.quantity
        fee = q2(self._fees.delivery_fee(product, delivery_type, quantity, destination=address))

        return BreakdownLine(
            product_id=line.product_id,
            name=product.name,
            quantity=quantity,
            price=quote.price,
            price_before_discount=quote.price_before_discount,
            delivery_fee=fee,
            chosen_delivery_type=delivery_type,
            currency=self._currency,
            variant_id=line.variant_id,
            selected_variants=line.selected_variants,
            creator_id=product.creator_id,
            discount=quote.discount,
            is_custom_print=product.is_custom_print,
            order_note=line.order_note,
        )

    @staticmethod
    def _delivery_type_for(line: CartLine, product: ProductSnapshot) -> str:
        """Для друку: якщо обраний тип більше не пропонується — перший запропонований."""
        chosen = line.chosen_delivery_type
        if product.is_custom_print and product.delivery_types and product.delivery_option(chosen) is None:
            fallback = product.delivery_types[0].name
            logger.info("🔁 Custom print %s: delivery %r → %r", line.product_id, chosen, fallback)
            return fallback
        return chosen

