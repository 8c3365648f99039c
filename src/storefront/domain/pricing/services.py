# 📦 storefront/domain/pricing/services.py
"""
📦 Чистий резолвер знижок для доменного шару.

🔹 Кандидати: власна знижка товару та активні глобальні акції на дату.
🔹 Придатність: дата у вікні [start, end] включно І ціна ≥ minimumPrice.
🔹 Пріоритет: власна знижка товару завжди перемагає акцію; серед акцій —
   найбільший відсоток, далі найраніший старт, далі назва.
🔹 Округлення до центів — один раз, наприкінці.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                # 🪵 Логування кроків розрахунку
from datetime import date
from decimal import Decimal                                   # 💵 Точні гроші (без float)
from typing import Iterable, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import Event, ProductSnapshot
from storefront.shared.utils.logger import LOG_NAME           # 🏷️ Базове імʼя логера

from .interfaces import AppliedDiscount, IDiscountResolver, PriceQuote
from .rounding import q2                                      # 🔁 Нормалізоване округлення до 2 знаків

logger = logging.getLogger(f"{LOG_NAME}.domain.pricing")      # 🧾 Іменований логер сервісу

HUNDRED = Decimal("100")


class DiscountResolver(IDiscountResolver):
    """💸 Обирає рівно одну знижку (або жодної) для знімка товару."""

    def __init__(self, events: Iterable[Event] = ()) -> None:
        """
        ⚙️ Фіксує набір акцій на час одного розрахунку кошика.

        Args:
            events: Акції зі сховища; неактивні та неглобальні відсікаються тут.
        """
        self._events: Tuple[Event, ...] = tuple(e for e in events if e.is_active and e.is_global)

    def effective_price(self, product: ProductSnapshot, reference_date: date) -> PriceQuote:
        list_price = product.list_price                                  # 💵 База + доплати варіантів
        before = q2(list_price)

        if product.is_custom_print:
            # 🖨️ Кастомний друк не бере участі в знижках
            return PriceQuote(price=before, price_before_discount=before)

        applied = self._pick(product, list_price, reference_date)
        if applied is None:
            return PriceQuote(price=before, price_before_discount=before)

        price = q2(list_price * (HUNDRED - Decimal(applied.percentage)) / HUNDRED)
        logger.debug(
            "📉 Discount %s %s%% | product=%s %s → %s",
            applied.source,
            applied.percentage,
            product.product_id,
            before,
            price,
        )
        return PriceQuote(price=price, price_before_discount=before, discount=applied)

    # ================================
    # 🧠 ВИБІР КАНДИДАТА
    # ================================
    def _pick(self, product: ProductSnapshot, list_price: Decimal, on: date) -> Optional[AppliedDiscount]:
        own = product.discount
        if own is not None and own.is_eligible(list_price, on):
            return AppliedDiscount(source="product", percentage=own.percentage)

        eligible = [e for e in self._events if e.as_discount().is_eligible(list_price, on)]
        if not eligible:
            return None
        best = min(eligible, key=lambda e: (-e.percentage, e.start_date or date.min, e.name))
        return AppliedDiscount(source="event", percentage=best.percentage, name=best.name)
