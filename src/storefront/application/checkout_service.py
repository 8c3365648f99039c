# 💳 storefront/application/checkout_service.py
"""
💳 CheckoutService — ініціація checkout і обробка події «payment captured».

🔹 `initiate()` відмовляє (409), поки в кошику є запит друку до котирування.
🔹 `handle_payment_captured()` ідемпотентний за `sessionId`: повтор події
   повертає вже записану сесію без жодних побічних ефектів.
🔹 Побічні ефекти (друк → `paid`, очищення кошика) виконуються ДО запису
   сесії: записана сесія означає, що вони вже застосовані.
🔹 Креатор береться з рядка події (знімок на момент checkout); каталог
   запитується лише коли його там немає.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.cart.entities import CartBreakdown
from storefront.domain.catalog.interfaces import ICatalogStore
from storefront.domain.custom_print import ICustomPrintRepository, blocking_request_ids
from storefront.domain.catalog.entities import custom_print_request_id, is_custom_print_id
from storefront.domain.pricing.rounding import ZERO, money_str
from storefront.domain.revenue.entities import CheckoutSession, DigitalGrant, SoldItem
from storefront.domain.revenue.interfaces import ISessionRepository
from storefront.domain.revenue.services import RevenueSplitAggregator
from storefront.errors import CheckoutBlockedError, NotFoundError, StorefrontError, ValidationError
from storefront.shared.metrics import (
    CHECKOUT_BLOCKED,
    PRINT_PAYMENT_UNAPPLIED,
    REVENUE_SPLIT_RECORDED,
    REVENUE_SPLIT_REPLAYED,
)
from storefront.shared.utils.logger import LOG_NAME

from .cart_service import CartService
from .custom_print_service import CustomPrintService
from .timeouts import bounded

logger = logging.getLogger(f"{LOG_NAME}.application.checkout")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ================================
# 📨 КОНТРАКТИ
# ================================
@dataclass(frozen=True, slots=True)
class PaymentCapturedEvent:
    """Подія платіжного колаборатора: фіналізований кошик і суми."""

    session_id: str
    user_id: str
    currency: str
    items: Tuple[SoldItem, ...]
    shared_shipping: Decimal = ZERO
    amount_total: Optional[Decimal] = None


@dataclass(frozen=True, slots=True)
class CheckoutQuote:
    """Те, що передається платіжному колаборатору для створення платежу."""

    user_id: str
    breakdown: CartBreakdown
    items: Tuple[SoldItem, ...] = field(default=())

    def to_dict(self) -> Dict[str, Any]:
        data = self.breakdown.to_dict()
        data["userId"] = self.user_id
        data["items"] = [item.to_dict() for item in self.items]
        data["amountTotal"] = money_str(self.breakdown.grand_total)
        return data


# ================================
# 💳 СЕРВІС
# ================================
class CheckoutService:
    def __init__(
        self,
        *,
        cart_service: CartService,
        custom_prints: ICustomPrintRepository,
        custom_print_service: CustomPrintService,
        catalog: ICatalogStore,
        sessions: ISessionRepository,
        aggregator: RevenueSplitAggregator,
        digital_types: Iterable[str] = ("digital",),
        timeout_sec: float = 5.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._cart = cart_service
        self._custom_prints = custom_prints
        self._prints = custom_print_service
        self._catalog = catalog
        self._sessions = sessions
        self._aggregator = aggregator
        self._digital_types: FrozenSet[str] = frozenset(digital_types)
        self._timeout = float(timeout_sec)
        self._clock = clock

    # ================================
    # 🚪 ІНІЦІАЦІЯ
    # ================================
    async def initiate(self, user_id: str) -> CheckoutQuote:
        """
        Raises:
            CheckoutBlockedError: у кошику є запит друку до котирування.
            ValidationError: у кошику немає жодного рядка, який можна оплатити.
            MissingAddressError: є фізична доставка без адреси.
        """
        lines = await self._cart.get_lines(user_id)
        request_ids = [line.custom_print_request_id for line in lines if line.is_custom_print]
        requests = await bounded(self._custom_prints.get_many(request_ids), self._timeout, "custom_prints.get_many")
        blocking = blocking_request_ids(requests)
        if blocking:
            self._blocked(user_id, blocking)

        breakdown = await self._cart.recompute_breakdown(user_id)
        if breakdown.blocked:
            self._blocked(user_id, [b.request_id for b in breakdown.blocked])
        if breakdown.is_empty:
            raise ValidationError("Cart has no payable lines", details={"user_id": user_id})

        items = tuple(
            SoldItem(
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.price,
                delivery_fee=line.delivery_fee,
                delivery_type=line.chosen_delivery_type,
                creator_id=line.creator_id,
                variant_id=line.variant_id,
                selected_variants=line.selected_variants,
                name=line.name,
            )
            for line in breakdown.lines
        )
        logger.info("💳 Checkout initiated | user=%s total=%s %s", user_id, breakdown.grand_total, breakdown.currency)
        return CheckoutQuote(user_id=user_id, breakdown=breakdown, items=items)

    @staticmethod
    def _blocked(user_id: str, request_ids: Sequence[str]) -> None:
        CHECKOUT_BLOCKED.inc()
        logger.warning("⛔ Checkout blocked | user=%s requests=%s", user_id, list(request_ids))
        raise CheckoutBlockedError(list(request_ids))

    # ================================
    # 💰 PAYMENT CAPTURED
    # ================================
    async def handle_payment_captured(self, event: PaymentCapturedEvent) -> CheckoutSession:
        """Записує сесію з розподілом виручки рівно один раз на `sessionId`."""
        existing = await bounded(self._sessions.get(event.session_id), self._timeout, "sessions.get")
        if existing is not None:
            REVENUE_SPLIT_REPLAYED.inc()
            logger.info("♻️ Payment event replay for session %s ignored", event.session_id)
            return existing
        if not event.items:
            raise ValidationError("Payment event has no items", details={"session_id": event.session_id})

        items = await self._attribute(event.items)
        session = self._aggregator.build_session(
            session_id=event.session_id,
            user_id=event.user_id,
            currency=event.currency,
            items=items,
            created_at=self._clock(),
            shared_shipping=event.shared_shipping,
            captured_amount=event.amount_total,
        )
        await self._apply_side_effects(event, items)

        session, created = await bounded(self._sessions.add_if_absent(session), self._timeout, "sessions.add_if_absent")
        if not created:
            REVENUE_SPLIT_REPLAYED.inc()
            return session

        REVENUE_SPLIT_RECORDED.inc()
        logger.info(
            "💼 Session %s recorded | creators=%d total=%s %s",
            session.session_id,
            len(session.sales_data),
            session.total_amount,
            session.currency,
        )
        return session

    async def _apply_side_effects(self, event: PaymentCapturedEvent, items: Sequence[SoldItem]) -> None:
        """
        Друк → `paid` та очищення кошика до запису сесії.

        Обидва кроки ідемпотентні, тож повторна доставка події після збою
        повторює їх і лише тоді записує сесію. Запит друку, який уже не можна
        провести до `paid`, логується і не зупиняє решту кроків.
        """
        for item in items:
            if not is_custom_print_id(item.product_id):
                continue
            request_id = custom_print_request_id(item.product_id)
            try:
                await self._prints.mark_paid(request_id)
            except StorefrontError as exc:
                PRINT_PAYMENT_UNAPPLIED.inc()
                logger.error(
                    "🧾 Paid print %s not advanced (%s) | session=%s user=%s",
                    request_id,
                    exc.code,
                    event.session_id,
                    event.user_id,
                    extra=exc.to_log_extra(),
                )
        await self._cart.remove_purchased(event.user_id, items)

    async def _attribute(self, items: Sequence[SoldItem]) -> List[SoldItem]:
        """Заповнює відсутніх креаторів і цифрові посилання з каталогу."""
        missing = sorted({
            i.product_id for i in items
            if not is_custom_print_id(i.product_id)
            and (not i.creator_id or (i.delivery_type in self._digital_types and not i.digital_links))
        })
        if not missing:
            return list(items)

        products = await bounded(self._catalog.get_products(missing), self._timeout, "catalog.get_products")
        by_id = {p.product_id: p for p in products}
        attributed: List[SoldItem] = []
        for item in items:
            product = by_id.get(item.product_id)
            if product is None:
                attributed.append(item)
                continue
            attributed.append(
                replace(
                    item,
                    creator_id=item.creator_id or product.creator_id,
                    digital_links=item.digital_links or tuple(product.digital_links),
                )
            )
        return attributed

    # ================================
    # 🗂️ АДМІН: СЕСІЇ
    # ================================
    async def list_sessions(
        self,
        *,
        processed: Optional[bool] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
    ) -> List[CheckoutSession]:
        return await bounded(
            self._sessions.list(processed=processed, start_date=start_date, end_date=end_date, limit=limit),
            self._timeout,
            "sessions.list",
        )

    async def get_session(self, session_id: str) -> CheckoutSession:
        session = await bounded(self._sessions.get(session_id), self._timeout, "sessions.get")
        if session is None:
            raise NotFoundError(f"Checkout session {session_id} not found", details={"session_id": session_id})
        return session

    async def set_processed(self, session_id: str, processed: bool) -> CheckoutSession:
        session = await self.get_session(session_id)
        updated = replace(session, processed=bool(processed))
        await bounded(self._sessions.replace(updated), self._timeout, "sessions.replace")
        logger.info("🗂️ Session %s processed=%s", session_id, updated.processed)
        return updated

    async def grant_digital_products(self, session_id: str) -> Dict[str, DigitalGrant]:
        """Позначає цифрові видачі сесії як виконані; повертає лише нові."""
        session = await self.get_session(session_id)
        at = self._clock()
        newly: Dict[str, DigitalGrant] = {}
        grants: Dict[str, DigitalGrant] = {}
        for product_id, grant in session.digital_product_data.items():
            if grant.granted:
                grants[product_id] = grant
                continue
            grants[product_id] = newly[product_id] = replace(grant, granted=True, granted_at=at)
        if newly:
            await bounded(self._sessions.replace(replace(session, digital_product_data=grants)), self._timeout, "sessions.replace")
            logger.info("🔑 Session %s: granted %d digital product(s)", session_id, len(newly))
        return newly


__all__ = ["CheckoutQuote", "CheckoutService", "PaymentCapturedEvent"]
