# 🔀 storefront/domain/custom_print/services.py
"""
🔀 Скінченний автомат життєвого циклу запиту на друк.

🔹 Єдина авторитетна функція переходу `transition()` з guard-перевірками.
🔹 Єдиний предикат `is_checkout_eligible()` для кошика та checkout.
🔹 Дії персоналу: `quote()` (включно з перекотируванням) і `cancel()`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Dict, Iterable, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import Dimensions
from storefront.errors import InvalidTransitionError, ValidationError
from storefront.shared.utils.logger import LOG_NAME

from .entities import CustomPrintRequest, DeliveryOffer, StatusHistoryEntry
from .status import PrintStatus

logger = logging.getLogger(f"{LOG_NAME}.domain.custom_print")

Guard = Callable[[CustomPrintRequest], Optional[str]]


# ================================
# 🛡️ GUARD-ПЕРЕВІРКИ
# ================================
def _guard_model_uploaded(request: CustomPrintRequest) -> Optional[str]:
    if request.model_file is None or not request.model_file.is_complete:
        return "model file with storage key and original name is required"
    return None


def _guard_configured(request: CustomPrintRequest) -> Optional[str]:
    if request.print_configuration is None or not request.print_configuration.is_configured:
        return "print configuration must be completed"
    return None


def _guard_priced(request: CustomPrintRequest) -> Optional[str]:
    if request.total_price is None:
        return "base price and print fee are required"
    if not request.delivery_types:
        return "at least one delivery type must be offered"
    return None


def _no_guard(request: CustomPrintRequest) -> Optional[str]:
    return None


# 🧭 Дозволені кроки вперед: (звідки, куди) → guard
FORWARD_GUARDS: Dict[tuple, Guard] = {
    (PrintStatus.PENDING_UPLOAD, PrintStatus.PENDING_CONFIG): _guard_model_uploaded,
    (PrintStatus.PENDING_CONFIG, PrintStatus.CONFIGURED): _guard_configured,
    (PrintStatus.CONFIGURED, PrintStatus.QUOTED): _guard_priced,
    (PrintStatus.QUOTED, PrintStatus.PAYMENT_PENDING): _guard_priced,
    (PrintStatus.PAYMENT_PENDING, PrintStatus.PAID): _no_guard,
    (PrintStatus.PAID, PrintStatus.PRINTING): _no_guard,
    (PrintStatus.PRINTING, PrintStatus.PRINTED): _no_guard,
    (PrintStatus.PRINTED, PrintStatus.SHIPPED): _no_guard,
    (PrintStatus.SHIPPED, PrintStatus.DELIVERED): _no_guard,
}

QUOTABLE_STATUSES = frozenset({PrintStatus.CONFIGURED, PrintStatus.QUOTED})


def is_checkout_eligible(request: CustomPrintRequest) -> bool:
    """Чи може рядок кошика з цим запитом потрапити в checkout."""
    return request.status.is_checkout_eligible


def blocking_request_ids(requests: Iterable[CustomPrintRequest]) -> list[str]:
    """Ідентифікатори запитів, які блокують checkout (у порядку появи)."""
    return [r.request_id for r in requests if r.status.blocks_checkout]


# ================================
# 🏛️ АВТОМАТ СТАТУСІВ
# ================================
class PrintStateMachine:
    """🔀 Чисті переходи статусів; кожен метод повертає нову копію запиту."""

    def __init__(self, config_deadline_days: int = 7) -> None:
        self._deadline = timedelta(days=config_deadline_days)

    def transition(
        self,
        request: CustomPrintRequest,
        target: "PrintStatus | str",
        *,
        at: datetime,
        note: Optional[str] = None,
    ) -> CustomPrintRequest:
        """
        Виконує перехід `request.status → target`.

        Raises:
            InvalidTransitionError: перехід не є кроком вперед / скасуванням,
                або guard не виконано.
        """
        target = PrintStatus.parse(target)
        self._check(request, target)

        changes: Dict[str, object] = {
            "status": target,
            "status_history": request.status_history + (StatusHistoryEntry(target, at, note),),
        }
        if target is PrintStatus.PAID:
            changes["paid_at"] = at
            changes["config_deadline"] = at + self._deadline
        updated = replace(request, **changes)
        logger.info(
            "🔀 Print request %s: %s → %s",
            request.request_id,
            request.status.value,
            target.value,
        )
        return updated

    def advance(self, request: CustomPrintRequest, *, at: datetime, note: Optional[str] = None) -> CustomPrintRequest:
        """Крок на наступний статус ланцюжка."""
        target = request.status.next()
        if target is None:
            raise InvalidTransitionError(
                f"Request {request.request_id} in status {request.status.value} cannot advance",
                details={"request_id": request.request_id, "status": request.status.value},
            )
        return self.transition(request, target, at=at, note=note)

    def quote(
        self,
        request: CustomPrintRequest,
        *,
        print_fee: Decimal,
        delivery_types: Iterable[DeliveryOffer],
        at: datetime,
        dimensions: Optional[Dimensions] = None,
        note: Optional[str] = None,
    ) -> CustomPrintRequest:
        """
        💬 Котирування персоналом: з `configured` або повторно з `quoted`.

        Повторне котирування лишає статус `quoted`, оновлює ціну та доставку
        і додає запис в історію.
        """
        if request.status not in QUOTABLE_STATUSES:
            raise InvalidTransitionError(
                f"Request {request.request_id} cannot be quoted from {request.status.value}",
                details={"request_id": request.request_id, "status": request.status.value},
            )
        if print_fee is None or print_fee < 0:
            raise ValidationError("Print fee must be a non-negative amount", details={"print_fee": str(print_fee)})

        offers = tuple(delivery_types)
        if len({o.type for o in offers}) != len(offers):
            raise ValidationError("Delivery types must be unique", details={"request_id": request.request_id})
        priced = replace(
            request,
            print_fee=print_fee,
            delivery_types=offers,
            dimensions=dimensions if dimensions is not None else request.dimensions,
            staff_note=note if note is not None else request.staff_note,
        )
        if request.status is PrintStatus.QUOTED:
            problem = _guard_priced(priced)
            if problem:
                raise InvalidTransitionError(
                    f"Cannot re-quote request {request.request_id}: {problem}",
                    details={"request_id": request.request_id},
                )
            logger.info("💬 Print request %s re-quoted | fee=%s", request.request_id, print_fee)
            return replace(
                priced,
                status_history=priced.status_history + (StatusHistoryEntry(PrintStatus.QUOTED, at, note),),
            )
        return self.transition(priced, PrintStatus.QUOTED, at=at, note=note)

    def cancel(self, request: CustomPrintRequest, *, at: datetime, note: Optional[str] = None) -> CustomPrintRequest:
        """🛑 Скасування з будь-якого нетермінального статусу."""
        return self.transition(request, PrintStatus.CANCELLED, at=at, note=note)

    # ================================
    # 🧠 ВНУТРІШНЄ
    # ================================
    def _check(self, request: CustomPrintRequest, target: PrintStatus) -> None:
        source = request.status
        details = {"request_id": request.request_id, "from": source.value, "to": target.value}

        if source.is_terminal:
            raise InvalidTransitionError(f"Request {request.request_id} is already {source.value}", details=details)
        if target is PrintStatus.CANCELLED:
            return

        guard = FORWARD_GUARDS.get((source, target))
        if guard is None:
            logger.warning("⚠️ Заборонений перехід %s → %s (%s)", source.value, target.value, request.request_id)
            raise InvalidTransitionError(
                f"Transition {source.value} → {target.value} is not allowed",
                details=details,
            )
        problem = guard(request)
        if problem:
            logger.warning("⚠️ Guard %s → %s не пройдено: %s", source.value, target.value, problem)
            raise InvalidTransitionError(
                f"Cannot move request {request.request_id} to {target.value}: {problem}",
                details=details,
            )
