# 🖨️ storefront/application/custom_print_service.py
"""
🖨️ CustomPrintService — персистентні переходи запитів на друк.

🔹 Чисті переходи робить `PrintStateMachine`, тут лише завантаження і збереження.
🔹 Після (пере)котирування синхронізує обраний тип доставки в кошику власника.
🔹 `mark_paid()` викликається з обробника платежу і є ідемпотентним.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Iterable, Optional, TYPE_CHECKING

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import Dimensions
from storefront.domain.custom_print import (
    CustomPrintRequest,
    DeliveryOffer,
    ICustomPrintRepository,
    PrintStateMachine,
    PrintStatus,
)
from storefront.errors import NotFoundError
from storefront.shared.utils.logger import LOG_NAME

if TYPE_CHECKING:                                                    # pragma: no cover
    from .cart_service import CartService

logger = logging.getLogger(f"{LOG_NAME}.application.custom_print")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CustomPrintService:
    def __init__(
        self,
        repository: ICustomPrintRepository,
        machine: Optional[PrintStateMachine] = None,
        cart_service: Optional["CartService"] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repo = repository
        self._machine = machine or PrintStateMachine()
        self._cart = cart_service
        self._clock = clock

    async def get(self, request_id: str) -> CustomPrintRequest:
        request = await self._repo.get(request_id)
        if request is None:
            raise NotFoundError(f"Custom print request {request_id} not found", details={"request_id": request_id})
        return request

    async def quote(
        self,
        request_id: str,
        *,
        print_fee: Decimal,
        delivery_types: Iterable[DeliveryOffer],
        dimensions: Optional[Dimensions] = None,
        note: Optional[str] = None,
    ) -> CustomPrintRequest:
        """💬 Котирування (або повторне) + синхронізація кошика власника."""
        request = await self.get(request_id)
        quoted = self._machine.quote(
            request,
            print_fee=print_fee,
            delivery_types=delivery_types,
            dimensions=dimensions,
            note=note,
            at=self._clock(),
        )
        await self._repo.save(quoted)
        if self._cart is not None:
            await self._cart.sync_custom_print_delivery(quoted)
        return quoted

    async def advance(self, request_id: str, note: Optional[str] = None) -> CustomPrintRequest:
        request = await self.get(request_id)
        updated = self._machine.advance(request, at=self._clock(), note=note)
        await self._repo.save(updated)
        return updated

    async def cancel(self, request_id: str, note: Optional[str] = None) -> CustomPrintRequest:
        request = await self.get(request_id)
        updated = self._machine.cancel(request, at=self._clock(), note=note)
        await self._repo.save(updated)
        logger.info("🛑 Print request %s cancelled", request_id)
        return updated

    async def mark_paid(self, request_id: str) -> CustomPrintRequest:
        """
        ✅ Проводить запит до `paid` після успішного платежу.

        `quoted → payment_pending → paid`; якщо запит вже `paid` або далі,
        нічого не змінюється.
        """
        request = await self.get(request_id)
        if request.status.rank >= PrintStatus.PAID.rank:
            logger.info("ℹ️ Print request %s already %s, skip mark_paid", request_id, request.status.value)
            return request

        at = self._clock()
        if request.status is PrintStatus.QUOTED:
            request = self._machine.transition(request, PrintStatus.PAYMENT_PENDING, at=at, note="payment captured")
        request = self._machine.transition(request, PrintStatus.PAID, at=at, note="payment captured")
        await self._repo.save(request)
        return request


__all__ = ["CustomPrintService"]
