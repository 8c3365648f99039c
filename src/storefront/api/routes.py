# 🛣️ storefront/api/routes.py
"""
🛣️ HTTP-маршрути вітрини (`/api`).

🔹 Кожна мутація кошика повертає перерахований розрахунок.
🔹 Доменні помилки (`StorefrontError`) перетворює на відповідь обробник у `app.py`.
🔹 Адмін-маршрути вимагають `X-User-Role: admin`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from fastapi import APIRouter, Depends, Query

# 🔠 Системні імпорти
import logging
from datetime import date
from typing import Any, Dict, List, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.application import PaymentCapturedEvent
from storefront.application.cart_service import line_key
from storefront.config.setup.container import Container
from storefront.domain.cart.entities import CartLine
from storefront.errors import ValidationError
from storefront.infrastructure.mappers import custom_print_to_dict
from storefront.shared.utils.logger import LOG_NAME

from .dependencies import current_user, get_container, require_admin
from .schemas import (
    AddLineRequest,
    ChangeDeliveryRequest,
    ChangeQuantityRequest,
    ChangeVariantRequest,
    CustomPrintActionRequest,
    LineSelector,
    PaymentCapturedRequest,
    SessionPatchRequest,
)

logger = logging.getLogger(f"{LOG_NAME}.api")

router = APIRouter(prefix="/api", tags=["storefront"])


def _key(body: LineSelector):
    return line_key(body.product_id, body.chosen_delivery_type, body.variant_id, body.selected_variants)


# ================================
# 🧾 РОЗРАХУНОК
# ================================
@router.get("/checkout/breakdown")
async def get_breakdown(
    user_id: str = Depends(current_user),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    breakdown = await container.cart_service.recompute_breakdown(user_id)
    return breakdown.to_dict()


# ================================
# 🛒 КОШИК
# ================================
@router.get("/cart")
async def get_cart(
    user_id: str = Depends(current_user),
    container: Container = Depends(get_container),
) -> List[Dict[str, Any]]:
    lines = await container.cart_service.get_lines(user_id)
    return [line.to_dict() for line in lines]


@router.post("/cart")
async def add_line(
    body: AddLineRequest,
    user_id: str = Depends(current_user),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    try:
        line = CartLine(
            product_id=body.product_id,
            quantity=body.quantity,
            chosen_delivery_type=body.chosen_delivery_type,
            variant_id=body.variant_id,
            selected_variants=body.selected_variants,
            order_note=body.order_note,
        )
    except ValueError as exc:
        raise ValidationError(str(exc), details={"product_id": body.product_id}) from exc
    breakdown = await container.cart_service.add_line(user_id, line)
    return breakdown.to_dict()


@router.patch("/cart/quantity")
async def change_quantity(
    body: ChangeQuantityRequest,
    user_id: str = Depends(current_user),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    breakdown = await container.cart_service.change_quantity(user_id, _key(body), body.delta)
    return breakdown.to_dict()


@router.delete("/cart")
async def remove_line(
    body: LineSelector,
    user_id: str = Depends(current_user),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    breakdown = await container.cart_service.remove_line(user_id, _key(body))
    return breakdown.to_dict()


@router.put("/cart/delivery")
async def change_delivery(
    body: ChangeDeliveryRequest,
    user_id: str = Depends(current_user),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    breakdown = await container.cart_service.change_delivery(
        user_id,
        body.product_id,
        body.chosen_delivery_type,
        variant_id=body.variant_id,
        selected_variants=body.selected_variants,
        current_delivery_type=body.current_delivery_type,
    )
    return breakdown.to_dict()


@router.put("/cart/variant")
async def change_variant(
    body: ChangeVariantRequest,
    user_id: str = Depends(current_user),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    breakdown = await container.cart_service.change_variant(
        user_id,
        _key(body),
        variant_id=body.new_variant_id,
        selected_variants=body.new_selected_variants,
    )
    return breakdown.to_dict()


# ================================
# 💳 CHECKOUT
# ================================
@router.post("/checkout")
async def initiate_checkout(
    user_id: str = Depends(current_user),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    quote = await container.checkout_service.initiate(user_id)
    return quote.to_dict()


@router.post("/webhook/payment-captured")
async def payment_captured(
    body: PaymentCapturedRequest,
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    try:
        items = tuple(item.to_domain() for item in body.items)
    except ValueError as exc:
        raise ValidationError(str(exc), details={"session_id": body.session_id}) from exc
    event = PaymentCapturedEvent(
        session_id=body.session_id,
        user_id=body.user_id,
        currency=body.currency.upper(),
        items=items,
        shared_shipping=body.shared_shipping,
        amount_total=body.amount_total,
    )
    session = await container.checkout_service.handle_payment_captured(event)
    return session.to_dict()


# ================================
# 🗂️ АДМІН
# ================================
@router.get("/admin/sessions")
async def list_sessions(
    processed: Optional[bool] = Query(default=None),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    _admin: str = Depends(require_admin),
    container: Container = Depends(get_container),
) -> List[Dict[str, Any]]:
    sessions = await container.checkout_service.list_sessions(
        processed=processed,
        start_date=start_date,
        end_date=end_date,
        limit=container.session_list_limit,
    )
    return [s.to_dict() for s in sessions]


@router.patch("/admin/sessions")
async def patch_session(
    body: SessionPatchRequest,
    _admin: str = Depends(require_admin),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    session = await container.checkout_service.set_processed(body.session_id, body.processed)
    return session.to_dict()


@router.post("/admin/sessions/{session_id}/digital-grants")
async def grant_digital(
    session_id: str,
    _admin: str = Depends(require_admin),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    granted = await container.checkout_service.grant_digital_products(session_id)
    return {product_id: grant.to_dict() for product_id, grant in granted.items()}


@router.put("/admin/custom-print-requests")
async def custom_print_action(
    body: CustomPrintActionRequest,
    admin_id: str = Depends(require_admin),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    service = container.custom_print_service
    logger.info("🛠️ Custom print %s: %s by %s", body.request_id, body.action, admin_id)
    if body.action == "quote":
        if body.print_fee is None:
            raise ValidationError("printFee is required for quote", details={"request_id": body.request_id})
        request = await service.quote(
            body.request_id,
            print_fee=body.print_fee,
            delivery_types=[offer.to_domain() for offer in body.delivery_types],
            dimensions=body.dimensions.to_domain() if body.dimensions else None,
            note=body.note,
        )
    elif body.action == "cancel":
        request = await service.cancel(body.request_id, note=body.note)
    else:
        request = await service.advance(body.request_id, note=body.note)
    return custom_print_to_dict(request)
