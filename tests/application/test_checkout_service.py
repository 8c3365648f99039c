""" 🧪 test_checkout_service.py — тести для CheckoutService.

Перевіряє:
- CheckoutBlocked для незакотированого друку в кошику
- котирування checkout для звичайного кошика
- обробку payment captured: сесія, розподіл, друк → paid, очищення кошика
- ідемпотентність повтору події за sessionId
- оплату друку, скасованого або видаленого під час checkout (виручка не губиться)
- товар, видалений з каталогу, лишається за креатором зі знімка
- цифрові видачі, позначку processed і фільтри списку сесій
"""

from datetime import date
from decimal import Decimal

import pytest

from storefront.application import PaymentCapturedEvent
from storefront.domain.cart.entities import CartLine
from storefront.domain.catalog.entities import custom_print_product_id
from storefront.domain.custom_print import PrintStatus
from storefront.domain.revenue.entities import SoldItem
from storefront.errors import CheckoutBlockedError, NotFoundError, ValidationError


def _event(session_id="s1", items=None, shared="0"):
    return PaymentCapturedEvent(
        session_id=session_id,
        user_id="u1",
        currency="SGD",
        items=tuple(items or ()),
        shared_shipping=Decimal(shared),
    )


@pytest.mark.asyncio
async def test_unquoted_print_blocks_checkout(container):
    cart = container.cart_service
    await cart.add_line("u1", CartLine("p2", chosen_delivery_type="standard"))
    await cart.add_line("u1", CartLine(custom_print_product_id("r-configured"), chosen_delivery_type="printDelivery"))

    with pytest.raises(CheckoutBlockedError) as exc_info:
        await container.checkout_service.initiate("u1")

    assert exc_info.value.request_ids == ("r-configured",)
    assert exc_info.value.to_payload()["blockingRequestIds"] == ["r-configured"]


@pytest.mark.asyncio
async def test_initiate_returns_priced_items(container):
    await container.cart_service.add_line("u1", CartLine("p1", quantity=2, chosen_delivery_type="standard"))

    quote = await container.checkout_service.initiate("u1")

    assert quote.items[0].unit_price == Decimal("90.00")
    assert quote.items[0].creator_id == "creator-a"
    assert quote.to_dict()["amountTotal"] == "190.00"


@pytest.mark.asyncio
async def test_empty_cart_cannot_checkout(container):
    with pytest.raises(ValidationError):
        await container.checkout_service.initiate("u1")


@pytest.mark.asyncio
async def test_payment_captured_records_session_and_side_effects(container):
    cart = container.cart_service
    print_id = custom_print_product_id("r-quoted")
    await cart.add_line("u1", CartLine("p1", chosen_delivery_type="standard"))
    await cart.add_line("u1", CartLine(print_id, chosen_delivery_type="printDelivery"))
    await cart.add_line("u1", CartLine("p2", chosen_delivery_type="standard"))
    quote = await container.checkout_service.initiate("u1")
    purchased = [i for i in quote.items if i.product_id != "p2"]

    session = await container.checkout_service.handle_payment_captured(_event(items=purchased))

    assert set(session.sales_data) == {"creator-a", "platform"}
    assert session.total_amount == Decimal("151.00")
    request = await container.custom_print_service.get("r-quoted")
    assert request.status is PrintStatus.PAID
    assert request.config_deadline is not None
    remaining = await cart.get_lines("u1")
    assert [l.product_id for l in remaining] == ["p2"]


@pytest.mark.asyncio
async def test_payment_replay_is_noop(container):
    items = [SoldItem("p2", 1, Decimal("40"), Decimal("3"), "standard")]
    first = await container.checkout_service.handle_payment_captured(_event(items=items))

    replay = await container.checkout_service.handle_payment_captured(
        _event(items=[SoldItem("p2", 5, Decimal("40"), Decimal("3"), "standard")])
    )

    assert replay.total_amount == first.total_amount == Decimal("43.00")
    assert {c: s.total_amount for c, s in replay.sales_data.items()} == {"creator-b": Decimal("43.00")}


@pytest.mark.asyncio
async def test_creator_is_resolved_from_catalog_or_unknown(container):
    items = [
        SoldItem("p2", 1, Decimal("40"), delivery_type="standard"),
        SoldItem("deleted", 1, Decimal("7"), delivery_type="standard"),
    ]

    session = await container.checkout_service.handle_payment_captured(_event(items=items))

    assert session.sales_data["creator-b"].product_revenue == Decimal("40.00")
    assert session.sales_data["__unknown__"].is_unresolved


@pytest.mark.asyncio
async def test_digital_grants_are_granted_once(container):
    items = [SoldItem("ebook", 1, Decimal("15"), delivery_type="digital", creator_id="creator-b")]
    await container.checkout_service.handle_payment_captured(_event(items=items))

    first = await container.checkout_service.grant_digital_products("s1")
    second = await container.checkout_service.grant_digital_products("s1")

    assert list(first) == ["ebook"]
    assert first["ebook"].links == ("https://files.example/ebook.pdf",)
    assert first["ebook"].granted
    assert second == {}


@pytest.mark.asyncio
async def test_processed_flag_and_listing(container):
    service = container.checkout_service
    for sid in ("s1", "s2"):
        await service.handle_payment_captured(_event(sid, [SoldItem("p2", 1, Decimal("40"), creator_id="creator-b")]))

    updated = await service.set_processed("s1", True)

    assert updated.processed
    assert [s.session_id for s in await service.list_sessions(processed=False)] == ["s2"]
    assert await service.list_sessions(start_date=date(2000, 1, 1), end_date=date(2000, 1, 2)) == []
    with pytest.raises(NotFoundError):
        await service.set_processed("missing", True)


@pytest.mark.asyncio
async def test_payment_for_print_cancelled_mid_checkout(container):
    cart = container.cart_service
    await cart.add_line("u1", CartLine("p2", chosen_delivery_type="standard"))
    await cart.add_line("u1", CartLine(custom_print_product_id("r-quoted"), chosen_delivery_type="printDelivery"))
    quote = await container.checkout_service.initiate("u1")
    await container.custom_print_service.cancel("r-quoted", note="customer changed mind")

    session = await container.checkout_service.handle_payment_captured(_event("s-x", items=quote.items))
    replay = await container.checkout_service.handle_payment_captured(_event("s-x", items=quote.items))

    assert session.total_amount == replay.total_amount == Decimal("99.00")
    assert await cart.get_lines("u1") == []
    request = await container.custom_print_service.get("r-quoted")
    assert request.status is PrintStatus.CANCELLED


@pytest.mark.asyncio
async def test_payment_for_missing_print_keeps_revenue(container):
    items = [
        SoldItem(custom_print_product_id("r-gone"), 1, Decimal("50"), Decimal("6"), "printDelivery", creator_id="platform"),
        SoldItem("p2", 1, Decimal("40"), Decimal("3"), "standard"),
    ]

    session = await container.checkout_service.handle_payment_captured(_event(items=items))

    assert session.total_amount == Decimal("99.00")
    assert session.sales_data["platform"].total_amount == Decimal("56.00")
    assert await container.checkout_service.get_session("s1") == session


@pytest.mark.asyncio
async def test_deleted_product_keeps_snapshot_creator(container):
    items = [SoldItem("retired", 2, Decimal("10"), Decimal("1"), "standard", creator_id="creator-z")]

    session = await container.checkout_service.handle_payment_captured(_event(items=items))

    sales = session.sales_data["creator-z"]
    assert sales.total_amount == Decimal("22.00")
    assert not sales.is_unresolved
    assert "__unknown__" not in session.sales_data
