""" 🧪 test_storefront_api.py — HTTP API вітрини через ASGITransport.

Перевіряє:
- 401 без X-User-Id та 403 для не-адміна
- форму розрахунку кошика та мутації рядків
- 409 з blockingRequestIds для незакотированого друку
- ідемпотентність вебхука payment captured
- адмін-маршрути: сесії, processed, дії над запитами друку
- 400 на невалідне тіло запиту
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from storefront.api import create_app

USER = {"X-User-Id": "u1"}
ADMIN = {"X-User-Id": "staff-1", "X-User-Role": "admin"}


@pytest_asyncio.fixture
async def client(container):
    app = create_app(container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _payment(session_id="s1", quantity=1):
    return {
        "sessionId": session_id,
        "userId": "u1",
        "currency": "sgd",
        "items": [
            {"productId": "p2", "quantity": quantity, "unitPrice": "40", "deliveryFee": "3", "deliveryType": "standard"},
        ],
    }


# ================================
# 🪪 ІДЕНТИЧНІСТЬ
# ================================
@pytest.mark.asyncio
async def test_missing_user_header_is_unauthorized(client):
    resp = await client.get("/api/cart")

    assert resp.status_code == 401
    assert resp.json() == {"error": "Missing X-User-Id header"}


@pytest.mark.asyncio
async def test_admin_routes_require_role(client):
    resp = await client.get("/api/admin/sessions", headers=USER)

    assert resp.status_code == 403


# ================================
# 🛒 КОШИК ТА РОЗРАХУНОК
# ================================
@pytest.mark.asyncio
async def test_add_line_returns_breakdown(client):
    resp = await client.post(
        "/api/cart",
        json={"productId": "p1", "quantity": 2, "chosenDeliveryType": "standard"},
        headers=USER,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["grandTotal"] == "190.00"
    assert body["currency"] == "SGD"
    line = body["cartBreakdown"][0]
    assert line["price"] == "90.00"
    assert line["priceBeforeDiscount"] == "100.00"
    assert line["deliveryFee"] == "5.00"
    assert line["discount"]["source"] == "product"


@pytest.mark.asyncio
async def test_quantity_and_remove_round(client):
    await client.post("/api/cart", json={"productId": "p2", "chosenDeliveryType": "standard"}, headers=USER)

    resp = await client.patch(
        "/api/cart/quantity",
        json={"productId": "p2", "chosenDeliveryType": "standard", "delta": 2},
        headers=USER,
    )
    assert resp.json()["cartBreakdown"][0]["quantity"] == 3
    assert resp.json()["grandTotal"] == "129.00"

    resp = await client.request(
        "DELETE", "/api/cart", json={"productId": "p2", "chosenDeliveryType": "standard"}, headers=USER,
    )
    assert resp.json()["cartBreakdown"] == []
    cart = await client.get("/api/cart", headers=USER)
    assert cart.json() == []


@pytest.mark.asyncio
async def test_unknown_delivery_type_is_rejected(client):
    await client.post("/api/cart", json={"productId": "p2", "chosenDeliveryType": "standard"}, headers=USER)

    resp = await client.put(
        "/api/cart/delivery",
        json={"productId": "p2", "chosenDeliveryType": "express", "currentDeliveryType": "standard"},
        headers=USER,
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "delivery_type_unavailable"


@pytest.mark.asyncio
async def test_invalid_body_is_bad_request(client):
    resp = await client.post("/api/cart", json={"quantity": 1}, headers=USER)

    assert resp.status_code == 400
    assert resp.json()["code"] == "validation_error"


# ================================
# 💳 CHECKOUT ТА ВЕБХУК
# ================================
@pytest.mark.asyncio
async def test_checkout_blocked_until_print_is_quoted(client):
    await client.post(
        "/api/cart",
        json={"productId": "custom-print:r-configured", "chosenDeliveryType": "printDelivery"},
        headers=USER,
    )

    blocked = await client.post("/api/checkout", headers=USER)
    assert blocked.status_code == 409
    assert blocked.json()["blockingRequestIds"] == ["r-configured"]

    quoted = await client.put(
        "/api/admin/custom-print-requests",
        json={
            "requestId": "r-configured",
            "action": "quote",
            "printFee": "25",
            "deliveryTypes": [{"type": "printDelivery", "price": "6"}],
        },
        headers=ADMIN,
    )
    assert quoted.status_code == 200
    assert quoted.json()["status"] == "quoted"
    assert quoted.json()["printFee"] == "25.00"

    resp = await client.post("/api/checkout", headers=USER)
    assert resp.status_code == 200
    assert resp.json()["amountTotal"] == "51.00"
    assert resp.json()["items"][0]["creatorId"] == "platform"


@pytest.mark.asyncio
async def test_payment_webhook_is_idempotent(client):
    first = await client.post("/api/webhook/payment-captured", json=_payment())
    replay = await client.post("/api/webhook/payment-captured", json=_payment(quantity=4))

    assert first.status_code == replay.status_code == 200
    assert first.json()["totalAmount"] == replay.json()["totalAmount"] == "43.00"
    assert first.json()["currency"] == "SGD"
    assert replay.json()["salesData"]["creator-b"]["totalAmount"] == "43.00"


# ================================
# 🗂️ АДМІН
# ================================
@pytest.mark.asyncio
async def test_admin_lists_and_marks_sessions(client):
    await client.post("/api/webhook/payment-captured", json=_payment("s1"))
    await client.post("/api/webhook/payment-captured", json=_payment("s2"))

    patched = await client.patch("/api/admin/sessions", json={"sessionId": "s1", "processed": True}, headers=ADMIN)
    assert patched.json()["processed"] is True

    pending = await client.get("/api/admin/sessions", params={"processed": "false"}, headers=ADMIN)
    assert [s["sessionId"] for s in pending.json()] == ["s2"]

    missing = await client.patch("/api/admin/sessions", json={"sessionId": "nope", "processed": True}, headers=ADMIN)
    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"


@pytest.mark.asyncio
async def test_quote_without_fee_is_rejected(client):
    resp = await client.put(
        "/api/admin/custom-print-requests",
        json={"requestId": "r-configured", "action": "quote"},
        headers=ADMIN,
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "validation_error"


@pytest.mark.asyncio
async def test_cancel_custom_print(client):
    resp = await client.put(
        "/api/admin/custom-print-requests",
        json={"requestId": "r-quoted", "action": "cancel", "note": "customer asked"},
        headers=ADMIN,
    )

    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"
    assert resp.json()["statusHistory"][-1]["note"] == "customer asked"
