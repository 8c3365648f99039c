""" 🧪 test_http_catalog_store.py — тести HTTP-адаптерів каталогу та адрес.

Перевіряє:
- пакетне читання товарів чанками по 10 ідентифікаторів
- 404 → None, пропуск некоректних документів
- фільтр поточних глобальних акцій
- таймаут → retryable UpstreamTimeoutError
"""

from datetime import date

import httpx
import pytest

from storefront.errors import UpstreamTimeoutError
from storefront.infrastructure.http import HttpAddressStore, HttpCatalogStore, HttpEventStore


def _doc(pid):
    return {"_id": pid, "name": pid, "creatorUserId": "c1", "price": {"amount": 10, "currency": "SGD"}}


@pytest.mark.asyncio
async def test_get_products_is_chunked_by_ten():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        ids = request.url.params["ids"].split(",")
        calls.append(ids)
        return httpx.Response(200, json=[_doc(pid) for pid in ids])

    store = HttpCatalogStore("http://catalog.test", batch_size=10, transport=httpx.MockTransport(handler))
    ids = [f"p{i}" for i in range(23)]

    products = await store.get_products(ids + ["p0"])
    await store.close()

    assert [len(c) for c in calls] == [10, 10, 3]
    assert [p.product_id for p in products] == ids


@pytest.mark.asyncio
async def test_missing_product_and_broken_documents():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/products/ghost":
            return httpx.Response(404)
        return httpx.Response(200, json=[_doc("ok"), {"name": "no id", "price": "abc"}])

    store = HttpCatalogStore("http://catalog.test", transport=httpx.MockTransport(handler))

    assert await store.get_product("ghost") is None
    assert [p.product_id for p in await store.get_products(["ok", "bad"])] == ["ok"]
    await store.close()


@pytest.mark.asyncio
async def test_events_are_filtered_by_date():
    events = [
        {"name": "now", "percentage": 10, "startDate": "2026-05-01", "endDate": "2026-05-31"},
        {"name": "past", "percentage": 20, "startDate": "2026-01-01", "endDate": "2026-01-31"},
    ]
    store = HttpEventStore("http://catalog.test", transport=httpx.MockTransport(lambda r: httpx.Response(200, json=events)))

    current = await store.get_global_events(date(2026, 5, 15))
    await store.close()

    assert [e.name for e in current] == ["now"]


@pytest.mark.asyncio
async def test_address_lookup():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/users/u1/address":
            return httpx.Response(200, json={"line1": "1 Orchard Rd", "postalCode": "238801", "country": "SG"})
        return httpx.Response(404)

    store = HttpAddressStore("http://address.test", transport=httpx.MockTransport(handler))

    address = await store.get_user_address("u1")
    assert address.postal_code == "238801"
    assert await store.get_user_address("u2") is None
    await store.close()


@pytest.mark.asyncio
async def test_timeout_is_retryable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    store = HttpCatalogStore("http://catalog.test", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamTimeoutError) as exc_info:
        await store.get_product("p1")
    assert exc_info.value.to_payload()["retryable"] is True
    await store.close()
