""" 🧪 test_json_session_repository.py — тести JsonSessionRepository.

Перевіряє:
- add_if_absent як ідемпотентний запис за sessionId
- збереження та повторне читання з диска
- replace лише для наявних сесій
- атомарний запис через .tmp без залишків і без пошкодження журналу
"""

import json
from decimal import Decimal

import pytest

import storefront.infrastructure.sessions.json_session_repository as repo_module
from storefront.domain.revenue.entities import SoldItem
from storefront.domain.revenue.services import RevenueSplitAggregator
from storefront.infrastructure.sessions import JsonSessionRepository


def _session(session_id, created_at):
    return RevenueSplitAggregator().build_session(
        session_id=session_id,
        user_id="u1",
        currency="SGD",
        items=[
            SoldItem("a1", 2, Decimal("12.50"), Decimal("1"), "standard", creator_id="creator-a"),
            SoldItem("e1", 1, Decimal("5"), delivery_type="digital", creator_id="creator-b", digital_links=("https://x/e1",)),
        ],
        created_at=created_at,
        shared_shipping=Decimal("0.99"),
    )


@pytest.mark.asyncio
async def test_add_if_absent_is_idempotent(tmp_path, fixed_now):
    repo = JsonSessionRepository(str(tmp_path / "s.json"))
    original = _session("s1", fixed_now)

    stored, created = await repo.add_if_absent(original)
    again, created_again = await repo.add_if_absent(_session("s1", fixed_now))

    assert created and not created_again
    assert again is stored


@pytest.mark.asyncio
async def test_sessions_survive_reload(tmp_path, fixed_now):
    path = tmp_path / "nested" / "s.json"
    await JsonSessionRepository(str(path)).add_if_absent(_session("s1", fixed_now))

    loaded = await JsonSessionRepository(str(path)).get("s1")

    assert loaded.total_amount == Decimal("32.99")
    assert loaded.creator_total == loaded.total_amount
    assert loaded.sales_data["creator-a"].shipping_revenue == Decimal("2.50")
    assert loaded.digital_product_data["e1"].links == ("https://x/e1",)
    assert loaded.created_at == fixed_now


@pytest.mark.asyncio
async def test_replace_requires_existing(tmp_path, fixed_now):
    repo = JsonSessionRepository(str(tmp_path / "s.json"))

    with pytest.raises(KeyError):
        await repo.replace(_session("missing", fixed_now))


@pytest.mark.asyncio
async def test_flush_leaves_no_temp_file(tmp_path, fixed_now):
    path = tmp_path / "s.json"
    repo = JsonSessionRepository(str(path))

    await repo.add_if_absent(_session("s1", fixed_now))
    await repo.add_if_absent(_session("s2", fixed_now))

    assert sorted(p.name for p in tmp_path.iterdir()) == ["s.json"]
    assert [doc["sessionId"] for doc in json.loads(path.read_text(encoding="utf-8"))] == ["s1", "s2"]


@pytest.mark.asyncio
async def test_failed_write_keeps_previous_ledger(tmp_path, fixed_now, monkeypatch):
    path = tmp_path / "s.json"
    repo = JsonSessionRepository(str(path))
    await repo.add_if_absent(_session("s1", fixed_now))
    before = path.read_text(encoding="utf-8")

    def _crash(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(repo_module.os, "replace", _crash)

    with pytest.raises(OSError):
        await repo.add_if_absent(_session("s2", fixed_now))

    assert path.read_text(encoding="utf-8") == before
    assert not (tmp_path / "s.json.tmp").exists()
    assert await repo.get("s2") is None
