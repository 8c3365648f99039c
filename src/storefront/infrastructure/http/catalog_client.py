# 🛍️ storefront/infrastructure/http/catalog_client.py
"""
🛍️ HttpCatalogStore / HttpEventStore — каталог і акції через HTTP.

🔹 Пакетне читання товарів розбивається на чанки по `catalog.batch_size` (10).
🔹 Некоректні документи товарів логуються й пропускаються (рядок кошика
   згодом отримає `NotFound`, а не обнулену ціну).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from datetime import date
from typing import Any, Iterable, List, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.entities import Event, ProductSnapshot
from storefront.domain.catalog.interfaces import ICatalogStore, IEventStore
from storefront.infrastructure.mappers import event_from_dict, product_from_dict
from storefront.shared.utils.logger import LOG_NAME

from .base_client import JsonHttpClient

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.catalog")


def chunked(ids: List[str], size: int) -> Iterable[List[str]]:
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


class HttpCatalogStore(JsonHttpClient, ICatalogStore):
    """🛍️ `GET /products/{id}` і `GET /products?ids=a,b,...`."""

    def __init__(self, base_url: str, *, batch_size: int = 10, **kwargs: Any) -> None:
        super().__init__(base_url, **kwargs)
        self._batch_size = max(1, int(batch_size))

    async def get_product(self, product_id: str) -> Optional[ProductSnapshot]:
        payload = await self.get_json(f"/products/{product_id}")
        if payload is None:
            return None
        return self._parse(payload)

    async def get_products(self, product_ids: Iterable[str]) -> List[ProductSnapshot]:
        unique = list(dict.fromkeys(product_ids))
        result: List[ProductSnapshot] = []
        for chunk in chunked(unique, self._batch_size):
            payload = await self.get_json("/products", params={"ids": ",".join(chunk)}) or []
            for doc in payload:
                product = self._parse(doc)
                if product is not None:
                    result.append(product)
        logger.debug("📦 Catalog batch | requested=%d found=%d", len(unique), len(result))
        return result

    @staticmethod
    def _parse(doc: Any) -> Optional[ProductSnapshot]:
        try:
            return product_from_dict(doc)
        except (KeyError, TypeError, ValueError):
            logger.warning("⚠️ Некоректний документ товару пропущено: %r", doc, exc_info=True)
            return None


class HttpEventStore(JsonHttpClient, IEventStore):
    """🎉 `GET /events?isGlobal=true&isActive=true`."""

    async def get_global_events(self, on: date) -> List[Event]:
        payload = await self.get_json("/events", params={"isGlobal": "true", "isActive": "true"}) or []
        events: List[Event] = []
        for doc in payload:
            try:
                event = event_from_dict(doc)
            except (KeyError, TypeError, ValueError):
                logger.warning("⚠️ Некоректна акція пропущена: %r", doc, exc_info=True)
                continue
            if event.is_current(on):
                events.append(event)
        return events
