# 📍 storefront/infrastructure/http/address_client.py
"""📍 HttpAddressStore — `GET /users/{userId}/address` (404 → адреси нема)."""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.cart.entities import Address
from storefront.domain.cart.interfaces import IAddressStore
from storefront.infrastructure.mappers import address_from_dict

from .base_client import JsonHttpClient


class HttpAddressStore(JsonHttpClient, IAddressStore):
    async def get_user_address(self, user_id: str) -> Optional[Address]:
        payload = await self.get_json(f"/users/{user_id}/address")
        if not payload:
            return None
        return address_from_dict(payload, user_id=user_id)
