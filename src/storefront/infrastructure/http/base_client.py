# 🌐 storefront/infrastructure/http/base_client.py
"""
🌐 Базовий асинхронний JSON-клієнт на httpx.

🔹 Ледача ініціалізація `httpx.AsyncClient` з таймаутом із конфігів.
🔹 Таймаут → `UpstreamTimeoutError` (retryable), 404 → None.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                        # 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import asyncio
import logging
from typing import Any, Dict, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.errors import UpstreamTimeoutError
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.http")


class JsonHttpClient:
    """🔌 Спільний життєвий цикл httpx-клієнта для адаптерів."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_sec: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not base_url or not isinstance(base_url, str):
            raise ValueError("HTTP adapter requires a base_url")
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout_sec)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._init_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._init_lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.AsyncClient(
                    base_url=self._base_url,
                    timeout=self._timeout,
                    transport=self._transport,
                )
                logger.debug("🔧 httpx client created | base=%s timeout=%ss", self._base_url, self._timeout)
            return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.info("🔌 HTTP-клієнт %s закрито.", self._base_url)

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """GET → розібраний JSON; 404 → None; інші не-2xx → httpx.HTTPStatusError."""
        client = await self._ensure_client()
        try:
            response = await client.get(path, params=params)
        except httpx.TimeoutException as exc:
            logger.error("⏳ Timeout GET %s%s (%ss): %s", self._base_url, path, self._timeout, exc)
            raise UpstreamTimeoutError(f"GET {path}", self._timeout) from exc
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()
