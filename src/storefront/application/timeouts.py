# ⏳ storefront/application/timeouts.py
"""⏳ Обмеження часу очікування зовнішнього I/O."""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
from typing import Awaitable, TypeVar

from storefront.errors import UpstreamTimeoutError
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.application")

T = TypeVar("T")


async def bounded(awaitable: Awaitable[T], timeout_sec: float, operation: str) -> T:
    """Чекає не довше `timeout_sec`, інакше піднімає retryable `UpstreamTimeoutError`."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_sec)
    except asyncio.TimeoutError as exc:
        logger.error("⏳ %s перевищив таймаут %ss", operation, timeout_sec)
        raise UpstreamTimeoutError(operation, timeout_sec) from exc
