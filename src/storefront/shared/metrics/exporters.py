# 🚀 storefront/shared/metrics/exporters.py
"""🚀 Bootstrap HTTP-експортера Prometheus (`/metrics`)."""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import start_http_server                       # 📡 Вбудований HTTP-сервер метрик

# 🔠 Системні імпорти
import logging
import threading

from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.metrics")

_started_port: int | None = None                                       # 🔒 Порт уже запущеного експортера
_lock = threading.Lock()


def maybe_start_prometheus(port: int) -> bool:
    """
    Запускає експортер один раз на процес.

    Returns:
        bool: True, якщо експортер стартував саме цим викликом.
    """
    global _started_port
    with _lock:
        if _started_port is not None:
            logger.debug("📈 Prometheus вже працює на порті %s", _started_port)
            return False
        start_http_server(port)
        _started_port = port
        logger.info("📈 Prometheus експортер слухає порт %s", port)
        return True
