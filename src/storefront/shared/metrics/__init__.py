# 📊 storefront/shared/metrics/__init__.py
"""
📊 Пакет метрик Prometheus для вітрини.

🔹 Лічильники побудови кошика, відкинутих рядків та блокувань checkout.
🔹 Лічильники розподілу виручки (нові записи та ідемпотентні повтори).
🔹 Легкий bootstrap експортера `/metrics`.
"""

from __future__ import annotations

from .checkout import (
    BREAKDOWN_BUILT,
    BREAKDOWN_LATENCY,
    CHECKOUT_BLOCKED,
    LINES_DROPPED,
    PRINT_PAYMENT_UNAPPLIED,
    REVENUE_SPLIT_RECORDED,
    REVENUE_SPLIT_REPLAYED,
)
from .exporters import maybe_start_prometheus

__all__ = [
    "BREAKDOWN_BUILT",
    "BREAKDOWN_LATENCY",
    "CHECKOUT_BLOCKED",
    "LINES_DROPPED",
    "PRINT_PAYMENT_UNAPPLIED",
    "REVENUE_SPLIT_RECORDED",
    "REVENUE_SPLIT_REPLAYED",
    "maybe_start_prometheus",
]
