# 📈 storefront/shared/metrics/checkout.py
"""
📈 Prometheus-метрики кошика та checkout.

🔹 `BREAKDOWN_BUILT` / `BREAKDOWN_LATENCY` — кількість і час перерахунку кошика.
🔹 `LINES_DROPPED` — рядки, виключені з розрахунку (label `reason`).
🔹 `CHECKOUT_BLOCKED` — спроби checkout із незакотированим друком.
🔹 `REVENUE_SPLIT_*` — записані та повторені (ідемпотентні) сесії.
🔹 `PRINT_PAYMENT_UNAPPLIED` — оплачені запити друку, які не вдалося провести до `paid`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter, Histogram                      # 📊 Prometheus-метрики

# ================================
# 🛒 КОШИК
# ================================
BREAKDOWN_BUILT = Counter(
    "storefront_breakdowns_total",                                   # 🏷️ Імʼя метрики
    "Cart breakdowns computed",                                      # 📝 Опис у Prometheus
)

LINES_DROPPED = Counter(
    "storefront_breakdown_lines_dropped_total",
    "Cart lines excluded from a breakdown",
    ["reason"],                                                      # 🏷️ not_found / delivery_type_unavailable / ...
)

BREAKDOWN_LATENCY = Histogram(
    "storefront_breakdown_seconds",
    "Time to fetch inputs and compute a cart breakdown",
)

# ================================
# 💳 CHECKOUT ТА ВИРУЧКА
# ================================
CHECKOUT_BLOCKED = Counter(
    "storefront_checkout_blocked_total",
    "Checkout initiations rejected because of unquoted custom prints",
)

REVENUE_SPLIT_RECORDED = Counter(
    "storefront_revenue_splits_total",
    "Checkout sessions recorded with a revenue split",
)

REVENUE_SPLIT_REPLAYED = Counter(
    "storefront_revenue_split_replays_total",
    "Repeated payment-captured events for already recorded sessions",
)

PRINT_PAYMENT_UNAPPLIED = Counter(
    "storefront_print_payment_unapplied_total",
    "Paid custom-print requests that could not be moved to paid",
)


__all__ = [
    "BREAKDOWN_BUILT",
    "LINES_DROPPED",
    "BREAKDOWN_LATENCY",
    "CHECKOUT_BLOCKED",
    "REVENUE_SPLIT_RECORDED",
    "REVENUE_SPLIT_REPLAYED",
    "PRINT_PAYMENT_UNAPPLIED",
]
