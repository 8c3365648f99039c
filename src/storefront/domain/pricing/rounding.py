# 🔁 storefront/domain/pricing/rounding.py
"""
🔁 Грошові хелпери: Decimal-нормалізація, округлення до 2 знаків, центи.

Правило: округлюємо ОДИН раз — на фінальному значенні, ніколи на проміжних кроках.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENT = Decimal("0.01")                                         # 💵 Мінімальна одиниця (SGD/USD/EUR)
ZERO = Decimal("0")


def to_decimal(value: Any, *, default: Decimal | None = None) -> Decimal:
    """Надійна конвертація (int|float|str|Decimal) → Decimal; None → default."""
    if value is None:
        if default is None:
            raise ValueError("Очікувалось числове значення, отримано None")
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Некоректне числове значення: {value!r}")
    try:
        return Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValueError(f"Некоректне числове значення: {value!r}") from e


def q2(value: Decimal) -> Decimal:
    """Округлення до центів (ROUND_HALF_UP)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Decimal) -> int:
    """Decimal-сума → ціле число центів."""
    return int(q2(value) * 100)


def from_cents(cents: int) -> Decimal:
    """Ціле число центів → Decimal з 2 знаками."""
    return q2(Decimal(cents) / 100)


def money_str(value: Decimal) -> str:
    """Стабільне текстове представлення суми ("90.00")."""
    return f"{q2(value):.2f}"
