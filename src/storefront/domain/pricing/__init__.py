# 💰 storefront/domain/pricing/__init__.py
"""
💰 Ціноутворення одиниці товару.

🔹 `rounding` — Decimal-хелпери (імпортуються сутностями каталогу, тому пакет лишається легким).
🔹 `services.DiscountResolver` — вибір знижки; імпортувати напряму з модуля.
"""

from .rounding import CENT, ZERO, from_cents, money_str, q2, to_cents, to_decimal

__all__ = ["CENT", "ZERO", "from_cents", "money_str", "q2", "to_cents", "to_decimal"]
