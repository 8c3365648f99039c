# 🧩 storefront/domain/custom_print/status.py
"""
🧩 status.py — Статуси запиту на кастомний 3D-друк.

Зачем Enum?
- Єдине авторитетне місце для порядку статусів і правила «чи можна в checkout».
- Жодних рядкових порівнянь, розкиданих по споживачах.
"""

from __future__ import annotations

# 🔠 Стандартні імпорти
from enum import Enum, unique                                         # 🧱 Побудова enum з гарантією унікальності
from typing import Optional, Tuple


@unique
class PrintStatus(str, Enum):
    """Життєвий цикл запиту на друк (лише вперед, `cancelled` — термінальний вихід)."""

    PENDING_UPLOAD = "pending_upload"      # 📤 Чекаємо модель
    PENDING_CONFIG = "pending_config"      # ⚙️ Модель є, чекаємо налаштування друку
    CONFIGURED = "configured"              # 🧾 Налаштовано, чекає котирування
    QUOTED = "quoted"                      # 💬 Ціна встановлена персоналом
    PAYMENT_PENDING = "payment_pending"    # 💳 Платіж ініційовано
    PAID = "paid"                          # ✅ Оплачено
    PRINTING = "printing"                  # 🖨️ Друкується
    PRINTED = "printed"                    # 📦 Надруковано
    SHIPPED = "shipped"                    # 🚚 Відправлено
    DELIVERED = "delivered"                # 🏁 Доставлено
    CANCELLED = "cancelled"                # 🛑 Скасовано

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        """Позиція у ланцюжку прогресу; `cancelled` поза ланцюжком (-1)."""
        try:
            return PROGRESSION.index(self)
        except ValueError:
            return -1

    @property
    def is_terminal(self) -> bool:
        return self in (PrintStatus.DELIVERED, PrintStatus.CANCELLED)

    @property
    def is_checkout_eligible(self) -> bool:
        """Рядок кошика з таким запитом можна оплачувати: `quoted` і далі, крім `cancelled`."""
        return self.rank >= PrintStatus.QUOTED.rank

    @property
    def blocks_checkout(self) -> bool:
        """Запит ще до котирування — рядок кошика блокує checkout."""
        return self in BLOCKING_STATUSES

    def next(self) -> Optional["PrintStatus"]:
        """Наступний статус у ланцюжку або None для термінальних."""
        if self.rank < 0 or self.rank + 1 >= len(PROGRESSION):
            return None
        return PROGRESSION[self.rank + 1]

    @classmethod
    def parse(cls, value: "str | PrintStatus") -> "PrintStatus":
        """Рядок → статус; невідоме значення → ValueError."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


PROGRESSION: Tuple[PrintStatus, ...] = (
    PrintStatus.PENDING_UPLOAD,
    PrintStatus.PENDING_CONFIG,
    PrintStatus.CONFIGURED,
    PrintStatus.QUOTED,
    PrintStatus.PAYMENT_PENDING,
    PrintStatus.PAID,
    PrintStatus.PRINTING,
    PrintStatus.PRINTED,
    PrintStatus.SHIPPED,
    PrintStatus.DELIVERED,
)

BLOCKING_STATUSES = frozenset({
    PrintStatus.PENDING_UPLOAD,
    PrintStatus.PENDING_CONFIG,
    PrintStatus.CONFIGURED,
})
