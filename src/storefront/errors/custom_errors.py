# 🚨 storefront/errors/custom_errors.py
"""
🚨 Ієрархія винятків ядра вітрини.

🔹 `StorefrontError` — базовий клас з кодом, HTTP-статусом та `to_log_extra()`.
🔹 Помилки рівня рядка (`NotFoundError`, `DeliveryTypeUnavailableError`,
   `CurrencyMismatchError`) перехоплюються будівником кошика й не валять весь розрахунок.
🔹 Помилки рівня запиту (`MissingAddressError`, `CheckoutBlockedError`,
   `UpstreamTimeoutError`) прокидаються до API.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Any, Dict, Iterable, Optional, Tuple				# 📐 Типізація


# ================================
# ⚠️ КОДИ ПОМИЛОК
# ================================
class ErrorCode:
    """⚠️ Стабільні машинні коди помилок (ідуть у логи та метрики)."""

    NOT_FOUND = "not_found"
    MISSING_ADDRESS = "missing_address"
    DELIVERY_TYPE_UNAVAILABLE = "delivery_type_unavailable"
    CHECKOUT_BLOCKED = "checkout_blocked"
    INVALID_TRANSITION = "invalid_transition"
    CURRENCY_MISMATCH = "currency_mismatch"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    VALIDATION = "validation_error"


# ================================
# 🧠 БАЗОВИЙ КЛАС
# ================================
class StorefrontError(Exception):
    """🧠 Базова помилка ядра; повідомлення безпечне для показу клієнту."""

    code: str = "storefront_error"
    http_status: int = 500
    retryable: bool = False

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Формує словник для `logger.extra`."""
        extra: Dict[str, object] = {"error_code": self.code}
        extra.update({k: v for k, v in self.details.items() if v is not None})
        return extra

    def to_payload(self) -> Dict[str, Any]:
        """📤 Тіло відповіді API."""
        return {"error": self.message, "code": self.code}


# ================================
# 🧾 ПОМИЛКИ РЯДКА КОШИКА
# ================================
class NotFoundError(StorefrontError):
    """🔍 Товар, варіант або запит на друк не знайдено."""

    code = ErrorCode.NOT_FOUND
    http_status = 404


class DeliveryTypeUnavailableError(StorefrontError):
    """🚚 Обраний тип доставки відсутній, вимкнений або не має тарифу."""

    code = ErrorCode.DELIVERY_TYPE_UNAVAILABLE
    http_status = 400

    def __init__(
        self,
        message: str,
        *,
        product_id: Optional[str] = None,
        delivery_type: Optional[str] = None,
        dimensions: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            details={"product_id": product_id, "delivery_type": delivery_type, "dimensions": dimensions},
        )
        self.product_id = product_id
        self.delivery_type = delivery_type


class CurrencyMismatchError(StorefrontError):
    """💱 Валюта товару відрізняється від валюти розрахунку кошика."""

    code = ErrorCode.CURRENCY_MISMATCH
    http_status = 400


# ================================
# 🛑 ПОМИЛКИ РІВНЯ ЗАПИТУ
# ================================
class MissingAddressError(StorefrontError):
    """🏠 Фізична доставка без адреси користувача."""

    code = ErrorCode.MISSING_ADDRESS
    http_status = 400

    def __init__(self, message: str = "Missing delivery address", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class CheckoutBlockedError(StorefrontError):
    """⛔ У кошику є запити на друк, які ще не закотировані."""

    code = ErrorCode.CHECKOUT_BLOCKED
    http_status = 409

    def __init__(self, request_ids: Iterable[str], message: Optional[str] = None) -> None:
        self.request_ids: Tuple[str, ...] = tuple(request_ids)
        super().__init__(
            message or "Custom print requests must be quoted before checkout",
            details={"request_ids": list(self.request_ids)},
        )

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["blockingRequestIds"] = list(self.request_ids)
        return payload


class InvalidTransitionError(StorefrontError):
    """🔀 Заборонений перехід автомата статусів друку."""

    code = ErrorCode.INVALID_TRANSITION
    http_status = 409


class ValidationError(StorefrontError):
    """🧪 Некоректні вхідні дані операції."""

    code = ErrorCode.VALIDATION
    http_status = 400


class UpstreamTimeoutError(StorefrontError):
    """⏳ Зовнішній колаборатор не відповів вчасно; запит можна повторити."""

    code = ErrorCode.UPSTREAM_TIMEOUT
    http_status = 503
    retryable = True

    def __init__(self, operation: str, timeout_sec: float) -> None:
        super().__init__(
            f"Upstream call timed out: {operation}",
            details={"operation": operation, "timeout_sec": timeout_sec},
        )
        self.operation = operation

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["retryable"] = True
        return payload
