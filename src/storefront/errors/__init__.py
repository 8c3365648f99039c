# 🚨 storefront/errors/__init__.py
"""🚨 Таксономія помилок вітрини."""

from .custom_errors import (
    CheckoutBlockedError,
    CurrencyMismatchError,
    DeliveryTypeUnavailableError,
    ErrorCode,
    InvalidTransitionError,
    MissingAddressError,
    NotFoundError,
    StorefrontError,
    UpstreamTimeoutError,
    ValidationError,
)

__all__ = [
    "ErrorCode",
    "StorefrontError",
    "NotFoundError",
    "MissingAddressError",
    "DeliveryTypeUnavailableError",
    "CheckoutBlockedError",
    "InvalidTransitionError",
    "CurrencyMismatchError",
    "UpstreamTimeoutError",
    "ValidationError",
]
