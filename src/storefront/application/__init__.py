# 🚀 storefront/application/__init__.py
"""
🚀 Асинхронні прикладні сервіси.

🔹 Спершу завантажують усі дані з обмеженим таймаутом, потім викликають чистий домен.
"""

from .cart_service import CartService
from .checkout_service import CheckoutQuote, CheckoutService, PaymentCapturedEvent
from .custom_print_service import CustomPrintService

__all__ = [
    "CartService",
    "CheckoutQuote",
    "CheckoutService",
    "CustomPrintService",
    "PaymentCapturedEvent",
]
