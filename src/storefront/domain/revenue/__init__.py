# 💼 storefront/domain/revenue/__init__.py
"""💼 Домен виручки: checkout-сесії та розподіл між креаторами."""

from .entities import CheckoutSession, CreatorSales, DigitalGrant, SoldItem
from .interfaces import ISessionRepository
from .services import SPLIT_POLICIES, RevenueSplitAggregator

__all__ = [
    "CheckoutSession",
    "CreatorSales",
    "DigitalGrant",
    "ISessionRepository",
    "RevenueSplitAggregator",
    "SPLIT_POLICIES",
    "SoldItem",
]
