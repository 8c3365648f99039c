# 📒 storefront/infrastructure/sessions/__init__.py
"""📒 Журнал checkout-сесій."""

from .json_session_repository import JsonSessionRepository

__all__ = ["JsonSessionRepository"]
