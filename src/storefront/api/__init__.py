# 🌐 storefront/api/__init__.py
"""🌐 HTTP-поверхня вітрини (FastAPI)."""

from .app import create_app
from .routes import router

__all__ = ["create_app", "router"]
