# ⚙️ storefront/config/__init__.py
"""⚙️ Пакет конфігурації: ConfigService та DI-контейнер."""

from .config_service import ConfigService

__all__ = ["ConfigService"]
