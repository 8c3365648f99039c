# 🌐 storefront/infrastructure/http/__init__.py
"""🌐 HTTP-клієнти зовнішніх сервісів (каталог, акції, адреси)."""

from .address_client import HttpAddressStore
from .catalog_client import HttpCatalogStore, HttpEventStore

__all__ = ["HttpAddressStore", "HttpCatalogStore", "HttpEventStore"]
