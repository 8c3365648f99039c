# ⚙️ storefront/config/setup/__init__.py
"""
⚙️ Пакет для 'збірки' всіх компонентів вітрини перед запуском.

Надає доступ до контейнера залежностей та bootstrap логування.
"""

from .container import Container, bootstrap_logging

__all__ = [
    "Container",
    "bootstrap_logging",
]
