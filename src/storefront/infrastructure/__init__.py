# 🏗️ storefront/infrastructure/__init__.py
"""🏗️ Адаптери до зовнішніх колабораторів (HTTP, файли, памʼять, конфіг)."""
