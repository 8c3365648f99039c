# 🏛️ storefront/domain/__init__.py
"""🏛️ Доменний шар: чиста бізнес-логіка без I/O."""
