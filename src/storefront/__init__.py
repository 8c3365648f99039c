# 🛒 storefront/__init__.py
"""
🛒 Ядро вітрини маркетплейсу креаторів.

🔹 Розрахунок кошика (ціни, знижки, доставка) з серверною авторитетністю.
🔹 Життєвий цикл кастомних 3D-друків як явний скінченний автомат.
🔹 Розподіл виручки між креаторами після оплати.
"""

__version__ = "0.1.0"
