# 🌍 storefront/domain/delivery/zones.py
"""
🌍 ShippingZones — відображення країни призначення на зону тарифної сітки перевізника.

🔹 Країна порівнюється без урахування регістру та пробілів; приймаються і назви, і ISO-коди.
🔹 Порожня або невідома країна → зона за замовчуванням.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

DOMESTIC_ZONE = "domestic"


@dataclass(frozen=True, slots=True)
class ShippingZones:
    countries: Mapping[str, str] = field(default_factory=dict)
    default_zone: str = "zone_d"

    def __post_init__(self) -> None:
        normalized = {str(k).strip().lower(): str(v).strip().lower() for k, v in self.countries.items()}
        object.__setattr__(self, "countries", MappingProxyType(normalized))

    def zone_for(self, country: Optional[str]) -> str:
        key = (country or "").strip().lower()
        if not key:
            return self.default_zone
        return self.countries.get(key, self.default_zone)


__all__ = ["DOMESTIC_ZONE", "ShippingZones"]
