# 💼 storefront/domain/revenue/services.py
"""
💼 RevenueSplitAggregator — розподіл проданих рядків між креаторами.

🔹 Вся арифметика — у цілих центах, тож Σ по креаторах точно дорівнює сумі сесії.
🔹 `productRevenue` = Σ unitPrice*quantity; `shippingRevenue` = Σ deliveryFee*quantity
   + частка спільної (рівень замовлення) доставки.
🔹 Спільна доставка ділиться порівну (`even`) або пропорційно виручці (`proportional`);
   залишкові центи отримують креатори у порядку зростання ідентифікатора.
🔹 Рядок без креатора не губиться: він іде в окремий кошик `unknown_bucket`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence

# 🧩 Внутрішні модулі проєкту
from storefront.domain.pricing.rounding import ZERO, from_cents, to_cents
from storefront.errors import ValidationError
from storefront.shared.utils.logger import LOG_NAME

from .entities import CheckoutSession, CreatorSales, DigitalGrant, SoldItem

logger = logging.getLogger(f"{LOG_NAME}.domain.revenue")

SPLIT_POLICIES = ("even", "proportional")


@dataclass
class _Bucket:
    product_cents: int = 0
    shipping_cents: int = 0
    items: List[SoldItem] = field(default_factory=list)


class RevenueSplitAggregator:
    """💼 `split(lineItems) → {creatorId: CreatorSales}`; детермінований і без побічних ефектів."""

    def __init__(
        self,
        *,
        shipping_split: str = "even",
        unknown_bucket: str = "__unknown__",
        digital_types: Iterable[str] = ("digital",),
    ) -> None:
        if shipping_split not in SPLIT_POLICIES:
            raise ValueError(f"Unknown shipping split policy: {shipping_split!r}")
        self._policy = shipping_split
        self._unknown = unknown_bucket
        self._digital_types: FrozenSet[str] = frozenset(digital_types)

    def split(self, items: Sequence[SoldItem], shared_shipping: Decimal = ZERO) -> Dict[str, CreatorSales]:
        buckets: Dict[str, _Bucket] = {}
        for item in items:
            creator = item.creator_id or self._unknown
            if creator == self._unknown:
                logger.warning("❓ Sold item %s has no resolvable creator → %s", item.product_id, self._unknown)
            bucket = buckets.setdefault(creator, _Bucket())
            bucket.product_cents += to_cents(item.unit_price * item.quantity)
            bucket.shipping_cents += to_cents(item.delivery_fee * item.quantity)
            bucket.items.append(item)

        shared_cents = to_cents(shared_shipping)
        if shared_cents < 0:
            raise ValidationError("Shared shipping must be >= 0", details={"shared_shipping": str(shared_shipping)})
        if shared_cents and not buckets:
            raise ValidationError("Shared shipping cannot be split across an empty order")
        for creator, extra in self._share_shipping(buckets, shared_cents).items():
            buckets[creator].shipping_cents += extra

        return {
            creator: CreatorSales(
                creator_id=creator,
                product_revenue=from_cents(bucket.product_cents),
                shipping_revenue=from_cents(bucket.shipping_cents),
                items=tuple(bucket.items),
                is_unresolved=creator == self._unknown,
            )
            for creator, bucket in sorted(buckets.items())
        }

    def digital_grants(self, items: Iterable[SoldItem], buyer: str) -> Dict[str, DigitalGrant]:
        """Цифрові рядки → `digitalProductData[productId]` (ще не видані)."""
        grants: Dict[str, DigitalGrant] = {}
        for item in items:
            if item.delivery_type in self._digital_types:
                grants[item.product_id] = DigitalGrant(product_id=item.product_id, buyer=buyer, links=item.digital_links)
        return grants

    def build_session(
        self,
        *,
        session_id: str,
        user_id: str,
        currency: str,
        items: Sequence[SoldItem],
        created_at: datetime,
        shared_shipping: Decimal = ZERO,
        captured_amount: Optional[Decimal] = None,
    ) -> CheckoutSession:
        """Збирає сесію; `total_amount` дорівнює Σ по креаторах за побудовою."""
        sales = self.split(items, shared_shipping)
        total = sum((s.total_amount for s in sales.values()), ZERO)
        if captured_amount is not None and abs(captured_amount - total) > Decimal("0.01"):
            logger.warning(
                "⚠️ Session %s: captured %s ≠ computed %s %s",
                session_id,
                captured_amount,
                total,
                currency,
            )
        return CheckoutSession(
            session_id=session_id,
            user_id=user_id,
            currency=currency,
            total_amount=total,
            sales_data=sales,
            digital_product_data=self.digital_grants(items, user_id),
            created_at=created_at,
            shared_shipping=shared_shipping,
            captured_amount=captured_amount,
        )

    # ================================
    # 🚚 СПІЛЬНА ДОСТАВКА
    # ================================
    def _share_shipping(self, buckets: Dict[str, _Bucket], total_cents: int) -> Dict[str, int]:
        creators = sorted(buckets)
        if not creators or total_cents == 0:
            return {}

        weights = {c: buckets[c].product_cents for c in creators}
        total_weight = sum(weights.values())
        if self._policy == "proportional" and total_weight > 0:
            shares = {c: total_cents * weights[c] // total_weight for c in creators}
        else:
            shares = {c: total_cents // len(creators) for c in creators}

        remainder = total_cents - sum(shares.values())
        for creator in creators[:remainder]:                 # 🪙 Залишкові центи за порядком id
            shares[creator] += 1
        return shares
