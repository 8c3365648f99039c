# 🔍 storefront/domain/catalog/services.py
"""
🔍 CatalogLookup — чисте розвʼязання (товар + вибір варіанта) у знімок з ціною.

🔹 Працює поверх даних, завантажених заздалегідь (жодного I/O всередині).
🔹 `custom-print:<requestId>` підміняється шаблоном «базового товару друку»
   з живими типами доставки запиту та ціною `basePrice + printFee`.
🔹 Невідомий товар / варіант / вісь / опція → `NotFoundError`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.custom_print.entities import CustomPrintRequest
from storefront.domain.pricing.rounding import ZERO
from storefront.errors import NotFoundError
from storefront.shared.utils.logger import LOG_NAME

from .entities import (
    DeliveryTypeDescriptor,
    DeliveryTypeOption,
    ProductSnapshot,
    custom_print_request_id,
    is_custom_print_id,
)

logger = logging.getLogger(f"{LOG_NAME}.domain.catalog")


@dataclass(frozen=True, slots=True)
class CustomPrintTemplate:
    """Спільний «базовий товар друку» для синтетичних рядків кошика."""

    name: str = "Custom 3D Print"
    currency: str = "SGD"
    creator_id: Optional[str] = "platform"
    product_type: str = "print"


class CatalogLookup:
    """🔍 `resolve(productId, variantSelector) → ProductSnapshot | NotFound`."""

    def __init__(
        self,
        products: Mapping[str, ProductSnapshot],
        delivery_types: Iterable[DeliveryTypeDescriptor] = (),
        custom_prints: Optional[Mapping[str, CustomPrintRequest]] = None,
        template: Optional[CustomPrintTemplate] = None,
        digital_types: Iterable[str] = ("digital",),
    ) -> None:
        self._products: Dict[str, ProductSnapshot] = dict(products)
        self._descriptors: Dict[str, DeliveryTypeDescriptor] = {d.name: d for d in delivery_types}
        self._custom_prints: Dict[str, CustomPrintRequest] = dict(custom_prints or {})
        self._template = template or CustomPrintTemplate()
        self._digital_types: FrozenSet[str] = frozenset(digital_types)

    # ================================
    # 🔓 ПУБЛІЧНИЙ API
    # ================================
    def custom_print(self, request_id: str) -> Optional[CustomPrintRequest]:
        return self._custom_prints.get(request_id)

    def resolve(
        self,
        product_id: str,
        *,
        variant_id: Optional[str] = None,
        selected_variants: Optional[Mapping[str, str]] = None,
    ) -> ProductSnapshot:
        """
        Повертає знімок із застосованим вибором варіанта.

        `selected_variants` (багатовісний вибір) має пріоритет над `variant_id`.

        Raises:
            NotFoundError: товару, запиту, варіанта, осі чи опції не існує.
        """
        if is_custom_print_id(product_id):
            return self._resolve_custom_print(product_id)

        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found", details={"product_id": product_id})

        base_price = product.base_price
        variant_fee = ZERO
        if selected_variants:
            variant_fee = self._variant_fee(product, selected_variants)
        elif variant_id:
            variant = product.legacy_variant(variant_id)
            if variant is None:
                raise NotFoundError(
                    f"Variant {variant_id} not found for product {product_id}",
                    details={"product_id": product_id, "variant_id": variant_id},
                )
            if variant.price is not None:
                base_price = variant.price

        return replace(
            product,
            base_price=base_price,
            variant_fee=variant_fee,
            delivery_types=tuple(self._merge_delivery(product, option) for option in product.delivery_types),
        )

    # ================================
    # 🧠 ВНУТРІШНЄ
    # ================================
    def _variant_fee(self, product: ProductSnapshot, selected: Mapping[str, str]) -> Decimal:
        fee = ZERO
        for axis, option_name in selected.items():
            variant_type = product.variant_type(axis)
            option = variant_type.option(option_name) if variant_type else None
            if option is None:
                raise NotFoundError(
                    f"Variant {axis}={option_name} not found for product {product.product_id}",
                    details={"product_id": product.product_id, "axis": axis, "option": option_name},
                )
            fee += option.additional_fee
        return fee

    def _merge_delivery(self, product: ProductSnapshot, option: DeliveryTypeOption) -> DeliveryTypeOption:
        if option.name in self._digital_types:
            # 🖨️ Друкований товар не може мати цифрову доставку
            allowed = product.product_type != "print"
            return replace(option, price=ZERO, custom_price=None, is_active=option.is_active and allowed)
        return option.merged_with(self._descriptors.get(option.name))

    def _resolve_custom_print(self, product_id: str) -> ProductSnapshot:
        request_id = custom_print_request_id(product_id)
        request = self._custom_prints.get(request_id)
        if request is None:
            raise NotFoundError(f"Custom print request {request_id} not found", details={"request_id": request_id})
        total = request.total_price
        if total is None:
            raise NotFoundError(
                f"Custom print request {request_id} has no price yet",
                details={"request_id": request_id, "status": request.status.value},
            )

        options = tuple(
            DeliveryTypeOption(name=offer.type, price=offer.price, custom_price=offer.custom_price)
            for offer in request.delivery_types
            if offer.type not in self._digital_types
        )
        logger.debug("🖨️ Custom print %s → %s %s, delivery=%s", request_id, total, request.currency, [o.name for o in options])
        return ProductSnapshot(
            product_id=product_id,
            name=self._template.name,
            creator_id=self._template.creator_id,
            base_price=total,
            currency=request.currency or self._template.currency,
            delivery_types=options,
            dimensions=request.dimensions,
            product_type=self._template.product_type,
            is_custom_print=True,
        )
