# 🖨️ storefront/domain/custom_print/__init__.py
"""🖨️ Домен кастомного друку: статуси, сутності, автомат переходів."""

from .entities import (
    CustomPrintRequest,
    DeliveryOffer,
    ModelFile,
    PrintConfiguration,
    StatusHistoryEntry,
)
from .interfaces import ICustomPrintRepository
from .services import PrintStateMachine, blocking_request_ids, is_checkout_eligible
from .status import BLOCKING_STATUSES, PROGRESSION, PrintStatus

__all__ = [
    "BLOCKING_STATUSES",
    "PROGRESSION",
    "CustomPrintRequest",
    "DeliveryOffer",
    "ICustomPrintRepository",
    "ModelFile",
    "PrintConfiguration",
    "PrintStateMachine",
    "PrintStatus",
    "StatusHistoryEntry",
    "blocking_request_ids",
    "is_checkout_eligible",
]
