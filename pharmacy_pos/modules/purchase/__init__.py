"""
Purchase module package exports.

Headless pieces only (no Qt import on package load):
- QuantityReconciler / LineItemEditState
- apply_multiplier / display_total
- PaymentStatusCache / PaymentStatusClient

Qt pieces live in their own modules:
- model.PurchasesTableModel, model.PurchaseItemsModel
- item_form.PurchaseItemQuantityForm
- service.PaymentStatusRefreshJob
"""

from .api_client import PaymentStatusClient, PaymentStatusUnavailable
from .multiplier import MultiplierResult, apply_multiplier, display_total
from .payment_status import PaymentStatusCache
from .quantity import ActiveField, EditState, LineItemEditState, QuantityReconciler, unit_cost

__all__ = [
    "ActiveField",
    "EditState",
    "LineItemEditState",
    "QuantityReconciler",
    "unit_cost",
    "MultiplierResult",
    "apply_multiplier",
    "display_total",
    "PaymentStatusCache",
    "PaymentStatusClient",
    "PaymentStatusUnavailable",
]
