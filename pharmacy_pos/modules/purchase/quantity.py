"""
purchase/quantity.py

Quantity entry for one purchase-order line.

A line's quantity can be typed directly ("total") or as packages x boxes.
The two ways are mutually exclusive at any instant:

  Idle / EditingTotal       typing a total clears package and box
  EditingPackageOrBox       typing package or box touches only that box;
                            total is recomputed on blur, not per keystroke

Which inputs are disabled is derived on demand from the current values and
the active field; it is never stored.

Quantities stay strings so an empty box stays empty; they are parsed
("" or junk -> 0) only when a number is needed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from ...utils.helpers import fmt_quantity, round_money, to_decimal
from ...utils.product_ref import resolve_product_id
from ...utils.validators import non_empty, parse_quantity, try_parse_decimal

__all__ = [
    "ActiveField",
    "EditState",
    "LineItemEditState",
    "QuantityReconciler",
    "unit_cost",
]

_log = logging.getLogger(__name__)


class ActiveField(str, Enum):
    TOTAL = "total"
    PACKAGE = "package"
    BOX = "box"


class EditState(str, Enum):
    IDLE = "idle"
    EDITING_TOTAL = "editing_total"
    EDITING_PACKAGE_OR_BOX = "editing_package_or_box"


FieldLike = Union[ActiveField, str]

_SUB_FIELDS = (ActiveField.PACKAGE, ActiveField.BOX)


def _as_field(field: FieldLike) -> ActiveField:
    try:
        return field if isinstance(field, ActiveField) else ActiveField(str(field))
    except ValueError:
        raise ValueError("quantity field must be one of: total, package, box") from None


@dataclass
class LineItemEditState:
    product_id: Optional[str] = None
    total_quantity: str = ""
    package_quantity: str = ""
    box_quantity: str = ""
    active_field: Optional[ActiveField] = None


class QuantityReconciler:
    """
    State machine for one line. Events: on_focus, on_change, on_blur,
    select_product. Each returns nothing interesting; read the fields back
    from `state` (or the shortcut properties) after every event.
    """

    def __init__(self, state: Optional[LineItemEditState] = None) -> None:
        self.state = state or LineItemEditState()

    # ------------------------------ derived ------------------------------

    @property
    def edit_state(self) -> EditState:
        af = self.state.active_field
        if af is None:
            return EditState.IDLE
        if af is ActiveField.TOTAL:
            return EditState.EDITING_TOTAL
        return EditState.EDITING_PACKAGE_OR_BOX

    @property
    def total_disabled(self) -> bool:
        s = self.state
        has_breakdown = parse_quantity(s.package_quantity) > 0 or parse_quantity(s.box_quantity) > 0
        return has_breakdown and s.active_field is not ActiveField.TOTAL

    @property
    def sub_fields_disabled(self) -> bool:
        s = self.state
        has_total = non_empty(s.total_quantity) and parse_quantity(s.total_quantity) > 0
        return has_total and s.active_field not in _SUB_FIELDS

    def is_disabled(self, field: FieldLike) -> bool:
        f = _as_field(field)
        return self.total_disabled if f is ActiveField.TOTAL else self.sub_fields_disabled

    @property
    def quantity(self) -> Decimal:
        """Total quantity as a number (0 while not fully specified)."""
        return parse_quantity(self.state.total_quantity)

    # ------------------------------ events -------------------------------

    def on_focus(self, field: FieldLike) -> None:
        self.state.active_field = _as_field(field)

    def on_change(self, field: FieldLike, value: Any) -> bool:
        """
        Apply a keystroke-level change. Returns False (and changes nothing)
        while the other way of entering quantity is being edited.
        """
        f = _as_field(field)
        text = "" if value is None else str(value)
        af = self.state.active_field
        if af is not None and (af in _SUB_FIELDS) != (f in _SUB_FIELDS):
            _log.debug("Ignoring %s quantity edit while %s is active: %r", f.value, af.value, text)
            return False

        s = self.state
        if f is ActiveField.TOTAL:
            s.total_quantity = text
            if non_empty(text):
                s.package_quantity = ""
                s.box_quantity = ""
        elif f is ActiveField.PACKAGE:
            s.package_quantity = text
        else:
            s.box_quantity = text
        return True

    def on_blur(self, field: FieldLike) -> None:
        f = _as_field(field)
        s = self.state
        if f in _SUB_FIELDS and (non_empty(s.package_quantity) or non_empty(s.box_quantity)):
            self._recompute_total()
        if s.active_field is f:
            s.active_field = None

    def select_product(self, product: Any) -> None:
        """New product on the line: quantities start over."""
        self.state = LineItemEditState(product_id=resolve_product_id(product))

    def clear_quantities(self) -> None:
        """Empty all three quantity fields, keep the product."""
        self.state = LineItemEditState(product_id=self.state.product_id)

    # ------------------------------ internals ----------------------------

    def _recompute_total(self) -> None:
        s = self.state
        ok_p, pkg = try_parse_decimal(s.package_quantity) if non_empty(s.package_quantity) else (True, Decimal(0))
        ok_b, box = try_parse_decimal(s.box_quantity) if non_empty(s.box_quantity) else (True, Decimal(0))
        if not (ok_p and ok_b) or pkg < 0 or box < 0:
            s.total_quantity = ""
            return
        product = pkg * box
        # empty, not "0": the line is not fully specified yet
        s.total_quantity = fmt_quantity(product) if product != 0 else ""


def unit_cost(total_cost: Any, quantity: Any) -> Decimal:
    """Per-unit cost shown beside a PO line; 0.00 while quantity is 0."""
    qty = to_decimal(quantity)
    if qty == 0:
        return Decimal("0.00")
    return round_money(to_decimal(total_cost) / qty)
