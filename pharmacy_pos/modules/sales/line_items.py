"""
sales/line_items.py

In-memory state of the sale being rung up: the ordered lines, each line's
input mode, and the order-level discount.

Two ways to edit a line's money:
  - 'price' mode:    user types the unit price, subtotal = price * quantity
  - 'subtotal' mode: user types the line subtotal, price = subtotal / quantity
                     (0 when quantity is 0)

Out-of-range edits (negative price, quantity < 1, unparsable text) are
ignored and reported with a False return, never raised.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from ...utils.helpers import to_decimal
from ...utils.product_ref import resolve_product_id
from ...utils.validators import try_parse_decimal
from .totals import SaleTotals, calculate_sale_totals, sanitize_discount

__all__ = ["PRICE_MODE", "SUBTOTAL_MODE", "SaleLineItem", "SaleCart"]

_log = logging.getLogger(__name__)

PRICE_MODE = "price"
SUBTOTAL_MODE = "subtotal"


@dataclass
class SaleLineItem:
    product_id: str
    name: str = ""
    code: str = ""
    price: Decimal = Decimal(0)
    quantity: Decimal = Decimal(1)
    subtotal: Decimal = Decimal(0)
    input_mode: str = PRICE_MODE
    package_name: Optional[str] = None

    def reprice(self) -> None:
        self.subtotal = self.price * self.quantity


@dataclass
class SaleCart:
    items: List[SaleLineItem] = field(default_factory=list)
    discount: Decimal = Decimal(0)
    customer: Optional[str] = None
    notes: str = ""

    # ------------------------------ lookups ------------------------------

    def _line(self, index: int) -> SaleLineItem:
        if index < 0 or index >= len(self.items):
            raise IndexError(f"No sale line at position {index}.")
        return self.items[index]

    def find(self, product_id: Optional[str], code: Optional[str] = None) -> int:
        """Index of the line for this product (and code, when given), or -1."""
        for i, it in enumerate(self.items):
            if it.product_id != product_id:
                continue
            if code is not None and (it.code or "") != (code or ""):
                continue
            return i
        return -1

    # ------------------------------ adding -------------------------------

    def add_product(self, product: Mapping[str, Any]) -> SaleLineItem:
        """
        Scan/select a product. Same product + code bumps quantity by one,
        anything else becomes a new line priced at sellingPrice (or price).
        """
        pid = resolve_product_id(product)
        if pid is None:
            raise ValueError("Product has no id.")
        code = str(product.get("code") or "")
        idx = self.find(pid, code)
        if idx >= 0:
            line = self.items[idx]
            line.quantity += 1
            line.reprice()
            _log.debug("Bumped %s to qty %s", line.name, line.quantity)
            return line

        raw_price = product.get("sellingPrice")
        if raw_price is None:
            raw_price = product.get("price")
        price = to_decimal(raw_price)
        line = SaleLineItem(
            product_id=pid,
            name=str(product.get("name") or ""),
            code=code,
            price=price,
            quantity=Decimal(1),
            subtotal=price,
        )
        self.items.append(line)
        return line

    def add_package(self, package: Mapping[str, Any]) -> List[SaleLineItem]:
        """
        Expand a product package into lines.

        Items already in the cart (same product id and name) get the package
        quantity added. New items take their price mode from the package
        definition: 'unit' -> price mode, anything else -> subtotal mode.
        A package with no item breakdown is sold as one line at totalPrice.
        """
        contents = package.get("items") or []
        touched: List[SaleLineItem] = []
        if not contents:
            pid = resolve_product_id(package) or ""
            code = str(package.get("code") or "")
            idx = self.find(pid, code)
            if idx >= 0:
                line = self.items[idx]
                line.quantity += 1
                line.reprice()
            else:
                price = to_decimal(package.get("totalPrice"))
                line = SaleLineItem(
                    product_id=pid,
                    name=f"[Package] {package.get('name') or ''}",
                    code=code,
                    price=price,
                    quantity=Decimal(1),
                    subtotal=price,
                )
                self.items.append(line)
            return [line]

        for detail in contents:
            pid = resolve_product_id(detail.get("productId")) or ""
            name = str(detail.get("productName") or "")
            qty = to_decimal(detail.get("quantity"))
            existing = next(
                (it for it in self.items if it.product_id == pid and it.name == name),
                None,
            )
            if existing is not None:
                existing.quantity += qty
                existing.reprice()
                touched.append(existing)
                continue

            subtotal = to_decimal(detail.get("subtotal"))
            unit_price = to_decimal(detail.get("unitPrice"))
            if not unit_price:
                unit_price = subtotal / qty if qty else Decimal(0)
            line = SaleLineItem(
                product_id=pid,
                name=name,
                code=str(detail.get("productCode") or package.get("code") or ""),
                price=unit_price,
                quantity=qty,
                subtotal=subtotal,
                input_mode=PRICE_MODE if detail.get("priceMode") == "unit" else SUBTOTAL_MODE,
                package_name=package.get("name"),
            )
            self.items.append(line)
            touched.append(line)
        return touched

    # ------------------------------ editing ------------------------------

    def set_quantity(self, index: int, value) -> bool:
        line = self._line(index)
        ok, qty = try_parse_decimal(value)
        if not ok or qty != qty.to_integral_value() or qty < 1:
            return False
        line.quantity = qty
        line.reprice()
        return True

    def set_price(self, index: int, value) -> bool:
        line = self._line(index)
        ok, price = try_parse_decimal(value)
        if not ok or price < 0:
            return False
        line.price = price
        line.reprice()
        return True

    def set_subtotal(self, index: int, value) -> bool:
        line = self._line(index)
        ok, subtotal = try_parse_decimal(value)
        if not ok or subtotal < 0:
            return False
        line.subtotal = subtotal
        line.price = subtotal / line.quantity if line.quantity > 0 else Decimal(0)
        return True

    def edit_amount(self, index: int, value) -> bool:
        """The single money box on a line: meaning depends on the line's mode."""
        if self._line(index).input_mode == SUBTOTAL_MODE:
            return self.set_subtotal(index, value)
        return self.set_price(index, value)

    def toggle_input_mode(self, index: int) -> str:
        line = self._line(index)
        line.input_mode = SUBTOTAL_MODE if line.input_mode == PRICE_MODE else PRICE_MODE
        return line.input_mode

    def remove_item(self, index: int) -> SaleLineItem:
        self._line(index)
        return self.items.pop(index)

    def set_discount(self, value) -> Decimal:
        self.discount = sanitize_discount(value)
        return self.discount

    def clear(self) -> None:
        self.items.clear()
        self.discount = Decimal(0)
        self.customer = None
        self.notes = ""

    # ------------------------------ output -------------------------------

    def totals(self) -> SaleTotals:
        return calculate_sale_totals(self.items, self.discount)

    def to_payload(self, sale_number: str) -> Dict[str, Any]:
        """Create-sale request body. Optional keys are left out when empty."""
        t = self.totals()
        payload: Dict[str, Any] = {
            "saleNumber": sale_number,
            "items": [
                {
                    "product": it.product_id,
                    "quantity": it.quantity,
                    "price": it.price,
                    "subtotal": it.subtotal,
                }
                for it in self.items
            ],
            "totalAmount": t.gross_amount,
        }
        if self.discount > 0:
            payload["discount"] = self.discount
        if t.discount_amount > 0:
            payload["discountAmount"] = t.discount_amount
        if self.notes:
            payload["notes"] = self.notes
        if self.customer:
            payload["customer"] = self.customer
        return payload
