"""
sales/totals.py

Gross / discount / net for a set of sale (or purchase) lines.

Pure: no Qt, no DB. Every invalid number degrades to 0 so a half-typed form
never raises from here.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping

from ...utils.helpers import round_money, to_decimal

__all__ = ["SaleTotals", "sanitize_discount", "calculate_sale_totals"]


@dataclass(frozen=True)
class SaleTotals:
    gross_amount: Decimal
    discount_amount: Decimal
    net_amount: Decimal


def _subtotal_of(item: Any) -> Decimal:
    if isinstance(item, Mapping):
        raw = item.get("subtotal")
    else:
        raw = getattr(item, "subtotal", None)
    return to_decimal(raw)


def sanitize_discount(discount_input) -> Decimal:
    """Discount as entered -> usable value. Zero, negative or non-finite input means no discount."""
    d = to_decimal(discount_input)
    return d if d > 0 else Decimal(0)


def calculate_sale_totals(items: Iterable[Any], discount_input=0) -> SaleTotals:
    """
    gross    = round2(sum of subtotals)
    discount = round2(min(sanitized discount, gross))
    net      = round2(gross - discount)

    Items may be mappings or objects exposing `subtotal`.
    The discount is capped at gross, so net is never negative.
    """
    gross = round_money(sum((_subtotal_of(it) for it in (items or ())), Decimal(0)))
    # all three amounts are non-negative; a net-negative basket (returns only) shows as 0
    if gross < 0:
        gross = Decimal("0.00")
    discount = round_money(min(sanitize_discount(discount_input), gross))
    net = round_money(gross - discount)
    return SaleTotals(gross_amount=gross, discount_amount=discount, net_amount=net)
