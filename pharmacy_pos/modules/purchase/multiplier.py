"""
purchase/multiplier.py

"Multiplier mode" on a purchase order: a percentage surcharge (or markdown)
applied to every line cost when the order is submitted.

The order total is shown as a whole currency amount, so after scaling each
line (to cents) the leftover between the whole-unit total and the line sum
is pushed onto the single most expensive line. The adjusted lines then add
up to the displayed total exactly.

Do not import Qt or repos here.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping

from ...utils.helpers import round_money, round_whole, to_decimal

__all__ = [
    "MultiplierResult",
    "multiplier_from_percent",
    "display_total",
    "apply_multiplier",
]


@dataclass(frozen=True)
class MultiplierResult:
    adjusted_items: List[Dict[str, Any]]
    rounded_total: Decimal
    multiplier: Decimal


def multiplier_from_percent(percent: Any) -> Decimal:
    """
    10 -> 1.1, -5 -> 0.95. Missing, zero or unparsable -> 1 (no change).
    """
    pct = to_decimal(percent)
    if pct == 0:
        return Decimal(1)
    return 1 + pct / 100


def _cost(item: Any, cost_key: str) -> Decimal:
    if isinstance(item, Mapping):
        return to_decimal(item.get(cost_key))
    return to_decimal(item)


def display_total(items: Iterable[Any], percent: Any, cost_key: str = "cost") -> Decimal:
    """Whole-unit total shown on the form before submit."""
    raw = sum((_cost(it, cost_key) for it in items), Decimal(0))
    return round_whole(raw * multiplier_from_percent(percent))


def apply_multiplier(
    items: Iterable[Any], multiplier_percent: Any, cost_key: str = "cost"
) -> MultiplierResult:
    """
    Scale every line cost by (1 + percent/100) and make the lines sum to the
    whole-unit rounded total.

    Items are mappings carrying `cost_key` (other keys are copied through)
    or bare numbers. An empty list gives an empty result.

    The remainder lands on the line with the largest adjusted cost (first
    one on ties). If that would push it below zero it is floored at 0 and
    the rest moves on to the next largest line.
    """
    source = list(items or ())
    multiplier = multiplier_from_percent(multiplier_percent)
    if not source:
        return MultiplierResult(adjusted_items=[], rounded_total=Decimal(0), multiplier=multiplier)

    raw_costs = [_cost(it, cost_key) for it in source]
    rounded_total = round_whole(sum(raw_costs, Decimal(0)) * multiplier)

    adjusted: List[Dict[str, Any]] = []
    for it, c in zip(source, raw_costs):
        row = dict(it) if isinstance(it, Mapping) else {}
        row[cost_key] = round_money(c * multiplier)
        adjusted.append(row)

    # measured against the rounded lines so the sum comes out exact
    diff = rounded_total - sum((r[cost_key] for r in adjusted), Decimal(0))
    if diff:
        order = sorted(range(len(adjusted)), key=lambda i: adjusted[i][cost_key], reverse=True)
        for i in order:
            current = adjusted[i][cost_key]
            if current + diff >= 0:
                adjusted[i][cost_key] = current + diff
                diff = Decimal(0)
                break
            if current > 0:
                adjusted[i][cost_key] = Decimal("0.00")
                diff += current
        if diff:
            # only when every line is already 0 (negative input costs)
            adjusted[order[0]][cost_key] += diff

    return MultiplierResult(adjusted_items=adjusted, rounded_total=rounded_total, multiplier=multiplier)
