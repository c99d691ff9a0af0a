"""
sales/profit.py

Join the lines of a saved sale against the FIFO cost-consumption report the
backend computes for it.

- Cost and margin are passed through from the report untouched; the margin
  is a pre-formatted string and is never recomputed here.
- Profit prefers the report's own figure (`profit`, then `totalProfit`) and
  only falls back to price * quantity - cost.
- A line with no report record stays in the output with cost/profit/margin
  set to None; the view shows a placeholder for those.
- Order-level totals come from the report's summary as-is, never from
  summing rows (the backend may include adjustments no row carries).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from ...utils.helpers import to_decimal
from ...utils.product_ref import as_product_ref, resolve_product_id
from ...utils.validators import try_parse_decimal

__all__ = [
    "IncompleteFifoReport",
    "MatchedRow",
    "FifoSummary",
    "ProfitReport",
    "fifo_record_product_id",
    "find_fifo_record",
    "match_profit",
    "normalize_fifo_summary",
    "build_profit_report",
]

_log = logging.getLogger(__name__)

DEFAULT_MARGIN = "0.00%"


class IncompleteFifoReport(ValueError):
    """The FIFO endpoint answered without a summary block."""


@dataclass(frozen=True)
class MatchedRow:
    index: int
    product_id: Optional[str]
    code: str
    name: str
    price: Decimal
    quantity: Decimal
    subtotal: Decimal
    cost: Any = None
    profit: Any = None
    profit_margin: Optional[str] = None
    local_profit: Optional[Decimal] = None

    @property
    def matched(self) -> bool:
        return self.cost is not None


@dataclass(frozen=True)
class FifoSummary:
    total_cost: Any
    total_profit: Any
    gross_profit: Any
    total_profit_margin: str


@dataclass(frozen=True)
class ProfitReport:
    rows: List[MatchedRow]
    summary: FifoSummary


# ------------------------------ helpers ------------------------------

def _get(obj: Any, key: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _first_present(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def fifo_record_product_id(record: Mapping[str, Any]) -> Optional[str]:
    """Product id of a FIFO record; the reference lives under `product` or `productId`."""
    ref = record.get("product")
    if ref is None:
        ref = record.get("productId")
    return resolve_product_id(ref)


def _fifo_numbers(record: Mapping[str, Any]) -> Mapping[str, Any]:
    # older payloads nest the numbers under fifoProfit
    nested = record.get("fifoProfit")
    return nested if isinstance(nested, Mapping) else record


def find_fifo_record(
    product_id: Optional[str], records: Iterable[Mapping[str, Any]]
) -> Optional[Mapping[str, Any]]:
    if product_id is None:
        return None
    for rec in records or ():
        if isinstance(rec, Mapping) and fifo_record_product_id(rec) == product_id:
            return rec
    return None


def _line_amount(item: Any) -> Decimal:
    price = _get(item, "price")
    qty = _get(item, "quantity")
    if price is not None and qty is not None:
        return to_decimal(price) * to_decimal(qty)
    return to_decimal(_get(item, "subtotal"))


def _product_code(raw_ref: Any) -> str:
    ref = as_product_ref(raw_ref)
    if ref is None:
        return ""
    if ref.kind == "id":
        return ref.id
    return ref.code or ""


# ------------------------------ matching ------------------------------

def match_profit(sale_items: Iterable[Any], fifo_summary: Optional[Mapping[str, Any]]) -> List[MatchedRow]:
    """
    One MatchedRow per sale item, in sale order.

    `sale_items` entries may be mappings or objects with product / price /
    quantity (and optionally name, code, subtotal). `fifo_summary` is the
    report payload ({"summary": ..., "items": [...]}); None or a payload
    without items leaves every row unmatched.
    """
    records = list((fifo_summary or {}).get("items") or [])
    rows: List[MatchedRow] = []
    for i, item in enumerate(sale_items or ()):
        raw_ref = _get(item, "product")
        if raw_ref is None:
            raw_ref = _get(item, "productId")
        pid = resolve_product_id(raw_ref)
        ref = as_product_ref(raw_ref)
        name = _first_present(
            ref.name if ref is not None and ref.kind == "ref" else None,
            _get(item, "name"),
        )
        amount = _line_amount(item)
        base = dict(
            index=i,
            product_id=pid,
            code=_first_present(_get(item, "code"), _product_code(raw_ref)) or "",
            name=name if name is not None else "N/A",
            price=to_decimal(_get(item, "price")),
            quantity=to_decimal(_get(item, "quantity")),
            subtotal=amount,
        )

        rec = find_fifo_record(pid, records)
        if rec is None:
            rows.append(MatchedRow(**base))
            continue

        nums = _fifo_numbers(rec)
        cost = nums.get("totalCost")
        local_profit = None
        ok, cost_dec = try_parse_decimal(cost)
        if ok:
            local_profit = amount - cost_dec
        profit = _first_present(nums.get("profit"), nums.get("totalProfit"), local_profit)

        if profit is not None and local_profit is not None and profit is not local_profit:
            if abs(to_decimal(profit) - local_profit) > Decimal("0.01"):
                _log.debug(
                    "FIFO profit for %s differs from local figure: %s vs %s",
                    pid, profit, local_profit,
                )

        rows.append(
            MatchedRow(
                **base,
                cost=cost,
                profit=profit,
                profit_margin=nums.get("profitMargin"),
                local_profit=local_profit,
            )
        )
    return rows


def normalize_fifo_summary(summary: Optional[Mapping[str, Any]]) -> Optional[FifoSummary]:
    if not isinstance(summary, Mapping):
        return None
    total_profit = _first_present(summary.get("grossProfit"), summary.get("totalProfit"), 0)
    return FifoSummary(
        total_cost=_first_present(summary.get("totalCost"), 0),
        total_profit=total_profit,
        gross_profit=_first_present(summary.get("grossProfit"), total_profit),
        total_profit_margin=_first_present(summary.get("totalProfitMargin"), DEFAULT_MARGIN),
    )


def build_profit_report(sale: Any, fifo_payload: Optional[Mapping[str, Any]]) -> ProfitReport:
    """
    Rows plus normalized summary for the sale detail view.

    `sale` is the sale document (mapping or object with `items`) or a plain
    list of items. Raises IncompleteFifoReport when the payload has no
    summary; the caller shows one warning and renders the bare sale.
    """
    summary = normalize_fifo_summary((fifo_payload or {}).get("summary"))
    if summary is None:
        raise IncompleteFifoReport("FIFO report returned an incomplete payload")
    items = sale if isinstance(sale, list) else (_get(sale, "items") or [])
    return ProfitReport(rows=match_profit(items, fifo_payload), summary=summary)

