# tests/test_profit_matcher.py

from __future__ import annotations

from decimal import Decimal

import pytest

from pharmacy_pos.modules.sales.profit import (
    IncompleteFifoReport,
    build_profit_report,
    find_fifo_record,
    match_profit,
    normalize_fifo_summary,
)


# ---------------------------
# Suite F: FIFO profit matching
# ---------------------------

def test_f1_unmatched_item_has_no_cost_profit_or_margin():
    """F1. A sale line with no FIFO record stays in the output, with None for the FIFO columns."""
    rows = match_profit(
        [{"product": "p-1", "price": 10, "quantity": 1, "subtotal": 10}],
        {"items": [{"product": "p-other", "totalCost": 3, "profitMargin": "70.00%"}]},
    )
    assert len(rows) == 1
    r = rows[0]
    assert (r.cost, r.profit, r.profit_margin) == (None, None, None)
    assert r.matched is False


def test_f2_profit_falls_back_to_line_amount_minus_cost():
    """F2. totalCost=100, line 50 x 3 (=150), no totalProfit -> profit 50."""
    rows = match_profit(
        [{"product": "p-1", "price": 50, "quantity": 3, "subtotal": 150}],
        {"items": [{"product": "p-1", "totalCost": 100, "profitMargin": "33.33%"}]},
    )
    assert rows[0].profit == Decimal(50)
    assert rows[0].cost == 100
    assert rows[0].profit_margin == "33.33%"


def test_f3_subtotal_used_when_price_missing():
    """F3. Without price/quantity the stored subtotal is the line amount."""
    rows = match_profit(
        [{"product": "p-1", "subtotal": 150}],
        {"items": [{"product": "p-1", "totalCost": 100}]},
    )
    assert rows[0].profit == Decimal(50)


def test_f4_reported_profit_wins_over_local_figure():
    """F4. The report's own totalProfit is passed through even if it differs from price*qty-cost."""
    rows = match_profit(
        [{"product": "p-1", "price": 50, "quantity": 3}],
        {"items": [{"product": "p-1", "totalCost": 100, "totalProfit": 48.5, "profitMargin": "32.33%"}]},
    )
    assert rows[0].profit == 48.5
    assert rows[0].local_profit == Decimal(50)


def test_f5_embedded_references_on_both_sides():
    """
    F5. Product references may be bare ids or embedded objects on either side:
    - sale side {"_id": ...}, FIFO side {"id": ...}
    - code/name are taken from the embedded sale product
    """
    sale_items = [
        {"product": {"_id": "p-9", "code": "AMX250", "name": "Amoxicillin"}, "price": 8, "quantity": 2},
    ]
    fifo = {"items": [{"product": {"id": "p-9"}, "fifoProfit": {"totalCost": 10, "profit": 6, "profitMargin": "37.50%"}}]}
    r = match_profit(sale_items, fifo)[0]
    assert r.product_id == "p-9"
    assert r.code == "AMX250"
    assert r.name == "Amoxicillin"
    assert r.cost == 10 and r.profit == 6 and r.profit_margin == "37.50%"


def test_f6_missing_report_leaves_everything_unmatched():
    """F6. No report (or a report without items) never raises."""
    rows = match_profit([{"product": "p-1", "price": 1, "quantity": 1}], None)
    assert rows[0].matched is False
    assert match_profit([], {"items": []}) == []


def test_f7_find_fifo_record_uses_product_id_key():
    """F7. Records may carry the reference under productId instead of product."""
    rec = {"productId": "p-5", "totalCost": 1}
    assert find_fifo_record("p-5", [{"product": "x"}, rec]) is rec
    assert find_fifo_record(None, [rec]) is None


def test_f8_summary_is_passed_through_not_summed():
    """F8. Order totals come from the report summary, not from the rows."""
    payload = {
        "summary": {"totalCost": 999, "grossProfit": 12.5, "totalProfitMargin": "1.23%"},
        "items": [{"product": "p-1", "totalCost": 1}],
    }
    report = build_profit_report({"items": [{"product": "p-1", "price": 2, "quantity": 1}]}, payload)
    assert report.summary.total_cost == 999
    assert report.summary.total_profit == 12.5
    assert report.summary.total_profit_margin == "1.23%"
    assert len(report.rows) == 1


def test_f9_summary_defaults():
    """F9. totalProfit is used when grossProfit is absent; margin defaults to 0.00%."""
    s = normalize_fifo_summary({"totalProfit": 7})
    assert s.total_profit == 7 and s.gross_profit == 7
    assert s.total_cost == 0
    assert s.total_profit_margin == "0.00%"


def test_f10_payload_without_summary_is_incomplete():
    """F10. A FIFO payload with no summary block is reported as incomplete."""
    with pytest.raises(IncompleteFifoReport, match="incomplete payload"):
        build_profit_report([{"product": "p-1"}], {"items": []})
