"""
Sales module package exports (headless).

Qt table model: sales.model.SaleItemsModel
"""

from .line_items import PRICE_MODE, SUBTOTAL_MODE, SaleCart, SaleLineItem
from .profit import IncompleteFifoReport, MatchedRow, ProfitReport, build_profit_report, match_profit
from .totals import SaleTotals, calculate_sale_totals, sanitize_discount

__all__ = [
    "PRICE_MODE",
    "SUBTOTAL_MODE",
    "SaleCart",
    "SaleLineItem",
    "IncompleteFifoReport",
    "MatchedRow",
    "ProfitReport",
    "build_profit_report",
    "match_profit",
    "SaleTotals",
    "calculate_sale_totals",
    "sanitize_discount",
]
