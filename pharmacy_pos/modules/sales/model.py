from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from ...utils.helpers import fmt_money, fmt_quantity
from .profit import MatchedRow

PLACEHOLDER = "—"


class SaleItemsModel(QAbstractTableModel):
    """Sale detail lines joined with FIFO cost; unmatched lines show a dash for cost/profit/margin."""

    HEADERS = ["#", "Code", "Product", "Qty", "Unit Price", "Line Total", "Cost", "Profit", "Margin"]

    def __init__(self, rows: list[MatchedRow]):
        super().__init__()
        self._rows = rows

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, idx, role=Qt.DisplayRole):
        if not idx.isValid():
            return None
        r = self._rows[idx.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            m = [
                r.index + 1, r.code, r.name, fmt_quantity(r.quantity),
                fmt_money(r.price), fmt_money(r.subtotal),
                fmt_money(r.cost, sentinel=PLACEHOLDER),
                fmt_money(r.profit, sentinel=PLACEHOLDER),
                r.profit_margin if r.profit_margin is not None else PLACEHOLDER,
            ]
            return m[idx.column()]
        if role == Qt.TextAlignmentRole and idx.column() >= 3:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, s, o, role=Qt.DisplayRole):
        return self.HEADERS[s] if o == Qt.Horizontal and role == Qt.DisplayRole else super().headerData(s, o, role)

    def at(self, row: int) -> MatchedRow:
        return self._rows[row]

    def replace(self, rows: list[MatchedRow]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
