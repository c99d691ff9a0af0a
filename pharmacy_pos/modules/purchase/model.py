from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from ...utils.helpers import fmt_money, fmt_quantity
from ...utils.validators import non_empty, parse_quantity
from .quantity import unit_cost

class PurchasesTableModel(QAbstractTableModel):
    HEADERS = ["PO #", "Date", "Supplier", "Total", "Paid", "Status"]
    PAID_COLUMN = 4
    def __init__(self, rows: list[dict], statuses: dict | None = None):
        super().__init__()
        self._rows = rows
        self._statuses: dict[str, bool] = dict(statuses or {})
    def rowCount(self, parent=QModelIndex()): return len(self._rows)
    def columnCount(self, parent=QModelIndex()): return len(self.HEADERS)
    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid(): return None
        r = self._rows[index.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            c = index.column()
            paid = self._statuses.get(str(r["purchase_id"]), False)
            mapping = [
                r.get("order_number") or r["purchase_id"], r.get("date", ""),
                r.get("supplier_name", ""), fmt_money(r.get("total_amount", 0)),
                "Yes" if paid else "No", r.get("status", ""),
            ]
            return mapping[c]
        return None
    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)
    def at(self, row: int) -> dict:
        return self._rows[row]
    def order_ids(self) -> list[str]:
        return [str(r["purchase_id"]) for r in self._rows]
    def replace(self, rows: list[dict]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
    def set_payment_statuses(self, statuses: dict):
        """Merge fresh paid/unpaid values; repaints only the Paid column."""
        self._statuses.update({str(k): bool(v) for k, v in (statuses or {}).items()})
        if self._rows:
            top = self.index(0, self.PAID_COLUMN)
            bottom = self.index(len(self._rows) - 1, self.PAID_COLUMN)
            self.dataChanged.emit(top, bottom, [Qt.DisplayRole])

class PurchaseItemsModel(QAbstractTableModel):
    HEADERS = ["#", "Product", "Qty", "Total Cost", "Unit Cost"]
    def __init__(self, rows: list[dict]):
        super().__init__()
        self._rows = rows
    def rowCount(self, parent=QModelIndex()): return len(self._rows)
    def columnCount(self, parent=QModelIndex()): return len(self.HEADERS)
    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid(): return None
        r = self._rows[index.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            c = index.column()
            qty = parse_quantity(r.get("total_quantity"))
            mapping = [
                index.row() + 1, r.get("product_name", ""), self._qty_text(r),
                fmt_money(r.get("cost", 0)), fmt_money(unit_cost(r.get("cost", 0), qty)),
            ]
            return mapping[c]
        if role == Qt.TextAlignmentRole and index.column() >= 2:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None
    @staticmethod
    def _qty_text(r: dict) -> str:
        # "12 (3 × 4)" when the line was entered as packages x boxes
        total = fmt_quantity(r.get("total_quantity"))
        pkg, box = r.get("package_quantity"), r.get("box_quantity")
        if non_empty(pkg) and non_empty(box):
            return f"{total} ({fmt_quantity(pkg)} × {fmt_quantity(box)})"
        return total
    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)
    def replace(self, rows: list[dict]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
