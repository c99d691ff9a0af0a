from PySide6.QtWidgets import (
    QDialog, QFormLayout, QDialogButtonBox, QVBoxLayout, QHBoxLayout, QComboBox, QLineEdit, QLabel,
    QPushButton,
)
from PySide6.QtCore import Qt, QObject, QEvent
from ...utils.helpers import fmt_money
from ...utils.product_ref import resolve_product_id
from ...utils.validators import try_parse_decimal
from .quantity import ActiveField, QuantityReconciler, unit_cost


class QuantityKeyFilter(QObject):
    """
    Installed on the three quantity inputs.
    - Enter/Return/Tab never reach the dialog (no accidental submit).
    - Focus in/out drives the reconciler's focus/blur events.
    """

    _SWALLOWED = (Qt.Key_Return, Qt.Key_Enter, Qt.Key_Tab)

    def __init__(self, form: "PurchaseItemQuantityForm"):
        super().__init__(form)
        self.form = form

    def eventFilter(self, obj, event):
        field = self.form.field_for(obj)
        if field is None:
            return False
        et = event.type()
        if et == QEvent.KeyPress and event.key() in self._SWALLOWED:
            return True
        if et == QEvent.FocusIn:
            self.form.field_focused(field)
        elif et == QEvent.FocusOut:
            self.form.field_blurred(field)
        return False


def _prefill(value) -> str:
    return "" if value is None else str(value)


class PurchaseItemQuantityForm(QDialog):
    def __init__(self, parent=None, products: list | None = None, initial=None):
        super().__init__(parent)
        self.setWindowTitle("Purchase Item")
        self.setModal(True)
        self.reconciler = QuantityReconciler()
        self._products = {}
        self.cmb_product = QComboBox()
        self.cmb_product.addItem("Select product…", None)
        for p in products or []:
            pid = resolve_product_id(p)
            if pid is None:
                continue
            self._products[pid] = p
            self.cmb_product.addItem(f"{p.get('name', '')} ({p.get('code') or pid})", pid)
        self.txt_total = QLineEdit(); self.txt_total.setPlaceholderText("Total quantity")
        self.txt_package = QLineEdit(); self.txt_package.setPlaceholderText("Packages")
        self.txt_box = QLineEdit(); self.txt_box.setPlaceholderText("Boxes per package")
        self.txt_cost = QLineEdit(); self.txt_cost.setPlaceholderText("Total cost")
        self.lab_unit_cost = QLabel(fmt_money(0))
        self._inputs = {
            ActiveField.TOTAL: self.txt_total,
            ActiveField.PACKAGE: self.txt_package,
            ActiveField.BOX: self.txt_box,
        }
        breakdown = QHBoxLayout()
        breakdown.addWidget(self.txt_package)
        breakdown.addWidget(QLabel("×"))
        breakdown.addWidget(self.txt_box)
        self.btn_clear_qty = QPushButton("Clear")
        self.btn_clear_qty.setAutoDefault(False)
        breakdown.addWidget(self.btn_clear_qty)
        lay = QVBoxLayout(self)
        form = QFormLayout()
        form.addRow("Product*", self.cmb_product)
        form.addRow("Quantity*", self.txt_total)
        form.addRow("Package × Box", breakdown)
        form.addRow("Cost*", self.txt_cost)
        form.addRow("Unit Cost", self.lab_unit_cost)
        lay.addLayout(form)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        lay.addWidget(self.buttons)
        self._payload = None

        self.key_filter = QuantityKeyFilter(self)
        for f, w in self._inputs.items():
            w.installEventFilter(self.key_filter)
            w.textEdited.connect(lambda text, f=f: self._on_edited(f, text))
        self.txt_cost.textEdited.connect(lambda _t: self._refresh_unit_cost())
        self.cmb_product.currentIndexChanged.connect(self._on_product_changed)
        self.btn_clear_qty.clicked.connect(self._on_clear_quantities)

        if initial:
            idx = self.cmb_product.findData(resolve_product_id(initial.get("product")))
            if idx >= 0:
                self.cmb_product.setCurrentIndex(idx)
            s = self.reconciler.state
            s.total_quantity = _prefill(initial.get("total_quantity"))
            s.package_quantity = _prefill(initial.get("package_quantity"))
            s.box_quantity = _prefill(initial.get("box_quantity"))
            self.txt_cost.setText(_prefill(initial.get("cost")))
        self._sync()

    # ---- reconciler wiring ----
    def field_for(self, widget):
        for f, w in self._inputs.items():
            if w is widget:
                return f
        return None

    def field_focused(self, field: ActiveField):
        self.reconciler.on_focus(field)
        self._sync()

    def field_blurred(self, field: ActiveField):
        self.reconciler.on_blur(field)
        self._sync()

    def _on_edited(self, field: ActiveField, text: str):
        self.reconciler.on_change(field, text)
        self._sync()

    def _on_product_changed(self, *_):
        pid = self.cmb_product.currentData()
        self.reconciler.select_product(self._products.get(pid) if pid else None)
        self._sync()

    def _on_clear_quantities(self):
        # re-enables both ways of entering quantity
        self.reconciler.clear_quantities()
        self._sync()

    def _sync(self):
        """Push reconciler state back into the inputs; enabled flags are re-derived every time."""
        s = self.reconciler.state
        values = {
            ActiveField.TOTAL: s.total_quantity,
            ActiveField.PACKAGE: s.package_quantity,
            ActiveField.BOX: s.box_quantity,
        }
        for f, w in self._inputs.items():
            if w.text() != values[f]:
                w.blockSignals(True)
                try:
                    w.setText(values[f])
                finally:
                    w.blockSignals(False)
        self.txt_total.setEnabled(not self.reconciler.total_disabled)
        self.txt_package.setEnabled(not self.reconciler.sub_fields_disabled)
        self.txt_box.setEnabled(not self.reconciler.sub_fields_disabled)
        self._refresh_unit_cost()

    def _refresh_unit_cost(self):
        ok, cost = try_parse_decimal(self.txt_cost.text())
        self.lab_unit_cost.setText(fmt_money(unit_cost(cost if ok else 0, self.reconciler.quantity)))

    # ---- result ----
    def get_payload(self) -> dict | None:
        s = self.reconciler.state
        if not s.product_id:
            return None
        qty = self.reconciler.quantity
        if not (qty > 0):
            return None
        ok, cost = try_parse_decimal(self.txt_cost.text())
        if not ok or cost < 0:
            return None
        return {
            "product": s.product_id,
            "total_quantity": qty,
            "package_quantity": s.package_quantity or None,
            "box_quantity": s.box_quantity or None,
            "cost": cost,
            "unit_cost": unit_cost(cost, qty),
        }

    def accept(self):
        p = self.get_payload()
        if p is None:
            return
        self._payload = p
        super().accept()

    def payload(self):
        return self._payload
