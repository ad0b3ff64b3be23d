# ims_reporting/modules/reporting/model.py
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt
from PySide6.QtGui import QColor, QFont

from ...utils.helpers import fmt_money, format_number, format_percent
from ..payments import status as payment_status

# (header, row key, kind) where kind is one of: text, money, qty, pct, status
Column = Tuple[str, str, str]


class RowsTableModel(QAbstractTableModel):
    """
    Read-only table over a list of dict rows. Subclasses only declare COLUMNS.
    """

    COLUMNS: Sequence[Column] = ()

    def __init__(self, rows: Optional[List[dict]] = None, parent=None) -> None:
        super().__init__(parent)
        self._rows: List[dict] = rows or []

    @property
    def HEADERS(self) -> Tuple[str, ...]:
        return tuple(c[0] for c in self.COLUMNS)

    def set_rows(self, rows: List[dict]) -> None:
        self.beginResetModel()
        self._rows = list(rows or [])
        self.endResetModel()

    def rows(self) -> List[dict]:
        return list(self._rows)

    def rowCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self.COLUMNS)

    def headerData(self, section, orientation, role=Qt.DisplayRole):  # type: ignore[override]
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal:
            return self.COLUMNS[section][0]
        return str(section + 1)

    def data(self, index: QModelIndex, role=Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        _, key, kind = self.COLUMNS[index.column()]
        value = row.get(key)

        if role == Qt.DisplayRole:
            if kind == "money":
                return fmt_money(value)
            if kind == "qty":
                return format_number(value)
            if kind == "pct":
                return format_percent(value)
            return "" if value is None else str(value)
        if role == Qt.TextAlignmentRole:
            if kind in ("money", "qty", "pct"):
                return Qt.AlignRight | Qt.AlignVCenter
            return Qt.AlignLeft | Qt.AlignVCenter
        if role == Qt.ForegroundRole:
            if kind == "status":
                return QColor(payment_status.style_tokens(str(value or ""))["fg"])
            # negative money (over-refunds, overpayments) stands out
            if kind == "money" and isinstance(value, (int, float)) and value < 0:
                return QColor("#B91C1C")
        if role == Qt.ToolTipRole and kind == "status":
            return payment_status.description(str(value or "")) or None
        return None


# ------------------------------ Sales ---------------------------------------

class SalesListTableModel(RowsTableModel):
    COLUMNS = (
        ("Date", "date", "text"),
        ("Receipt", "receipt_number", "text"),
        ("Customer", "customer", "text"),
        ("Total", "total_amount", "money"),
        ("Paid", "amount_paid", "money"),
        ("Balance", "balance", "money"),
        ("Payment", "payment_status", "status"),
        ("Method", "payment_method", "text"),
    )


class PaymentMethodTableModel(RowsTableModel):
    COLUMNS = (
        ("Payment Method", "method", "text"),
        ("Sales", "count", "qty"),
        ("Total", "total_amount", "money"),
    )


class ProductPerformanceTableModel(RowsTableModel):
    COLUMNS = (
        ("Product", "name", "text"),
        ("SKU", "sku", "text"),
        ("Qty Sold", "total_quantity_sold", "qty"),
        ("Profit", "total_profit", "money"),
    )


class TopCustomersTableModel(RowsTableModel):
    COLUMNS = (
        ("Customer", "name", "text"),
        ("Sales", "sale_count", "qty"),
        ("Total Spent", "total_spent", "money"),
    )


# ------------------------------ Expenses ------------------------------------

class ExpenseSummaryTableModel(RowsTableModel):
    COLUMNS = (
        ("Category", "name", "text"),
        ("Total", "value", "money"),
        ("% of Period", "pct", "pct"),
    )

    def set_rows(self, rows: List[dict]) -> None:
        total = sum(float(r.get("value") or 0.0) for r in rows or [])
        out = []
        for r in rows or []:
            v = float(r.get("value") or 0.0)
            out.append({**r, "pct": (v / total * 100.0) if total else 0.0})
        super().set_rows(out)


class ExpenseListTableModel(RowsTableModel):
    COLUMNS = (
        ("Date", "date", "text"),
        ("Category", "category", "text"),
        ("Description", "description", "text"),
        ("Payee", "payee", "text"),
        ("Amount", "amount", "money"),
    )


# ------------------------------ Inventory -----------------------------------

class AdjustmentTypeTableModel(RowsTableModel):
    COLUMNS = (
        ("Type", "type", "text"),
        ("Records", "record_count", "qty"),
        ("Quantity", "total_quantity", "qty"),
        ("Cost Impact", "total_cost_impact", "money"),
    )


class InventoryMovementTableModel(RowsTableModel):
    COLUMNS = (
        ("Date", "date", "text"),
        ("Kind", "kind", "text"),
        ("Item", "item_name", "text"),
        ("Quantity", "quantity", "qty"),
        ("Value", "value", "money"),
        ("Reason", "reason", "text"),
    )


# ------------------------------ Circular economy ----------------------------

class DepositsChargedTableModel(RowsTableModel):
    COLUMNS = (
        ("Item", "item_name", "text"),
        ("SKU", "sku", "text"),
        ("Packaging", "packaging_type_snapshot", "text"),
        ("Qty Charged", "total_charged_quantity", "qty"),
        ("Deposit Charged", "total_charged_deposit", "money"),
    )


class DepositsRefundedTableModel(RowsTableModel):
    COLUMNS = (
        ("Item", "item_name", "text"),
        ("SKU", "sku", "text"),
        ("Qty Returned", "total_returned_quantity", "qty"),
        ("Deposit Refunded", "total_refunded_deposit", "money"),
    )


class OtherPackagingTableModel(RowsTableModel):
    COLUMNS = (
        ("Packaging Type", "type", "text"),
        ("Quantity", "total_quantity", "qty"),
        ("Share", "percent", "pct"),
    )


# ------------------------------ Financials ----------------------------------

class IncomeStatementTableModel(RowsTableModel):
    COLUMNS = (
        ("Line Item", "line_item", "text"),
        ("Amount", "amount", "money"),
    )

    def data(self, index: QModelIndex, role=Qt.DisplayRole):  # type: ignore[override]
        if index.isValid() and role == Qt.FontRole and self._rows[index.row()].get("bold"):
            f = QFont()
            f.setBold(True)
            return f
        return super().data(index, role)
