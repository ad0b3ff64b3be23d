# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - No network: ApiClient gets a FakeSession that replays canned bodies
# - Record builders go through from_payload so boundary coercion is exercised
# - Silence benign Qt signal warnings
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import re
from typing import Any, Dict, List, Optional, Tuple

import pytest
from PySide6 import QtCore

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from ims_reporting.repositories.api_client import ApiClient
from ims_reporting.repositories.expenses_repo import ExpenseRecord
from ims_reporting.repositories.internal_use_repo import InternalUseRecord
from ims_reporting.repositories.sales_repo import SaleLineItem, SaleRecord
from ims_reporting.repositories.stock_adjustments_repo import StockAdjustmentRecord


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):  # alias to match code that expects an `app` fixture
    return qapp


_BENIGN_QT_PATTERNS = [
    r"^QObject::connect: .* already connected",
    r"^QBasicTimer::stop: Failed\. Platform timer not running\.",
    r"^This plugin does not support propagateSizeHints",
]


@pytest.fixture(autouse=True, scope="session")
def _silence_benign_qt():
    """Filter common harmless Qt messages during tests."""
    rx = [re.compile(p) for p in _BENIGN_QT_PATTERNS]
    previous = None

    def handler(msg_type, context, message):
        text = str(message)
        if any(r.search(text) for r in rx):
            return
        if previous is not None:
            previous(msg_type, context, message)

    previous = QtCore.qInstallMessageHandler(handler)
    try:
        yield
    finally:
        QtCore.qInstallMessageHandler(previous)


# ---------- HTTP fakes ----------

class FakeResponse:
    def __init__(self, status: int = 200, body: Any = None, *, raw: Optional[str] = None):
        self.status_code = status
        self._body = body
        self._raw = raw

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._raw is not None:
            raise ValueError("not json")
        return self._body


class FakeSession:
    """
    Stand-in for requests.Session. Routes are keyed by (METHOD, path suffix);
    a route value is a FakeResponse, an exception to raise, a callable, or a
    list of those consumed in order.
    """

    def __init__(self, routes: Optional[Dict[Tuple[str, str], Any]] = None):
        self.headers: Dict[str, str] = {}
        self.routes: Dict[Tuple[str, str], Any] = dict(routes or {})
        self.calls: List[dict] = []

    def request(self, method, url, params=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params or {}, "json": json, "timeout": timeout})
        for (m, suffix), handler in self.routes.items():
            if m == method and url.endswith(suffix):
                if isinstance(handler, list):
                    handler = handler.pop(0) if len(handler) > 1 else handler[0]
                if isinstance(handler, Exception):
                    raise handler
                if callable(handler):
                    return handler(method, url, params or {}, json)
                return handler
        return FakeResponse(404, {"success": False, "message": f"No route for {method} {url}"})


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def api(fake_session):
    return ApiClient("http://ims.test/api", token="t0k", timeout=5, page_size=2, session=fake_session)


def ok(data: Any = None, **extra) -> FakeResponse:
    body = {"success": True, "data": data}
    body.update(extra)
    return FakeResponse(200, body)


# ---------- Record builders ----------

def make_line(**kw) -> SaleLineItem:
    payload = {
        "item": {"_id": kw.pop("item", "it-1"), "name": kw.pop("name", "Juice 1L"), "sku": kw.pop("sku", "JU-1")},
        "quantity": 1,
        "price": 1000,
        "costPriceSnapshot": 600,
    }
    payload.update(kw)
    return SaleLineItem.from_payload(payload)


def make_sale(items: Optional[List[SaleLineItem]] = None, **kw) -> SaleRecord:
    payload = {"_id": kw.pop("id", "s-1"), "createdAt": kw.pop("created_at", "2025-01-10T08:30:00.000Z")}
    payload.update(kw)
    sale = SaleRecord.from_payload(payload)
    if items is not None:
        sale.items = list(items)
    return sale


def make_expense(category: str, amount, date: str = "2025-01-10", **kw) -> ExpenseRecord:
    return ExpenseRecord.from_payload({"_id": kw.pop("id", "e"), "date": date, "category": category, "amount": amount, **kw})


def make_internal_use(quantity, unit_price, total=None, date: str = "2025-01-10") -> InternalUseRecord:
    payload = {"_id": "iu", "item": "it-1", "itemName": "Juice 1L", "quantity": quantity, "unitPrice": unit_price, "date": date, "reason": "Staff"}
    if total is not None:
        payload["totalValue"] = total
    return InternalUseRecord.from_payload(payload)


def make_adjustment(kind: str, quantity, unit_cost, total=None, date: str = "2025-01-10") -> StockAdjustmentRecord:
    payload = {"_id": "adj", "item": "it-1", "itemName": "Juice 1L", "type": kind, "quantity": quantity, "unitCost": unit_cost, "date": date, "reason": "Broken"}
    if total is not None:
        payload["totalCostImpact"] = total
    return StockAdjustmentRecord.from_payload(payload)


@pytest.fixture
def builders():
    class _B:
        line = staticmethod(make_line)
        sale = staticmethod(make_sale)
        expense = staticmethod(make_expense)
        internal_use = staticmethod(make_internal_use)
        adjustment = staticmethod(make_adjustment)
    return _B


@pytest.fixture
def http():
    class _H:
        Response = FakeResponse
        Session = FakeSession
        ok = staticmethod(ok)
    return _H
