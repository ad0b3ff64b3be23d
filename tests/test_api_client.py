# tests/test_api_client.py
import threading

import pytest
import requests

from ims_reporting.errors import ApiError
from ims_reporting.repositories.api_client import ApiClient


def test_headers_and_query_cleanup(api, fake_session, http):
    fake_session.routes[("GET", "/expenses")] = http.ok([])
    api.get("/expenses", {"search": "", "category": None, "startDate": "2025-01-01"})
    call = fake_session.calls[-1]
    assert fake_session.headers["Authorization"] == "Bearer t0k"
    assert fake_session.headers["Content-Type"] == "application/json"
    assert call["url"] == "http://ims.test/api/expenses"
    assert call["params"] == {"startDate": "2025-01-01"}
    assert call["timeout"] == 5


def test_error_body_message_is_surfaced(api, fake_session, http):
    fake_session.routes[("GET", "/sales")] = http.Response(400, {"success": False, "message": "Invalid date range"})
    with pytest.raises(ApiError) as ei:
        api.get("/sales")
    assert ei.value.message == "Invalid date range"
    assert ei.value.status == 400


def test_error_without_body_uses_status(api, fake_session, http):
    fake_session.routes[("GET", "/sales")] = http.Response(502, raw="<html>")
    with pytest.raises(ApiError, match="An error occurred: 502"):
        api.get("/sales")


def test_success_false_body_is_an_error(api, fake_session, http):
    fake_session.routes[("GET", "/sales/packaging-report")] = http.Response(200, {"success": False, "message": "nope"})
    with pytest.raises(ApiError, match="nope"):
        api.get_data("/sales/packaging-report")


@pytest.mark.parametrize(
    "exc,msg",
    [
        (requests.Timeout(), "timed out"),
        (requests.ConnectionError(), "Could not connect"),
    ],
)
def test_transport_failures(api, fake_session, exc, msg):
    fake_session.routes[("GET", "/sales")] = exc
    with pytest.raises(ApiError, match=msg):
        api.get("/sales")


def test_fetch_all_walks_pages(api, fake_session, http):
    fake_session.routes[("GET", "/expenses")] = [
        http.ok([{"_id": 1}, {"_id": 2}], pagination={"page": 1, "limit": 2, "total": 5}),
        http.ok([{"_id": 3}, {"_id": 4}], pagination={"page": 2, "limit": 2, "total": 5}),
        http.ok([{"_id": 5}], pagination={"page": 3, "limit": 2, "total": 5}),
    ]
    rows = api.fetch_all("/expenses", {"category": "Rent"})
    assert [r["_id"] for r in rows] == [1, 2, 3, 4, 5]
    assert [c["params"]["page"] for c in fake_session.calls] == [1, 2, 3]
    assert all(c["params"]["category"] == "Rent" for c in fake_session.calls)


def test_unpaginated_collection_is_fetched_once(api, fake_session, http):
    fake_session.routes[("GET", "/sales")] = http.ok([{"_id": 1}, {"_id": 2}])
    assert len(api.fetch_all("/sales")) == 2
    assert len(fake_session.calls) == 1


def test_non_list_collection_is_rejected(api, fake_session, http):
    fake_session.routes[("GET", "/sales")] = http.ok({"oops": True})
    with pytest.raises(ApiError, match="Expected a list"):
        api.fetch_all("/sales")


def test_each_thread_gets_its_own_session(http):
    opened = []

    def factory():
        s = http.Session({("GET", "/sales"): http.ok([])})
        opened.append(s)
        return s

    api = ApiClient("http://ims.test/api", token="t0k", session_factory=factory)
    api.get("/sales")
    api.get("/sales")
    worker = threading.Thread(target=api.get, args=("/sales",))
    worker.start()
    worker.join()

    assert len(opened) == 2
    assert [len(s.calls) for s in opened] == [2, 1]
    assert all(s.headers["Authorization"] == "Bearer t0k" for s in opened)
