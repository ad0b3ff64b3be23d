from __future__ import annotations

"""
Thin HTTP client for the IMS backend.

Every endpoint answers JSON. Collections come back as
``{"success": true, "data": [...], "pagination": {"page", "limit", "total"}}``,
summaries as ``{"success": true, "data": {...}}`` and failures as a non-2xx
status with ``{"message": "..."}``. All transport problems are raised as
`ApiError` carrying a human-readable message; nothing is retried.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Iterator, List, Optional

import requests

from .. import config
from ..errors import ApiError
from ..utils.validators import as_number

_log = logging.getLogger(__name__)


class ApiClient:
    """
    Wraps `requests.Session` with the backend's base URL, bearer token and
    default timeout.

    Report tabs load on pool threads, so each thread gets its own Session
    from `session_factory`. Passing `session` pins one Session for every
    thread.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        session: Optional[requests.Session] = None,
        session_factory: Optional[Callable[[], requests.Session]] = None,
    ) -> None:
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.timeout = config.API_TIMEOUT if timeout is None else timeout
        self.page_size = page_size or config.PAGE_SIZE
        self.headers: Dict[str, str] = {"Content-Type": "application/json"}
        tok = token if token is not None else config.API_TOKEN
        if tok:
            self.headers["Authorization"] = f"Bearer {tok}"
        self._factory = session_factory or requests.Session
        self._local = threading.local()
        self._pinned = session
        if session is not None:
            session.headers.update(self.headers)

    @property
    def session(self) -> requests.Session:
        """The Session for the calling thread."""
        if self._pinned is not None:
            return self._pinned
        s = getattr(self._local, "session", None)
        if s is None:
            s = self._factory()
            s.headers.update(self.headers)
            self._local.session = s
            _log.debug("opened HTTP session for thread %s", threading.current_thread().name)
        return s

    # ------------------------------------------------------------------
    # Core request
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        clean = {k: v for k, v in (params or {}).items() if v is not None and v != ""}
        started = time.monotonic()
        try:
            resp = self.session.request(
                method,
                self._url(path),
                params=clean or None,
                json=payload,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            _log.warning("%s %s timed out after %.1fs", method, path, self.timeout)
            raise ApiError("The request timed out. Please try again.") from e
        except requests.ConnectionError as e:
            _log.warning("%s %s connection failed: %s", method, path, e)
            raise ApiError("Network Error: Could not connect to the server.") from e
        except requests.RequestException as e:
            raise ApiError(str(e) or "An unexpected error occurred.") from e

        elapsed_ms = (time.monotonic() - started) * 1000.0
        body = self._decode(resp)

        if not resp.ok:
            message = body.get("message") or f"An error occurred: {resp.status_code}"
            _log.warning("%s %s -> %s (%.0fms): %s", method, path, resp.status_code, elapsed_ms, message)
            raise ApiError(message, status=resp.status_code)

        if body.get("success") is False:
            message = body.get("message") or "The server rejected the request."
            _log.warning("%s %s reported failure: %s", method, path, message)
            raise ApiError(message, status=resp.status_code)

        _log.debug("%s %s -> %s (%.0fms)", method, path, resp.status_code, elapsed_ms)
        return body

    @staticmethod
    def _decode(resp: requests.Response) -> Dict[str, Any]:
        try:
            body = resp.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"data": body}

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("GET", path, params=params)

    def post(self, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("POST", path, payload=payload or {})

    # ------------------------------------------------------------------
    # Response shapes
    # ------------------------------------------------------------------

    def get_data(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Return the `data` member of a summary response ({} when absent)."""
        data = self.get(path, params).get("data")
        return {} if data is None else data

    def iter_pages(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        limit: Optional[int] = None,
    ) -> Iterator[List[Dict[str, Any]]]:
        """
        Yield each page of a paginated collection, starting at page 1, until
        the reported total is reached or a short/empty page comes back.
        """
        size = limit or self.page_size
        page = 1
        seen = 0
        while True:
            body = self.get(path, {**(params or {}), "page": page, "limit": size})
            rows = body.get("data") or []
            if not isinstance(rows, list):
                raise ApiError(f"Expected a list from {path}, got {type(rows).__name__}.")
            yield rows
            seen += len(rows)

            pagination = body.get("pagination") or {}
            total = pagination.get("total")
            # unpaginated endpoints return everything on the first call
            if not pagination or not rows or len(rows) < size:
                break
            if total is not None and seen >= int(as_number(total)):
                break
            page += 1

    def fetch_all(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for rows in self.iter_pages(path, params, limit=limit):
            out.extend(rows)
        _log.debug("fetched %d rows from %s", len(out), path)
        return out
