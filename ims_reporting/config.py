# ims_reporting/config.py
import logging
import os

from .constants import (
    DEFAULT_API_TIMEOUT,
    DEFAULT_API_URL,
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_PAGE_SIZE,
)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring %s=%r (not a number)", name, raw)
        return default


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, default))


API_URL = os.environ.get("IMS_API_URL", DEFAULT_API_URL).rstrip("/")
API_TOKEN = os.environ.get("IMS_API_TOKEN") or None
API_TIMEOUT = _env_float("IMS_API_TIMEOUT", DEFAULT_API_TIMEOUT)
PAGE_SIZE = max(1, _env_int("IMS_PAGE_SIZE", DEFAULT_PAGE_SIZE))
CURRENCY_SYMBOL = os.environ.get("IMS_CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL)
LOG_LEVEL = os.environ.get("IMS_LOG_LEVEL", "INFO").upper()
