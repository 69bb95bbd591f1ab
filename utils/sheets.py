from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

import requests
from flask import current_app
from requests.exceptions import RequestException

from utils import AccountsError

logger = logging.getLogger(__name__)


class SheetSyncError(AccountsError):
    status_code = 502


def _timeout(timeout: Optional[float]) -> float:
    if timeout is not None:
        return timeout
    try:
        return float(current_app.config.get("SHEET_TIMEOUT_SECONDS", 20))
    except RuntimeError:
        # Outside an app context
        return 20.0


def _get_json(url: str, action: str, timeout: Optional[float]) -> Dict[str, Any]:
    if not url:
        raise SheetSyncError("Sheet link is not configured")
    try:
        r = requests.get(url, params={"action": action}, timeout=_timeout(timeout))
    except RequestException as e:
        raise SheetSyncError(f"Network error contacting sheet: {type(e).__name__}: {e}")
    if r.status_code != 200:
        raise SheetSyncError(f"Sheet responded with {r.status_code}")
    try:
        data = r.json()
    except ValueError:
        raise SheetSyncError("Sheet returned a non-JSON response")
    if not isinstance(data, dict):
        raise SheetSyncError("Sheet returned an unexpected payload")
    return data


def fetch_base_data(url: str, timeout: Optional[float] = None) -> Dict[str, Any]:
    """Pull students, class configs, exam fees and teachers from the roster sheet."""
    data = _get_json(url, "getBaseData", timeout)
    logger.info(
        "Fetched base data: %s",
        {k: len(v) for k, v in data.items() if isinstance(v, list)},
    )
    return data


def validate_link(url: str, timeout: Optional[float] = None) -> Tuple[bool, str]:
    if not url:
        return False, "লিংক খালি রাখা যাবে না।"
    try:
        data = _get_json(url, "validate", timeout)
    except SheetSyncError as e:
        logger.warning("Sheet link validation failed for %s: %s", url, e)
        return False, "নেটওয়ার্ক এরর!"
    if data.get("status") == "OK":
        return True, f'সাফল্য! "{data.get("foundTab", "")}" ট্যাবটি পাওয়া গেছে।'
    return False, str(data.get("error") or "ট্যাব পাওয়া যায়নি।")


def push_record(url: str, record: Mapping[str, Any], timeout: Optional[float] = None) -> bool:
    """Append one payment / finance row to its sheet.

    The local save has already happened, so failures are logged and reported
    as ``False`` rather than raised.
    """
    if not url:
        return False
    try:
        r = requests.post(url, json=dict(record), timeout=_timeout(timeout))
    except RequestException as e:
        logger.error("Sheet sync failed for %s: %s", record.get("id"), e)
        return False
    if r.status_code >= 400:
        logger.error("Sheet sync for %s rejected with %s", record.get("id"), r.status_code)
        return False
    return True
