from __future__ import annotations

from typing import Dict, Optional

from flask import current_app

from extensions import db
from models import AppSetting

# Spreadsheet links; each key doubles as the Config fallback name
SYNC_URL_KEYS = {
    "raw_students": "SHEET_URL_RAW_STUDENTS",
    "payments": "SHEET_URL_PAYMENTS",
    "finance": "SHEET_URL_FINANCE",
}
LAST_SYNC_KEY = "LAST_SYNC"
NEVER_SYNCED = "কখনো নয়"


def get_setting(key: str, default: Optional[str] = None) -> Optional[str]:
    row = AppSetting.query.filter_by(key=key).first()
    if row is not None and row.value is not None:
        return row.value
    return default


def set_setting(key: str, value: Optional[str], commit: bool = True) -> None:
    row = AppSetting.query.filter_by(key=key).first()
    if row is None:
        row = AppSetting(key=key, value=value)
        db.session.add(row)
    else:
        row.value = value
    if commit:
        db.session.commit()


def get_sync_urls() -> Dict[str, str]:
    """Saved sheet links, falling back to the values from Config."""
    urls = {}
    for name, key in SYNC_URL_KEYS.items():
        saved = get_setting(key)
        if saved is None:
            saved = current_app.config.get(key, "") or ""
        urls[name] = saved.strip()
    return urls


def set_sync_urls(urls: Dict[str, Optional[str]]) -> Dict[str, str]:
    for name, key in SYNC_URL_KEYS.items():
        if name in urls:
            set_setting(key, (urls[name] or "").strip(), commit=False)
    db.session.commit()
    return get_sync_urls()


def get_last_sync() -> str:
    return get_setting(LAST_SYNC_KEY, NEVER_SYNCED) or NEVER_SYNCED
