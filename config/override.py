"""
config/override.py

Local connection override: a small JSON file holding a database URL that
takes precedence over the environment. Written and removed through
PUT/DELETE /v1/config/connection.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

from config.settings import settings, normalize_db_url

logger = logging.getLogger(__name__)


def _path() -> Path:
    return Path(settings.LOCAL_OVERRIDE_PATH)


def load_override() -> Optional[str]:
    path = _path()
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable override file {path}: {e}")
        return None
    return normalize_db_url(data.get("database_url"))


def save_override(database_url: str) -> str:
    url = normalize_db_url(database_url)
    if not url:
        raise ValueError("database_url is empty")
    _path().write_text(json.dumps({"database_url": url}), encoding="utf-8")
    return url


def clear_override() -> bool:
    path = _path()
    if path.exists():
        path.unlink()
        return True
    return False


def resolve_database_url() -> Tuple[Optional[str], Optional[str]]:
    """
    Returns (url, source) where source is "override", "env" or None.
    """
    url = load_override()
    if url:
        return url, "override"
    if settings.DATABASE_URL:
        return settings.DATABASE_URL, "env"
    return None, None
