from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from config.settings import Settings, get_settings


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass


def redact_url(url: Optional[str]) -> Optional[str]:
    """Drop query string and credentials; API keys often travel as query params."""
    if not url:
        return url
    try:
        u = urlparse(url)
    except ValueError:
        return None
    host = u.hostname or ""
    if u.port:
        host = f"{host}:{u.port}"
    return f"{u.scheme}://{host}{u.path}" if u.scheme else u.path


def log_call(
    *,
    caller: str,
    method: str,
    url: Optional[str],
    status: str = "ok",
    http_status: Optional[int] = None,
    duration_ms: Optional[int] = None,
    error: Optional[str] = None,
    extras: Optional[Dict[str, Any]] = None,
    settings: Optional[Settings] = None,
) -> None:
    """Append a single JSON line describing an upstream relay call if tracing is enabled.

    Controlled by RELAY_TRACE / RELAY_LOG_PATH in config/settings.py. Long-lived callers
    pass the settings they were built with so the environment is read once.
    """
    if settings is None:
        settings = get_settings()
    if not settings.relay_trace:
        return

    log_path = Path(settings.relay_log_path)
    _ensure_parent_dir(log_path)

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "caller": caller,
        "method": method,
        "url": redact_url(url),
        "status": status,
        "http_status": http_status,
        "duration_ms": duration_ms,
        "error": error,
    }
    run_id = os.getenv("RUN_ID")
    if run_id:
        payload["run_id"] = run_id

    if extras:
        payload["extras"] = extras

    try:
        with log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
    except OSError:
        # Never break a relay request on logging failures
        return
