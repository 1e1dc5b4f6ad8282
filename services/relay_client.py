from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from config.settings import get_settings
from services.errors import RelayError, UpstreamTimeout, UpstreamUnreachable


logger = logging.getLogger(__name__)

DEFAULT_FORWARD_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def proxy_request(
    original_url: str,
    method: str = "GET",
    data: Any = None,
    *,
    relay_url: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> Any:
    """Send a request through the relay and return the decoded upstream body.

    The relay endpoint comes from RELAY_URL unless given explicitly. A non-2xx
    answer from the relay raises RelayError carrying the relay's message.
    """
    settings = get_settings()
    target = relay_url or settings.relay_url
    http = session or requests.Session()
    payload = {
        "url": original_url,
        "method": method,
        "headers": dict(DEFAULT_FORWARD_HEADERS),
        "body": data,
    }
    logger.info(f"Relaying {method} {original_url} via {target}", extra={"step": "relay_client"})
    try:
        resp = http.post(
            target,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout if timeout is not None else settings.relay_timeout_seconds,
        )
    except requests.exceptions.Timeout as e:
        raise UpstreamTimeout(f"Relay did not answer: {e}") from e
    except requests.exceptions.RequestException as e:
        raise UpstreamUnreachable(f"Relay unreachable: {e}") from e

    if not resp.ok:
        raise RelayError(f"Relay request failed with status {resp.status_code}: {resp.text[:500]}")
    try:
        return resp.json()
    except ValueError as e:
        raise RelayError(f"Failed to parse relay response: {e}") from e
