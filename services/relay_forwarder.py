from __future__ import annotations

import codecs
import json
import logging
import re
import time
from typing import Any, Dict, Mapping, Optional

import requests

from config.settings import get_settings
from models import RelayRequestSpec, RelayResponse
from ports import HttpSessionPort
from services.errors import RelayError, ResponseDecodeFailure, UpstreamTimeout, UpstreamUnreachable
from utils.relay_logger import log_call, redact_url


logger = logging.getLogger(__name__)

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Max-Age": "86400",
}

JSON_HEADERS: Dict[str, str] = {**CORS_HEADERS, "Content-Type": "application/json"}

_CORS_KEYS = {k.lower() for k in CORS_HEADERS}
_CHARSET_RE = re.compile(r"charset=[\"']?([\w.:-]+)", re.IGNORECASE)
_UNDECODED = object()


def _has_body(body: Any) -> bool:
    # "", 0 and false mean "no body"; empty objects and arrays are still sent
    if body is None or isinstance(body, (str, int, float)):
        return bool(body)
    return True


def strip_cors_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Drop request headers that collide with the CORS headers the relay sets itself."""
    return {k: v for k, v in (headers or {}).items() if k.lower() not in _CORS_KEYS}


def _charset_of(content_type: Optional[str]) -> str:
    m = _CHARSET_RE.search(content_type or "")
    if m:
        try:
            return codecs.lookup(m.group(1)).name
        except LookupError:
            pass
    return "utf-8"


def _declares_json(content_type: Optional[str]) -> bool:
    ct = (content_type or "").lower()
    return "application/json" in ct or "+json" in ct


def _text_of(content: bytes, charset: str) -> str:
    try:
        return content.decode(charset)
    except UnicodeDecodeError as e:
        raise ResponseDecodeFailure(f"body is not valid {charset}: {e}") from e


def _json_or_undecoded(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return _UNDECODED


def decode_body(content: bytes, content_type: Optional[str] = None) -> Any:
    """Decode an upstream body: declared JSON, then speculative JSON, then a text wrapper.

    Content types are often misreported upstream, so a body that parses as JSON is
    returned as JSON whatever the header says.
    """
    charset = _charset_of(content_type)
    try:
        text = _text_of(content or b"", charset)
    except ResponseDecodeFailure as e:
        logger.warning(f"Undecodable upstream body, replacing bad bytes: {e}")
        text = (content or b"").decode(charset, errors="replace")

    data = _json_or_undecoded(text)
    if data is not _UNDECODED:
        return data
    if _declares_json(content_type):
        logger.warning("Upstream declared JSON but body did not parse; wrapping as text")
    return {"text": text}


def error_envelope(message: str) -> RelayResponse:
    return RelayResponse(
        status=500,
        body={"error": "Proxy server error", "message": message},
        headers=dict(JSON_HEADERS),
    )


class RelayForwarder:
    """Reissue a described HTTP request upstream and normalize what comes back.

    Single attempt, no retries. `send` raises RelayError subclasses; `forward`
    always returns a RelayResponse, turning failures into a 500 envelope.
    """

    def __init__(self, session: Optional[HttpSessionPort] = None, timeout: Optional[float] = None) -> None:
        self.settings = get_settings()
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else self.settings.relay_timeout_seconds

    def preflight(self) -> RelayResponse:
        return RelayResponse(status=200, body=None, headers=dict(CORS_HEADERS))

    def send(self, req: RelayRequestSpec) -> RelayResponse:
        if req.method == "OPTIONS":
            logger.debug("Preflight request answered locally", extra={"step": "relay", "status": "preflight"})
            return self.preflight()

        headers = strip_cors_headers(req.headers)
        data = json.dumps(req.body) if _has_body(req.body) else None

        t0 = time.time()
        try:
            resp = self.session.request(req.method, req.url, headers=headers, data=data, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            self._trace(req, t0, status="timeout", error=str(e))
            raise UpstreamTimeout(f"Upstream did not answer within {self.timeout}s: {e}") from e
        except requests.exceptions.RequestException as e:
            self._trace(req, t0, status="unreachable", error=str(e))
            raise UpstreamUnreachable(f"Upstream unreachable: {e}") from e

        body = decode_body(resp.content, resp.headers.get("Content-Type"))
        self._trace(req, t0, status="ok", http_status=resp.status_code)
        logger.info(
            f"Relayed {req.method} -> {resp.status_code}",
            extra={"step": "relay", "status": "ok", "upstream": redact_url(req.url),
                   "duration_ms": int((time.time() - t0) * 1000)},
        )
        return RelayResponse(status=resp.status_code, body=body, headers=dict(JSON_HEADERS))

    def forward(self, req: RelayRequestSpec) -> RelayResponse:
        try:
            return self.send(req)
        except RelayError as e:
            logger.error(
                "Relay failed",
                extra={"step": "relay", "status": "error", "upstream": redact_url(req.url), "error": str(e)},
            )
            return error_envelope(str(e))
        except Exception as e:
            logger.exception(
                "Unexpected relay failure",
                extra={"step": "relay", "status": "error", "upstream": redact_url(req.url), "error": str(e)},
            )
            return error_envelope(str(e))

    def _trace(self, req: RelayRequestSpec, t0: float, *, status: str,
               http_status: Optional[int] = None, error: Optional[str] = None) -> None:
        log_call(
            caller="relay_forwarder.send",
            method=req.method,
            url=req.url,
            status=status,
            http_status=http_status,
            duration_ms=int((time.time() - t0) * 1000),
            error=error,
            settings=self.settings,
        )
