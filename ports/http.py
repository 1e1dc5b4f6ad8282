from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol


class HttpResponsePort(Protocol):
    status_code: int
    headers: Mapping[str, str]
    content: bytes
    encoding: Optional[str]


class HttpSessionPort(Protocol):
    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        data: Any = None,
        timeout: Optional[float] = None,
    ) -> HttpResponsePort:
        ...
