from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RelayRequestSpec(BaseModel):
    """Request the relay should reissue upstream."""

    url: str
    method: str = "GET"
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if value is None:
            return "GET"
        if isinstance(value, str):
            return value.strip().upper() or "GET"
        return value

    @field_validator("headers", mode="before")
    @classmethod
    def _none_headers(cls, value: Any) -> Any:
        return {} if value is None else value


class RelayResponse(BaseModel):
    status: int
    body: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)
