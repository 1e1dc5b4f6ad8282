from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _as_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except (TypeError, ValueError):
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    log_level: str
    run_env: str

    # Relay
    relay_url: str
    relay_host: str
    relay_port: int
    relay_timeout_seconds: float

    # Scoring
    scoring_jitter: float

    # Upstream provider secrets, passed through untouched
    google_api_key: str | None = None
    google_cse_id: str | None = None
    openai_api_key: str | None = None

    # Logging/tracing
    relay_trace: bool = False
    relay_log_path: str = "logs/relay_calls.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    relay_host = os.getenv("RELAY_HOST", "127.0.0.1")
    relay_port = _as_number("RELAY_PORT", "8787", int)
    scoring_jitter = _as_number("SCORING_JITTER", "0.3", float)
    if not 0.0 <= scoring_jitter <= 0.3:
        raise RuntimeError(f"SCORING_JITTER must be between 0 and 0.3, got {scoring_jitter!r}")
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        run_env=os.getenv("RUN_ENV", "local"),
        relay_url=os.getenv("RELAY_URL", f"http://{relay_host}:{relay_port}/proxy"),
        relay_host=relay_host,
        relay_port=relay_port,
        relay_timeout_seconds=_as_number("RELAY_TIMEOUT_SECONDS", "45", float),
        scoring_jitter=scoring_jitter,
        google_api_key=os.getenv("GOOGLE_API_KEY"),
        google_cse_id=os.getenv("GOOGLE_CSE_ID"),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        relay_trace=_as_bool(os.getenv("RELAY_TRACE", "false")),
        relay_log_path=os.getenv("RELAY_LOG_PATH", "logs/relay_calls.jsonl"),
    )
