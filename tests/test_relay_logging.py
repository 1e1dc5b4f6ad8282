from __future__ import annotations

import json
import logging

from models import RelayRequestSpec
from services.relay_forwarder import RelayForwarder
from utils.logging_setup import SafeExtraFormatter
from utils.relay_logger import log_call, redact_url


class _Resp:
    status_code = 200
    content = b'{"ok": 1}'
    headers = {"Content-Type": "application/json"}
    encoding = None


class _Session:
    def request(self, method, url, **kwargs):
        return _Resp()


def test_relay_trace_writes_jsonl(tmp_path, monkeypatch):
    log_file = tmp_path / "relay_calls.jsonl"
    monkeypatch.setenv("RELAY_TRACE", "true")
    monkeypatch.setenv("RELAY_LOG_PATH", str(log_file))
    monkeypatch.setenv("RUN_ID", "test-run-123")

    req = RelayRequestSpec(url="https://www.googleapis.com/customsearch/v1?key=SECRET&q=python", method="GET")
    RelayForwarder(session=_Session()).forward(req)

    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 1
    rec = json.loads(lines[-1])
    assert rec["caller"] == "relay_forwarder.send"
    assert rec["method"] == "GET"
    assert rec["status"] == "ok"
    assert rec["http_status"] == 200
    assert rec["run_id"] == "test-run-123"
    assert rec["url"] == "https://www.googleapis.com/customsearch/v1"
    assert "SECRET" not in lines[0]


def test_forwarder_reads_trace_settings_once(tmp_path, monkeypatch):
    log_file = tmp_path / "relay_calls.jsonl"
    monkeypatch.setenv("RELAY_TRACE", "true")
    monkeypatch.setenv("RELAY_LOG_PATH", str(log_file))
    forwarder = RelayForwarder(session=_Session())

    monkeypatch.setenv("RELAY_TRACE", "false")
    forwarder.forward(RelayRequestSpec(url="https://example.com/a"))
    forwarder.forward(RelayRequestSpec(url="https://example.com/b"))

    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    assert [json.loads(line)["url"] for line in lines] == ["https://example.com/a", "https://example.com/b"]


def test_trace_disabled_writes_nothing(tmp_path, monkeypatch):
    log_file = tmp_path / "relay_calls.jsonl"
    monkeypatch.setenv("RELAY_TRACE", "false")
    monkeypatch.setenv("RELAY_LOG_PATH", str(log_file))
    log_call(caller="unit.test", method="GET", url="https://example.com")
    assert not log_file.exists()


def test_redact_url_drops_credentials_and_query():
    assert redact_url("https://user:pw@api.example.com:8443/v1/x?token=abc") == "https://api.example.com:8443/v1/x"
    assert redact_url(None) is None


def test_formatter_fills_missing_extras():
    formatter = SafeExtraFormatter(fmt="%(message)s step=%(step)s upstream=%(upstream)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    assert formatter.format(record) == "hello step=- upstream=-"
