"""
HTTP surface for the CORS relay.

OPTIONS on any path answers the preflight locally; any other method on any path
takes a JSON description of an upstream request and relays it. Every response,
errors included, is JSON and carries the CORS headers.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

from flask import Flask, Response, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from models import RelayRequestSpec, RelayResponse
from services.relay_forwarder import RelayForwarder, error_envelope
from utils.logging_setup import init_logging


logger = logging.getLogger(__name__)

RELAY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]


def _to_flask(result: RelayResponse) -> Response:
    payload = "" if result.body is None else json.dumps(result.body, ensure_ascii=False)
    return Response(payload, status=result.status, headers=result.headers, mimetype="application/json")


def create_app(forwarder: Optional[RelayForwarder] = None) -> Flask:
    init_logging()
    app = Flask(__name__)
    app.config["RELAY_FORWARDER"] = forwarder or RelayForwarder()

    @app.route("/", defaults={"path": ""}, methods=["OPTIONS"], provide_automatic_options=False)
    @app.route("/<path:path>", methods=["OPTIONS"], provide_automatic_options=False)
    def _preflight(path: str) -> Response:
        return _to_flask(app.config["RELAY_FORWARDER"].preflight())

    @app.route("/", defaults={"path": ""}, methods=RELAY_METHODS, provide_automatic_options=False)
    @app.route("/<path:path>", methods=RELAY_METHODS, provide_automatic_options=False)
    def _relay(path: str) -> Response:
        payload = request.get_json(force=True, silent=True)
        if not isinstance(payload, dict):
            logger.error("Relay payload is not a JSON object", extra={"step": "relay", "status": "bad_request"})
            return _to_flask(error_envelope("Request body must be a JSON object"))
        try:
            req = RelayRequestSpec.model_validate(payload)
        except ValidationError as e:
            logger.error("Invalid relay payload", extra={"step": "relay", "status": "bad_request", "error": str(e)})
            return _to_flask(error_envelope(f"Invalid relay request: {e.errors(include_url=False)}"))
        return _to_flask(app.config["RELAY_FORWARDER"].forward(req))

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException) -> Response:
        # Methods outside RELAY_METHODS (TRACE, PROPFIND, ...) still get the envelope
        logger.error(f"Rejected {request.method} {request.path}: {e.code}", extra={"step": "relay", "status": "error"})
        return _to_flask(error_envelope(e.description or e.name))

    return app
