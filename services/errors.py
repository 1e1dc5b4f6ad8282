from __future__ import annotations


class InputValidationError(ValueError):
    """Malformed criteria or profile shape handed to the scorer."""


class RelayError(Exception):
    """Base class for failures while relaying a request upstream."""


class UpstreamUnreachable(RelayError):
    pass


class UpstreamTimeout(RelayError):
    pass


class ResponseDecodeFailure(RelayError):
    pass
