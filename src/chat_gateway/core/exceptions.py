"""
Error types raised by the relay.

Every error maps to a plain-text HTTP response; the status code travels
with the exception so the API layer does not need to know which relay
step failed.
"""


class RelayError(Exception):
    """Base exception for relay errors."""

    status_code: int = 500

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(RelayError):
    """Raised when the client sent an unreadable or malformed request."""

    status_code = 400


class UpstreamUnavailableError(RelayError):
    """Raised when the pub/sub service could not be reached."""

    status_code = 500


class UpstreamStatusError(RelayError):
    """Raised when the pub/sub service answered with a non-success status."""

    def __init__(self, detail: str, status_code: int):
        super().__init__(detail, status_code=status_code)
