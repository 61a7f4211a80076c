# errors.py
# Error taxonomy shared by the relay, dispatcher and status poller

from typing import Optional


class RelayError(Exception):
    """Base class for every failure surfaced to API callers.

    Each subclass carries the HTTP status the API answers with. Nothing is
    retried: the error is converted to the uniform failure shape and returned.
    """

    http_status = 500

    def __init__(self, message: str, http_status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if http_status is not None:
            self.http_status = http_status

    def to_dict(self) -> dict:
        return {"success": False, "status": "failed", "error": self.message}


class ConfigurationError(RelayError):
    """A required endpoint or credential is missing from the environment."""


class UpstreamHttpError(RelayError):
    """The external service answered with a non-2xx status."""

    def __init__(self, status: int, message: str, body_excerpt: str = "", http_status: Optional[int] = None):
        super().__init__(message, http_status=status if http_status is None else http_status)
        self.status = status
        self.body_excerpt = body_excerpt


class UnreachableWorkflowError(UpstreamHttpError):
    """The webhook answered with an HTML error page instead of the workflow."""


class TransportError(RelayError):
    """DNS failure, timeout, connection reset and the like."""

    http_status = 502


class MalformedResponseError(RelayError):
    http_status = 502


def failure(message: str) -> dict:
    return {"success": False, "status": "failed", "error": message}
