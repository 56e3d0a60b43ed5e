# meetpoint/core/errors.py
from typing import Any, Dict, Optional


class MeetingPointError(Exception):
    """
    Base class for every error the service maps to an HTTP response.

    `status_code` is the HTTP status used when the error reaches the API layer.
    """

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ConfigurationError(MeetingPointError):
    """A required setting (e.g. an API credential) is missing."""

    status_code = 503


class NotImplementedModeError(MeetingPointError):
    status_code = 501


class UpstreamServiceError(MeetingPointError):
    """
    An external service answered with a non-success status or could not be reached.

    `details` holds the (truncated) response body for diagnostics.
    """

    status_code = 502

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ) -> None:
        super().__init__(message, details)
        self.upstream_status = upstream_status


class MalformedResponseError(UpstreamServiceError):
    """The external service answered 2xx but the payload is unusable."""


class NoReachableCandidateError(MeetingPointError):
    status_code = 422


class MatrixShapeError(MeetingPointError):
    """Duration matrix dimensions disagree with origins/candidates (internal bug)."""

    status_code = 500
