"""
Upstream error taxonomy and translation.

Every failure talking to the Mistral APIs is decided here, once, and
raised as an UpstreamError subclass. Callers branch on the class (or
`kind`) instead of re-inspecting HTTP status codes.
"""

import json
from enum import Enum
from typing import Any, Optional

import httpx


class ErrorKind(str, Enum):
    AUTHENTICATION_FAILED = "authentication_failed"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_SERVER_ERROR = "upstream_server_error"
    UPSTREAM_OTHER_ERROR = "upstream_other_error"
    TRANSPORT_FAILURE = "transport_failure"
    INVALID_RESPONSE_SHAPE = "invalid_response_shape"
    EMPTY_CHOICES = "empty_choices"
    CREDENTIAL_CONFIG = "credential_config"


class UpstreamError(Exception):
    """
    Base class for all failures talking to the upstream APIs.

    Attributes:
        message: User-facing description (safe for logs and MCP clients)
        kind: Machine-readable error kind
        status: Upstream HTTP status when a response was received
        retryable: Whether retrying later could succeed
    """

    kind: ErrorKind = ErrorKind.UPSTREAM_OTHER_ERROR
    retryable: bool = False

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "status": self.status,
            "retryable": self.retryable,
        }


class AuthenticationFailed(UpstreamError):
    kind = ErrorKind.AUTHENTICATION_FAILED

    def __init__(
        self,
        message: str = "Authentication failed. Please check your API key.",
        status: Optional[int] = 401,
    ):
        super().__init__(message, status)


class RateLimited(UpstreamError):
    kind = ErrorKind.RATE_LIMITED
    retryable = True

    def __init__(
        self,
        message: str = "Rate limit exceeded. Please try again later.",
        status: Optional[int] = 429,
    ):
        super().__init__(message, status)


class UpstreamServerError(UpstreamError):
    kind = ErrorKind.UPSTREAM_SERVER_ERROR
    retryable = True

    def __init__(
        self,
        message: str = "Mistral API server error. Please try again later.",
        status: Optional[int] = 500,
    ):
        super().__init__(message, status)


class UpstreamOtherError(UpstreamError):
    """Any other non-2xx status, carrying the upstream's own message."""
    kind = ErrorKind.UPSTREAM_OTHER_ERROR

    def __init__(self, status: int, upstream_message: str):
        super().__init__(f"Mistral API error ({status}): {upstream_message}", status)
        self.upstream_message = upstream_message

    @property
    def retryable(self) -> bool:
        return self.status is not None and self.status >= 500


class TransportFailure(UpstreamError):
    """No response received: connection failure or timeout."""
    kind = ErrorKind.TRANSPORT_FAILURE
    retryable = True


class InvalidResponseShape(UpstreamError):
    """Upstream replied 2xx but the body is not a valid completion."""
    kind = ErrorKind.INVALID_RESPONSE_SHAPE


class EmptyChoices(UpstreamError):
    kind = ErrorKind.EMPTY_CHOICES

    def __init__(
        self,
        message: str = "Mistral API returned no completion choices.",
        status: Optional[int] = None,
    ):
        super().__init__(message, status)


class CredentialConfigError(UpstreamError):
    """
    API key rejected during the startup probe.

    Distinct from AuthenticationFailed: this is an operator configuration
    problem found before any tool call, not a runtime failure.
    """
    kind = ErrorKind.CREDENTIAL_CONFIG

    def __init__(
        self,
        message: str = "Invalid API key. Please check your Codestral API key.",
        status: Optional[int] = 401,
    ):
        super().__init__(message, status)


# ─────────────────────────────────────────────────────────────────────
# TRANSLATION
# ─────────────────────────────────────────────────────────────────────

def parse_upstream_message(response: httpx.Response) -> Optional[str]:
    """
    Extract the upstream's error message from a response body.

    Handles {"error": {"message": "..."}}, {"error": "..."} and
    Mistral's {"message": "..."}. Returns None if nothing usable.
    """
    try:
        data: Any = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    elif isinstance(error, str) and error:
        return error
    message = data.get("message")
    if isinstance(message, str) and message:
        return message
    if isinstance(message, (list, dict)):
        return json.dumps(message)
    return None


def translate_status(status: int, upstream_message: Optional[str] = None) -> UpstreamError:
    """Map a non-2xx status to its error kind."""
    if status == 401:
        return AuthenticationFailed()
    if status == 429:
        return RateLimited()
    if status == 500:
        return UpstreamServerError()
    return UpstreamOtherError(status, upstream_message or f"HTTP {status}")


def translate_response(response: httpx.Response) -> UpstreamError:
    """Translate a non-2xx httpx response."""
    return translate_status(response.status_code, parse_upstream_message(response))


def translate_transport_error(exc: httpx.HTTPError) -> TransportFailure:
    """Translate an httpx error raised before any response arrived."""
    if isinstance(exc, httpx.TimeoutException):
        return TransportFailure(f"Mistral API request timed out: {str(exc) or type(exc).__name__}")
    return TransportFailure(f"Could not reach Mistral API: {str(exc) or type(exc).__name__}")
