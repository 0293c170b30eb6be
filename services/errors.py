"""Remote-service failure type and classification of transport/SDK errors."""

from __future__ import annotations

import httpx
import openai

from models.plant_models import ErrorKind


class RemoteServiceError(Exception):
    """Raised by remote clients when a call yields no usable result."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.args[0]}"


def kind_for_status(status_code: int) -> ErrorKind:
    """Map a non-2xx HTTP status to an error kind."""
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    if status_code in (401, 403):
        return ErrorKind.UNAUTHORIZED
    if status_code >= 500:
        return ErrorKind.TRANSIENT_NETWORK
    return ErrorKind.SERVICE_UNAVAILABLE


def classify_openai_error(exc: Exception) -> RemoteServiceError:
    """Translate an OpenAI SDK exception into a RemoteServiceError."""
    if isinstance(exc, RemoteServiceError):
        return exc
    if isinstance(exc, openai.RateLimitError):
        kind = ErrorKind.RATE_LIMITED
    elif isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        kind = ErrorKind.UNAUTHORIZED
    elif isinstance(exc, openai.APIConnectionError):
        # Includes APITimeoutError.
        kind = ErrorKind.TRANSIENT_NETWORK
    elif isinstance(exc, openai.APIStatusError):
        kind = kind_for_status(exc.status_code)
    elif isinstance(exc, httpx.TransportError):
        kind = ErrorKind.TRANSIENT_NETWORK
    else:
        kind = ErrorKind.SERVICE_UNAVAILABLE
    return RemoteServiceError(kind, str(exc) or type(exc).__name__)
