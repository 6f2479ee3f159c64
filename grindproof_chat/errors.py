"""
GrindProof Chat Service - Errors

Exceptions raised by the external collaborators and the mapping of upstream
model failures onto the error object returned to clients.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorType(str, Enum):
    """Upstream failure categories exposed as `errorType`."""
    QUOTA_EXCEEDED = "quota_exceeded"
    SERVICE_UNAVAILABLE = "service_unavailable"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ErrorPolicy:
    status_code: int
    retryable: bool
    message: str


ERROR_POLICIES = {
    ErrorType.QUOTA_EXCEEDED: ErrorPolicy(
        status_code=429,
        retryable=False,
        message="AI assistant temporarily unavailable due to quota limits. Please wait a while before trying again.",
    ),
    ErrorType.SERVICE_UNAVAILABLE: ErrorPolicy(
        status_code=503,
        retryable=False,
        message="AI assistant temporarily unavailable due to a configuration issue. Please contact support.",
    ),
    ErrorType.NETWORK_ERROR: ErrorPolicy(
        status_code=502,
        retryable=True,
        message="Could not reach the AI assistant. Please check your connection and try again.",
    ),
    ErrorType.UNKNOWN: ErrorPolicy(
        status_code=500,
        retryable=True,
        message="Failed to get AI response. Please try again.",
    ),
}

_QUOTA_HINTS = ("quota", "429", "resource_exhausted", "insufficient_quota", "billing", "rate limit")
_CONFIG_HINTS = ("invalid", "api key", "api_key", "authentication", "401", "permission", "not configured")
_NETWORK_HINTS = ("timeout", "timed out", "connection", "network", "econn", "fetch failed")


class TaskServiceError(Exception):
    """The task service rejected or failed a call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class LLMProviderError(Exception):
    """The language-model provider failed; `kind` drives the client response."""

    def __init__(self, kind: ErrorType, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"LLM error ({kind.value}): {message}")

    @property
    def policy(self) -> ErrorPolicy:
        return ERROR_POLICIES[self.kind]


def classify_provider_error(exc: BaseException) -> ErrorType:
    """Classify a provider exception by its message content."""
    text = f"{type(exc).__name__} {exc}".lower()
    if any(hint in text for hint in _QUOTA_HINTS):
        return ErrorType.QUOTA_EXCEEDED
    if any(hint in text for hint in _CONFIG_HINTS):
        return ErrorType.SERVICE_UNAVAILABLE
    if any(hint in text for hint in _NETWORK_HINTS):
        return ErrorType.NETWORK_ERROR
    return ErrorType.UNKNOWN


def error_payload(kind: ErrorType) -> dict:
    """Body of an error response for the given failure category."""
    policy = ERROR_POLICIES[kind]
    return {
        "error": policy.message,
        "errorType": kind.value,
        "retryable": policy.retryable,
    }
