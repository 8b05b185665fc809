"""Domain error hierarchy for clean exception handling."""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base for all domain errors."""

    status_code = 500
    code = "internal-error"

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(DomainError):
    """Invalid input or state."""

    status_code = 400
    code = "validation-error"


class QuotaExceededError(DomainError):
    """The shared external-call quota for the current window is used up."""

    status_code = 429
    code = "quota-exceeded"


class ProviderError(DomainError):
    """The weather provider failed, timed out or returned unusable data."""

    status_code = 503
    code = "provider-unavailable"


class ProviderTimeoutError(ProviderError):
    """The provider did not answer within the configured bound."""


class MalformedProviderResponse(ProviderError):
    """The provider answered but the payload failed shape validation."""
