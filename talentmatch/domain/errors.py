"""Domain error taxonomy for provider calls.

Each error carries a `kind` tag so the resilience layer can decide whether a
failure is transient without depending on any SDK's exception hierarchy.
Provider adapters translate SDK exceptions (botocore, openai) into these.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Tag identifying the category of a provider failure."""
    THROTTLED = "throttled"
    PROVIDER = "provider"
    INVALID_RESPONSE = "invalid_response"
    CONFIGURATION = "configuration"


class ProviderError(Exception):
    """Non-transient failure reported by (or about) an AI provider."""

    kind: ErrorKind = ErrorKind.PROVIDER

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)


class ThrottlingError(ProviderError):
    """The downstream service rejected the call because of rate limiting."""

    kind = ErrorKind.THROTTLED


class ResponseParsingError(ProviderError):
    """The provider answered, but the response could not be interpreted."""

    kind = ErrorKind.INVALID_RESPONSE


class ProviderConfigurationError(ProviderError):
    """A provider is missing credentials or is otherwise unusable."""

    kind = ErrorKind.CONFIGURATION


def error_message(error: BaseException) -> str:
    """Returns a human-readable message for an exception."""
    return str(error) or type(error).__name__


class ProviderFallbackError(Exception):
    """Both the primary and the secondary provider failed."""

    def __init__(
        self,
        primary_error: BaseException,
        secondary_error: BaseException,
        primary_name: str = "primary",
        secondary_name: str = "secondary",
    ):
        self.primary_error = primary_error
        self.secondary_error = secondary_error
        self.primary_name = primary_name
        self.secondary_name = secondary_name
        super().__init__(
            f"Both {primary_name} and {secondary_name} failed. "
            f"{primary_name}: {error_message(primary_error)}, "
            f"{secondary_name}: {error_message(secondary_error)}"
        )


def is_throttled(error: BaseException) -> bool:
    """Returns True if the error signals rate limiting by the downstream service.

    Any object tagged with `kind == ErrorKind.THROTTLED` qualifies, so callers
    may raise their own throttling errors without subclassing ours.
    """
    return getattr(error, "kind", None) == ErrorKind.THROTTLED
