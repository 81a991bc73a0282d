"""Defines common Value Objects used across different domain contexts.

These objects represent simple values or concepts like resume text, provider
names, token counts, etc., ensuring consistency and type safety.
"""

from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Dict, Generic, Mapping, NewType, Optional, TypedDict, TypeVar

# === Core Value Objects ===

ResumeText = NewType("ResumeText", str)        # Plain text extracted from a resume
ProviderName = NewType("ProviderName", str)    # e.g. 'aws-bedrock', 'openai'

# === Token Management ===
TokenCount = NewType("TokenCount", int)

# Default provenance labels used by ProviderFallback
PRIMARY_PROVIDER = ProviderName("primary")
SECONDARY_PROVIDER = ProviderName("secondary")

T = TypeVar("T")


class BackoffPolicy(TypedDict):
    """Value Object representing retry backoff configuration."""
    max_retries: int
    base_delay_s: float
    max_jitter_s: float
    max_delay_s: Optional[float]


@dataclass
class AnnotatedResult(Generic[T]):
    """A provider result annotated with the provider that actually served it."""
    result: T
    provider: str
    fallback: bool = False
    fallback_reason: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        """Spreads the result's fields and overlays the provenance fields."""
        if is_dataclass(self.result) and not isinstance(self.result, type):
            payload = asdict(self.result)
        elif isinstance(self.result, Mapping):
            payload = dict(self.result)
        else:
            payload = {"result": self.result}

        payload["provider"] = self.provider
        payload["fallback"] = self.fallback
        if self.fallback_reason is not None:
            payload["fallback_reason"] = self.fallback_reason
        return payload
