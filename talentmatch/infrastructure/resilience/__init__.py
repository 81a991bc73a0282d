"""API Resilience Implementations.

Contains services for serializing calls to rate-limited APIs, retrying with
exponential backoff, and falling back to a secondary provider.
Bounded Context: API Resilience
"""

from talentmatch.infrastructure.resilience.request_throttle import RequestThrottle
from talentmatch.infrastructure.resilience.api_retry import RetryWithBackoff, retry_with_backoff
from talentmatch.infrastructure.resilience.provider_fallback import ProviderFallback

__all__ = ["RequestThrottle", "RetryWithBackoff", "retry_with_backoff", "ProviderFallback"]
