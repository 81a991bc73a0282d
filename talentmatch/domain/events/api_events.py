"""Domain Events related to provider calls and resilience.

Examples include events for when calls are deferred by the throttle, retried
after a throttling error, or handed over to a fallback provider.
"""

from dataclasses import dataclass, field
import time
from typing import Callable, Optional


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class RequestDeferred(DomainEvent):
    """Event triggered when the throttle delays the start of a queued call."""
    wait_time_seconds: float
    queued_requests: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a retry is scheduled after a transient failure."""
    attempt_number: int # 1-based number of the attempt that failed
    max_attempts: int
    delay_seconds: float
    error_message: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class ProviderFallbackTriggered(DomainEvent):
    """Event triggered when the primary provider fails and the secondary takes over."""
    reason: str
    primary_provider: str
    fallback_provider: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class ProviderCallCompleted(DomainEvent):
    """Event triggered when a parse request has been served."""
    provider: str
    fallback: bool
    duration_ms: float
    request_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)


EventHandler = Callable[[DomainEvent], None]
