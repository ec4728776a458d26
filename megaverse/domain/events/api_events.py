"""Domain Events related to API calls and batch execution.

Examples include events for when calls are retried, fail definitively,
or when a batch of placements has settled.
"""

import time
from dataclasses import dataclass, field


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


# --- Specific API Events ---

@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a retry is scheduled for a rate limited API call."""
    endpoint: str
    attempt_number: int
    delay_seconds: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallFailed(DomainEvent):
    """Event triggered when an API call fails definitively (after retries)."""
    endpoint: str
    error_type: str
    error_message: str
    timestamp: float = field(default_factory=time.time)


# --- Scheduling Events ---

@dataclass
class BatchSettled(DomainEvent):
    """Event triggered once every task of a batch has finished."""
    batch_number: int
    total_batches: int
    size: int
    timestamp: float = field(default_factory=time.time)
