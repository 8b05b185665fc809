"""Domain events for decoupled side effects such as audit logging."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for all domain events."""
    event_id: str
    timestamp: Optional[datetime]
    aggregate_id: str
    
    def __post_init__(self):
        if not self.event_id:
            object.__setattr__(self, 'event_id', str(uuid4()))
        if not self.timestamp:
            object.__setattr__(self, 'timestamp', datetime.now(timezone.utc))


@dataclass
class WeatherServed(DomainEvent):
    """Raised when a lookup resolves to weather data."""
    city: str
    source: str
    stale: bool


@dataclass
class QuotaExhausted(DomainEvent):
    """Raised when the quota gate rejects an external call."""
    window_key: str
    count: int
    limit: int


@dataclass
class ProviderFailed(DomainEvent):
    """Raised when an admitted provider call fails, times out or is malformed."""
    city: str
    reason: str


@dataclass
class LookupRejected(DomainEvent):
    """Raised when a lookup ends in an error envelope (no usable fallback)."""
    city: str
    code: str


class DomainEventPublisher:
    """Singleton publisher for domain events."""
    
    _instance: DomainEventPublisher | None = None
    _subscribers: Dict[type, List[Callable[[DomainEvent], None]]]
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._subscribers = {}
        return cls._instance
    
    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)
    
    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        for handler in self._subscribers.get(type(event), []):
            try:
                handler(event)
            except Exception:
                # A broken subscriber must not fail the lookup
                logger.warning("Event handler error for %s", type(event).__name__, exc_info=True)
    
    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers = {}


# Singleton instance
event_publisher = DomainEventPublisher()
