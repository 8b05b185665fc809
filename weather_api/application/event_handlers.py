"""Event handlers for domain events."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from weather_api.domain.events import (
        WeatherServed,
        QuotaExhausted,
        ProviderFailed,
        LookupRejected,
    )

logger = logging.getLogger(__name__)


class AuditLogHandler:
    """Logs lookup outcomes for the audit trail."""
    
    def handle_weather_served(self, event: WeatherServed) -> None:
        if event.stale:
            logger.warning(f"[AUDIT] Stale weather served for {event.city} (source={event.source})")
        else:
            logger.info(f"[AUDIT] Weather served for {event.city} (source={event.source})")
    
    def handle_quota_exhausted(self, event: QuotaExhausted) -> None:
        logger.warning(f"[AUDIT] Quota exhausted: {event.window_key} at {event.count}/{event.limit}")
    
    def handle_provider_failed(self, event: ProviderFailed) -> None:
        logger.warning(f"[AUDIT] Provider failed for {event.city}: {event.reason}")
    
    def handle_lookup_rejected(self, event: LookupRejected) -> None:
        logger.error(f"[AUDIT] Lookup rejected for {event.city}: {event.code}")


def register_event_handlers():
    """Register all event handlers with the publisher."""
    from weather_api.domain.events import (
        event_publisher,
        WeatherServed,
        QuotaExhausted,
        ProviderFailed,
        LookupRejected,
    )
    
    # Idempotent across repeated app startups
    event_publisher.clear_subscribers()
    audit = AuditLogHandler()

    event_publisher.subscribe(WeatherServed, audit.handle_weather_served)
    event_publisher.subscribe(QuotaExhausted, audit.handle_quota_exhausted)
    event_publisher.subscribe(ProviderFailed, audit.handle_provider_failed)
    event_publisher.subscribe(LookupRejected, audit.handle_lookup_rejected)
