"""
weather-api Application Package

Directory Structure:
├── routers/           # FastAPI route handlers
├── schemas/           # Pydantic models for the response envelope
│   └── api_schemas.py # HTTP response structures
├── domain/            # Entities, errors, ports, validation and events
├── services/          # Business logic services
│   ├── cache/         # Freshness policy, cache keys and cache stores
│   ├── providers/     # Weather provider implementations
│   ├── quota_gate.py  # Shared external-call quota
│   ├── envelope.py    # Response envelope builder
│   └── orchestrator.py  # Cache / quota / fetch / fallback decision
├── application/       # Event handlers (audit logging)
└── config.py          # Application configuration

The service answers "what is the weather in city X" while shielding a
rate-limited, unreliable upstream provider behind a cache. Stale data is
served only when it is flagged as such (``stale=true``, ``source=stale-cache``).
"""
