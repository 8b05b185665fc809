"""
Weather lookup endpoint.

GET /weather?city=<name> returns a success envelope (200) with hourly weather,
or an error envelope: 400 missing city, 429 quota exhausted with nothing
cached, 503 provider unavailable with nothing cached.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from weather_api.dependencies import get_orchestrator
from weather_api.domain.errors import ValidationError
from weather_api.domain.validation import validate_city_query
from weather_api.services.orchestrator import WeatherOrchestrator

router = APIRouter()


@router.get("/weather")
async def get_weather(
    city: Optional[str] = Query(None, description="City name, e.g. London"),
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """
    Get today's hourly weather for a city.
    Flow: cache (fresh) → quota → provider → cache write, falling back to
    stale cache when the quota or the provider fails.
    """
    result = validate_city_query(city)
    if not result.ok:
        raise ValidationError(result.message, details=result.details)

    lookup = await orchestrator.lookup(result.value)
    return JSONResponse(
        status_code=lookup.status_code,
        content=lookup.envelope.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
