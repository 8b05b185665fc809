"""
API Response Schemas using Pydantic.

Every response is wrapped in an envelope: ``success`` plus exactly one of
``data`` or ``error``. Successful lookups also carry ``meta`` describing where
the data came from and whether it is stale.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Literal, Optional, Union
from datetime import datetime

# Weather schemas
class WeatherHour(BaseModel):
    hour: int = Field(..., ge=0, le=23, description="Hour of the day (0-23)")
    temperature: Union[int, float, str] = Field(..., description="Temperature, numeric or formatted (e.g. '21°C')")
    condition: str = Field(..., description="Weather condition (e.g. Clear, Rain)")

class WeatherData(BaseModel):
    city: str = Field(..., description="City as requested")
    date: str = Field(..., description="Calendar date (YYYY-MM-DD) the data was fetched on")
    weather: List[WeatherHour] = Field(..., description="24 hourly records in ascending hour order")

# Envelope schemas
class ResponseMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: Literal["cache", "api", "stale-cache"] = Field(..., description="Where the data was served from")
    stale: bool = Field(..., description="True when the data is older than the validity window")
    fetched_at: datetime = Field(..., alias="fetchedAt", description="When the data was fetched from the provider")
    served_at: datetime = Field(..., alias="servedAt", description="When this response was built")
    provider: Optional[str] = Field(None, description="Provider that produced the data")
    units: str = Field("metric", description="Unit system of the temperatures")
    warning: Optional[str] = Field(None, description="Why stale data was served")

class ErrorDetail(BaseModel):
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(None, description="Optional additional error details")

class SuccessEnvelope(BaseModel):
    success: Literal[True] = Field(default=True, description="Whether the lookup succeeded")
    data: WeatherData
    meta: ResponseMeta

class ErrorEnvelope(BaseModel):
    success: Literal[False] = Field(default=False, description="Whether the lookup succeeded")
    error: ErrorDetail

Envelope = Union[SuccessEnvelope, ErrorEnvelope]
