from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from weather_api.domain.errors import ProviderError

logger = logging.getLogger(__name__)


class HttpWeatherProvider:
    """Fetch hourly weather from an HTTP endpoint (``GET url?city=<city>``).

    The hourly list is read from ``result`` or ``weather`` in the JSON body,
    or the body itself when it is a list. Shape checks are left to the caller.
    """

    name = "http-weather-api"

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._client = client

    async def _get(self, client: httpx.AsyncClient, city: str) -> httpx.Response:
        response = await client.get(self._url, params={"city": city}, timeout=self._timeout)
        response.raise_for_status()
        return response

    async def fetch(self, city: str) -> Any:
        try:
            if self._client is not None:
                response = await self._get(self._client, city)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._get(client, city)
            body = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("Weather provider timed out for city=%r", city)
            raise ProviderError("Weather provider timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Weather provider returned %d for city=%r: %s",
                exc.response.status_code,
                city,
                exc.response.text[:200],
            )
            raise ProviderError(
                f"Weather provider returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Weather provider request failed for city=%r: %s", city, exc)
            raise ProviderError("Weather provider request failed", details=str(exc)) from exc
        except ValueError as exc:
            raise ProviderError("Weather provider returned invalid JSON") from exc

        if isinstance(body, dict):
            for field in ("result", "weather"):
                if field in body:
                    return body[field]
        return body
