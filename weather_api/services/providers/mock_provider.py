from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

from weather_api.domain.errors import ProviderError

CONDITIONS = ["Clear", "Cloudy", "Rain", "Sunny", "Storm", "Snow", "Fog"]


class MockWeatherProvider:
    """Stand-in for the external provider that fails some of the time.

    Produces 24 hourly records around a random base temperature (10-30°C,
    +/-5 per hour) and raises ProviderError with probability ``failure_rate``.
    """

    name = "mock-weather-api"

    def __init__(self, failure_rate: float = 0.2, rng: Optional[random.Random] = None) -> None:
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()

    def _day(self) -> List[Dict[str, Any]]:
        base = self._rng.randint(10, 30)
        return [
            {
                "hour": hour,
                "temperature": f"{base + self._rng.randint(-5, 5)}°C",
                "condition": self._rng.choice(CONDITIONS),
            }
            for hour in range(24)
        ]

    async def fetch(self, city: str) -> List[Dict[str, Any]]:
        if self._rng.random() < self.failure_rate:
            raise ProviderError("External API failure", details=f"mock failure for {city}")
        return self._day()
