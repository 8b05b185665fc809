"""Weather provider implementations."""
from .http_provider import HttpWeatherProvider
from .mock_provider import MockWeatherProvider

__all__ = ["HttpWeatherProvider", "MockWeatherProvider"]
