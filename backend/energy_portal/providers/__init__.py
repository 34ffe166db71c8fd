from typing import Optional
import httpx

from energy_portal.providers.base import WeatherProvider
from energy_portal.providers.nws import NWSWeatherProvider
from energy_portal.providers.synthetic import SyntheticWeatherProvider, synthetic_forecast

# Registry of available weather providers
PROVIDER_REGISTRY = {
    "nws": NWSWeatherProvider,
    "synthetic": SyntheticWeatherProvider,
}


def get_weather_provider(provider_type: str, client: Optional[httpx.Client] = None) -> WeatherProvider:
    """Factory function to get the configured weather provider."""
    if provider_type not in PROVIDER_REGISTRY:
        raise ValueError(f"Unknown weather provider: {provider_type}")

    if provider_type == "nws":
        return NWSWeatherProvider(client=client)
    return PROVIDER_REGISTRY[provider_type]()


__all__ = [
    "WeatherProvider",
    "NWSWeatherProvider",
    "SyntheticWeatherProvider",
    "synthetic_forecast",
    "get_weather_provider",
    "PROVIDER_REGISTRY",
]
