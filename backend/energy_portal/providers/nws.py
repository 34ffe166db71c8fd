from datetime import datetime
from typing import List, Optional
import httpx
import logging

from energy_portal.config import settings
from energy_portal.providers.base import WeatherProvider
from energy_portal.rounding import round_half_up
from energy_portal.providers.synthetic import synthetic_forecast
from energy_portal.schemas.forecast import GridDescriptor, ForecastPoint

logger = logging.getLogger(__name__)


def to_fahrenheit(temperature: float, unit: str) -> float:
    if unit == "F":
        return temperature
    return round_half_up(temperature * 9 / 5 + 32)


class NWSWeatherProvider(WeatherProvider):
    """
    Hourly forecast from the National Weather Service gridpoints API (no API key).
    Any failure falls back to the synthetic curve so cycles keep running.
    """

    def __init__(self, client: Optional[httpx.Client] = None, hours: Optional[int] = None):
        self.client = client
        self.hours = hours or settings.forecast_horizon_hours

    @classmethod
    def get_provider_type(cls) -> str:
        return "nws"

    @classmethod
    def get_description(cls) -> str:
        return "National Weather Service hourly gridpoint forecast"

    def forecast_url(self, grid: GridDescriptor) -> str:
        base = settings.nws_base_url.rstrip("/")
        return f"{base}/gridpoints/{grid.office}/{grid.grid_x},{grid.grid_y}/forecast/hourly"

    def get_hourly_forecast(self, grid: GridDescriptor) -> List[ForecastPoint]:
        url = self.forecast_url(grid)
        try:
            response = self._get(url)
        except httpx.HTTPError as e:
            logger.error(f"Error fetching NWS forecast for {grid.office} {grid.grid_x},{grid.grid_y}: {e}")
            return synthetic_forecast(self.hours)

        if response.status_code != 200:
            logger.error(f"NWS API error for {grid.office}: {response.status_code} {response.text[:200]}")
            return synthetic_forecast(self.hours)

        try:
            points = self._parse_periods(response.json())
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Malformed NWS payload for {grid.office}: {e}")
            return synthetic_forecast(self.hours)

        if not points:
            logger.warning(f"NWS returned no periods for {grid.office} {grid.grid_x},{grid.grid_y}")
            return synthetic_forecast(self.hours)

        return points

    def _get(self, url: str) -> httpx.Response:
        headers = {"User-Agent": settings.nws_user_agent, "Accept": "application/geo+json"}
        if self.client is not None:
            return self.client.get(url, headers=headers, timeout=settings.weather_timeout_seconds)
        with httpx.Client() as client:
            return client.get(url, headers=headers, timeout=settings.weather_timeout_seconds)

    def _parse_periods(self, data: dict) -> List[ForecastPoint]:
        periods = (data.get("properties") or {}).get("periods") or []
        points = []
        for p in periods[:self.hours]:
            points.append(ForecastPoint(
                time=datetime.fromisoformat(p["startTime"]),
                temp_f=to_fahrenheit(float(p["temperature"]), p.get("temperatureUnit", "F")),
            ))
        points.sort(key=lambda fp: fp.time)
        return points
