import math
import random
from datetime import datetime, timedelta
from typing import List, Optional

from energy_portal.config import settings
from energy_portal.database import utcnow
from energy_portal.providers.base import WeatherProvider
from energy_portal.schemas.forecast import GridDescriptor, ForecastPoint


def synthetic_forecast(hours: Optional[int] = None, start: Optional[datetime] = None) -> List[ForecastPoint]:
    """
    Daily temperature curve around 55°F with a 15°F swing and a little jitter.
    Used when the real forecast cannot be fetched.
    """
    hours = hours or settings.forecast_horizon_hours
    start = (start or utcnow()).replace(minute=0, second=0, microsecond=0)
    points = []
    for i in range(hours):
        temp_f = round(55 + 15 * math.sin((i - 6) * math.pi / 12) + random.uniform(-2, 2))
        points.append(ForecastPoint(time=start + timedelta(hours=i), temp_f=temp_f))
    return points


class SyntheticWeatherProvider(WeatherProvider):

    def __init__(self, hours: Optional[int] = None):
        self.hours = hours or settings.forecast_horizon_hours

    @classmethod
    def get_provider_type(cls) -> str:
        return "synthetic"

    @classmethod
    def get_description(cls) -> str:
        return "Generated temperature curve, no network access"

    def get_hourly_forecast(self, grid: GridDescriptor) -> List[ForecastPoint]:
        return synthetic_forecast(self.hours)
