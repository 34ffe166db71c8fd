from abc import ABC, abstractmethod
from typing import List

from energy_portal.schemas.forecast import GridDescriptor, ForecastPoint


class WeatherProvider(ABC):
    """Base class for hourly forecast sources. Extend this to add new providers."""

    @abstractmethod
    def get_hourly_forecast(self, grid: GridDescriptor) -> List[ForecastPoint]:
        """
        Fetch the hourly forecast for a grid point.

        Args:
            grid: Forecast office and grid cell to query

        Returns:
            Forecast points ordered ascending by time; index 0 is "now".
            Implementations must not raise on upstream failure.
        """
        pass

    @classmethod
    @abstractmethod
    def get_provider_type(cls) -> str:
        """Return the unique identifier for this provider type."""
        pass

    @classmethod
    def get_description(cls) -> str:
        """Return a human-readable description of this provider."""
        return "No description available"
