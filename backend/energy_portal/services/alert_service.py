from datetime import datetime, timedelta
from typing import List, Optional
import logging
import numpy as np
from sqlalchemy.orm import Session

from energy_portal.config import settings
from energy_portal.database import utcnow
from energy_portal.exceptions import DataIntegrityError
from energy_portal.rounding import round_half_up
from energy_portal.models import City, TemperatureSnapshot, AlertEvent, AlertKind
from energy_portal.providers.base import WeatherProvider
from energy_portal.schemas.alert import AlertCheckResult, DailySummary
from energy_portal.schemas.forecast import GridDescriptor, ForecastPoint

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


def grid_for(city: City) -> GridDescriptor:
    return GridDescriptor(office=city.nws_office, grid_x=city.nws_grid_x, grid_y=city.nws_grid_y)


def detect_fluctuation(city: City, forecast: List[ForecastPoint]) -> Optional[AlertCheckResult]:
    """
    Compare the temperature now (forecast[0]) with the temperature at the end
    of the city's alert window.

    Returns None when the forecast is too short to cover the window.
    The threshold is inclusive: a change equal to alert_temp_delta alerts.
    """
    if city.alert_window_hours is None or city.alert_window_hours < 1:
        raise DataIntegrityError(f"City {city.id} has invalid alert_window_hours={city.alert_window_hours}")
    if city.alert_temp_delta is None or city.alert_temp_delta <= 0:
        raise DataIntegrityError(f"City {city.id} has invalid alert_temp_delta={city.alert_temp_delta}")

    window = int(city.alert_window_hours)
    if len(forecast) < window + 1:
        return None

    current_temp = forecast[0].temp_f
    end_index = min(window, len(forecast) - 1)
    future_temp = forecast[end_index].temp_f
    change = abs(future_temp - current_temp)

    return AlertCheckResult(
        should_alert=change >= float(city.alert_temp_delta),
        temperature_change=change,
        time_window=window,
        current_temp=current_temp,
        future_temp=future_temp,
        timestamp=forecast[end_index].time,
    )


def summarize_day(forecast: List[ForecastPoint], yesterday_temps: List[float]) -> Optional[DailySummary]:
    """
    Average/min/max of the next 24 hours and the change against yesterday's average.
    With no history, yesterday is taken to equal today so the change is 0.
    """
    if len(forecast) < HOURS_PER_DAY:
        return None

    today = np.array([p.temp_f for p in forecast[:HOURS_PER_DAY]], dtype=float)
    average = float(np.mean(today))
    yesterday_avg = float(np.mean(yesterday_temps[:HOURS_PER_DAY])) if yesterday_temps else average

    return DailySummary(
        average_temp=round_half_up(average, 1),
        min_temp=int(round_half_up(float(np.min(today)))),
        max_temp=int(round_half_up(float(np.max(today)))),
        temperature_change=round_half_up(average - yesterday_avg, 1),
    )


class AlertService:
    def __init__(self, db: Session, provider: WeatherProvider):
        self.db = db
        self.provider = provider

    def get_active_city(self, city_id: int) -> Optional[City]:
        city = self.db.query(City).filter(City.id == city_id).first()
        if not city or not city.is_active:
            return None
        return city

    def fetch_forecast(self, city: City) -> List[ForecastPoint]:
        return self.provider.get_hourly_forecast(grid_for(city))

    def check_fluctuation(self, city_id: int) -> Optional[AlertCheckResult]:
        city = self.get_active_city(city_id)
        if not city:
            return None
        return detect_fluctuation(city, self.fetch_forecast(city))

    def compute_daily_summary(self, city_id: int, now: Optional[datetime] = None) -> Optional[DailySummary]:
        city = self.get_active_city(city_id)
        if not city:
            return None
        forecast = self.fetch_forecast(city)
        return summarize_day(forecast, self.yesterday_temperatures(city.id, now))

    def recent_snapshots(self, city_id: int, hours: int, now: Optional[datetime] = None) -> List[TemperatureSnapshot]:
        """Snapshots recorded in the last `hours`, newest first."""
        now = now or utcnow()
        cutoff = now - timedelta(hours=hours)
        return self.db.query(TemperatureSnapshot).filter(
            TemperatureSnapshot.city_id == city_id,
            TemperatureSnapshot.recorded_at >= cutoff,
            TemperatureSnapshot.recorded_at <= now,
        ).order_by(TemperatureSnapshot.recorded_at.desc()).all()

    def yesterday_temperatures(self, city_id: int, now: Optional[datetime] = None) -> List[float]:
        snapshots = self.recent_snapshots(city_id, settings.snapshot_lookback_hours, now)[:HOURS_PER_DAY]
        temps = []
        for s in snapshots:
            if s.temperature_f is None:
                raise DataIntegrityError(f"Snapshot {s.id} for city {city_id} has no temperature")
            temps.append(float(s.temperature_f))
        return temps

    def save_snapshot(
        self,
        city: City,
        forecast: List[ForecastPoint],
        recorded_at: Optional[datetime] = None,
    ) -> Optional[TemperatureSnapshot]:
        """Append this cycle's forecast to the history. Inactive cities are skipped."""
        if not city.is_active or not forecast:
            return None

        snapshot = TemperatureSnapshot(
            city_id=city.id,
            recorded_at=recorded_at or utcnow(),
            temperature_f=forecast[0].temp_f,
            forecast_data=[p.model_dump(mode="json") for p in forecast],
        )
        self.db.add(snapshot)
        self.db.flush()
        return snapshot

    def create_alert_event(
        self,
        city: City,
        kind: AlertKind,
        measurement_data: dict,
        threshold_snapshot: Optional[dict] = None,
        triggered_at: Optional[datetime] = None,
    ) -> AlertEvent:
        event = AlertEvent(
            city_id=city.id,
            kind=kind,
            measurement_data=measurement_data,
            threshold_snapshot=threshold_snapshot or {},
            triggered_at=triggered_at or utcnow(),
            processed=False,
        )
        self.db.add(event)
        self.db.flush()
        logger.info(f"Created {kind.value} alert event {event.id} for {city.name}")
        return event
