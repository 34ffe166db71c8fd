from datetime import datetime
from typing import List, Optional
import logging
from sqlalchemy.orm import Session

from energy_portal.database import utcnow
from energy_portal.models import AlertEvent, AlertKind, City
from energy_portal.providers.base import WeatherProvider
from energy_portal.schemas.alert import CycleFailure, CycleReport
from energy_portal.schemas.forecast import ForecastPoint
from energy_portal.services.alert_service import AlertService, detect_fluctuation, summarize_day
from energy_portal.services.message_service import MessageService

logger = logging.getLogger(__name__)


class AlertOrchestrator:
    """
    Runs one monitoring cycle over every active city:
    fetch forecast -> detect -> (alert event + queued messages) -> snapshot.

    The forecast is fetched once per city and handed to each step. A failure
    for one city is logged and rolled back without stopping the others.
    """

    def __init__(self, db: Session, provider: WeatherProvider, message_service: Optional[MessageService] = None):
        self.db = db
        self.alerts = AlertService(db, provider)
        self.messages = message_service or MessageService(db)

    def run_fluctuation_cycle(self, now: Optional[datetime] = None) -> CycleReport:
        return self._run_cycle(AlertKind.SUDDEN_FLUCTUATION, now or utcnow())

    def run_daily_summary_cycle(self, now: Optional[datetime] = None) -> CycleReport:
        return self._run_cycle(AlertKind.DAILY_SUMMARY, now or utcnow())

    def _run_cycle(self, kind: AlertKind, now: datetime) -> CycleReport:
        report = CycleReport(timestamp=now)
        cities = self.db.query(City).filter(City.is_active == True).order_by(City.id).all()

        for city in cities:
            city_id = city.id
            report.cities_checked += 1
            try:
                self._process_city(city, kind, now, report)
            except Exception as e:
                self.db.rollback()
                logger.error(f"Error processing {kind.value} cycle for city {city_id}: {e}")
                report.failures.append(CycleFailure(city_id=city_id, error=str(e)))

        logger.info(
            f"{kind.value} cycle: {report.cities_checked} cities checked, "
            f"{report.alerts_fired} alerts fired, {len(report.failures)} failures"
        )
        return report

    def _process_city(self, city: City, kind: AlertKind, now: datetime, report: CycleReport) -> None:
        forecast = self.alerts.fetch_forecast(city)

        event = self._detect(city, kind, forecast, now)
        if event is not None:
            # Persist the event first so a queueing failure leaves it visibly unprocessed
            self.db.commit()
            report.alerts_fired += 1
            report.alert_ids.append(event.id)
            try:
                self.messages.create_messages_from_alert(event)
                event.processed = True
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                logger.error(f"Failed to queue messages for alert event {event.id}: {e}")
                report.failures.append(CycleFailure(city_id=city.id, error=str(e)))

        self.alerts.save_snapshot(city, forecast, recorded_at=now)
        self.db.commit()

    def _detect(self, city: City, kind: AlertKind, forecast: List[ForecastPoint], now: datetime) -> Optional[AlertEvent]:
        if kind == AlertKind.SUDDEN_FLUCTUATION:
            result = detect_fluctuation(city, forecast)
            if not result or not result.should_alert:
                return None
            return self.alerts.create_alert_event(
                city,
                kind,
                measurement_data=result.model_dump(mode="json"),
                threshold_snapshot={
                    "temp_delta": float(city.alert_temp_delta),
                    "window_hours": int(city.alert_window_hours),
                },
                triggered_at=now,
            )

        # Yesterday's history has to be read before this cycle's snapshot is added
        summary = summarize_day(forecast, self.alerts.yesterday_temperatures(city.id, now))
        if not summary:
            return None
        return self.alerts.create_alert_event(
            city,
            kind,
            measurement_data=summary.model_dump(mode="json"),
            triggered_at=now,
        )
