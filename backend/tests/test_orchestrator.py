from datetime import timedelta

from energy_portal.models import AlertEvent, AlertKind, Message, TemperatureSnapshot
from energy_portal.providers.base import WeatherProvider
from energy_portal.services.alert_orchestrator import AlertOrchestrator
from energy_portal.services.message_service import MessageService

from conftest import make_building, make_city, make_forecast, make_recipient

SPIKE = [50, 51, 52, 53, 54, 55, 64] + [64] * 41
FLAT = [50] * 48


class FakeProvider(WeatherProvider):
    """Forecast per office; "ERR" raises to simulate a broken city."""

    def __init__(self, forecasts, start):
        self.forecasts = forecasts
        self.start = start
        self.calls = []

    @classmethod
    def get_provider_type(cls):
        return "fake"

    def get_hourly_forecast(self, grid):
        self.calls.append(grid.office)
        if grid.office == "ERR":
            raise RuntimeError("grid lookup failed")
        return make_forecast(self.forecasts[grid.office], start=self.start)


class BrokenMessageService(MessageService):
    def create_messages_from_alert(self, event):
        raise RuntimeError("template store unavailable")


def _snapshots(db, city):
    return db.query(TemperatureSnapshot).filter(TemperatureSnapshot.city_id == city.id).all()


def test_failing_city_does_not_stop_the_cycle(db_session, now):
    broken = make_city(db_session, name="Nowhere", office="ERR")
    boston = make_city(db_session, name="Boston", office="BOX")
    building = make_building(db_session, boston)
    make_recipient(db_session, building)
    provider = FakeProvider({"BOX": SPIKE}, now)

    report = AlertOrchestrator(db_session, provider).run_fluctuation_cycle(now=now)

    assert report.cities_checked == 2
    assert report.alerts_fired == 1
    assert [f.city_id for f in report.failures] == [broken.id]
    assert "grid lookup failed" in report.failures[0].error
    assert _snapshots(db_session, broken) == []
    assert len(_snapshots(db_session, boston)) == 1

    event = db_session.query(AlertEvent).one()
    assert event.id == report.alert_ids[0]
    assert event.processed is True
    assert event.threshold_snapshot == {"temp_delta": 10.0, "window_hours": 6}
    assert event.measurement_data["temperature_change"] == 14
    assert db_session.query(Message).filter(Message.alert_event_id == event.id).count() == 1


def test_forecast_is_fetched_once_per_city(db_session, now):
    make_city(db_session, office="BOX")
    provider = FakeProvider({"BOX": SPIKE}, now)

    AlertOrchestrator(db_session, provider).run_fluctuation_cycle(now=now)

    assert provider.calls == ["BOX"]


def test_no_alert_still_records_snapshot(db_session, now):
    city = make_city(db_session, office="BOX")
    report = AlertOrchestrator(db_session, FakeProvider({"BOX": FLAT}, now)).run_fluctuation_cycle(now=now)

    assert report.alerts_fired == 0
    assert report.failures == []
    assert db_session.query(AlertEvent).count() == 0
    assert _snapshots(db_session, city)[0].recorded_at == now


def test_inactive_city_is_skipped(db_session, now):
    city = make_city(db_session, office="BOX", active=False)
    provider = FakeProvider({"BOX": SPIKE}, now)

    report = AlertOrchestrator(db_session, provider).run_fluctuation_cycle(now=now)

    assert report.cities_checked == 0
    assert provider.calls == []
    assert _snapshots(db_session, city) == []


def test_event_stays_unprocessed_when_queueing_fails(db_session, now):
    city = make_city(db_session, office="BOX")
    make_recipient(db_session, make_building(db_session, city))
    orchestrator = AlertOrchestrator(
        db_session, FakeProvider({"BOX": SPIKE}, now), message_service=BrokenMessageService(db_session)
    )

    report = orchestrator.run_fluctuation_cycle(now=now)

    event = db_session.query(AlertEvent).one()
    assert event.processed is False
    assert report.alerts_fired == 1
    assert len(report.failures) == 1
    assert db_session.query(Message).count() == 0
    assert len(_snapshots(db_session, city)) == 1


def test_daily_summary_compares_with_previous_snapshot(db_session, now):
    city = make_city(db_session, office="BOX")
    make_recipient(db_session, make_building(db_session, city))
    orchestrator = AlertOrchestrator(db_session, FakeProvider({"BOX": [40] * 48}, now))

    first = orchestrator.run_daily_summary_cycle(now=now)

    orchestrator.alerts.provider = FakeProvider({"BOX": [45] * 48}, now + timedelta(hours=24))
    second = orchestrator.run_daily_summary_cycle(now=now + timedelta(hours=24))

    events = db_session.query(AlertEvent).order_by(AlertEvent.id).all()
    assert first.alerts_fired == second.alerts_fired == 1
    assert [e.kind for e in events] == [AlertKind.DAILY_SUMMARY, AlertKind.DAILY_SUMMARY]
    assert events[0].measurement_data["temperature_change"] == 0.0
    assert events[1].measurement_data["average_temp"] == 45.0
    assert events[1].measurement_data["temperature_change"] == 5.0
    assert len(_snapshots(db_session, city)) == 2
