import pytest

from energy_portal.exceptions import DataIntegrityError
from energy_portal.models import City
from energy_portal.services.alert_service import AlertService, detect_fluctuation

from conftest import make_city, make_forecast


class StaticProvider:
    def __init__(self, forecast):
        self.forecast = forecast

    def get_hourly_forecast(self, grid):
        return self.forecast


def _city(delta=10.0, window=6):
    return City(id=1, name="Boston", nws_office="BOX", nws_grid_x=71, nws_grid_y=90,
                alert_temp_delta=delta, alert_window_hours=window, is_active=True)


def test_change_equal_to_threshold_alerts():
    forecast = make_forecast([50, 51, 52, 53, 54, 55, 60, 61])

    result = detect_fluctuation(_city(), forecast)

    assert result.should_alert is True
    assert result.temperature_change == 10
    assert result.current_temp == 50
    assert result.future_temp == 60
    assert result.time_window == 6
    assert result.timestamp == forecast[6].time


def test_eight_degree_rise_over_six_hours_alerts_at_five_degree_delta():
    result = detect_fluctuation(_city(delta=5, window=6), make_forecast([50, 50, 50, 50, 50, 50, 58]))

    assert result.should_alert is True
    assert result.temperature_change == 8
    assert result.current_temp == 50
    assert result.future_temp == 58


def test_change_below_threshold_does_not_alert():
    result = detect_fluctuation(_city(), make_forecast([50, 50, 50, 50, 50, 50, 59]))

    assert result.should_alert is False
    assert result.temperature_change == 9


def test_drop_counts_as_fluctuation():
    result = detect_fluctuation(_city(delta=12), make_forecast([60, 58, 55, 52, 49, 47, 45]))

    assert result.should_alert is True
    assert result.temperature_change == 15


def test_forecast_shorter_than_window_returns_none():
    assert detect_fluctuation(_city(window=6), make_forecast([50] * 6)) is None


@pytest.mark.parametrize("delta,window", [(10.0, 0), (0.0, 6), (-1.0, 6)])
def test_invalid_thresholds_raise(delta, window):
    with pytest.raises(DataIntegrityError):
        detect_fluctuation(_city(delta=delta, window=window), make_forecast([50] * 10))


def test_check_fluctuation_skips_inactive_city(db_session):
    city = make_city(db_session, active=False)
    service = AlertService(db_session, StaticProvider(make_forecast([40] * 6 + [70])))

    assert service.check_fluctuation(city.id) is None


def test_check_fluctuation_uses_city_settings(db_session):
    city = make_city(db_session, delta=5, window=3)
    service = AlertService(db_session, StaticProvider(make_forecast([40, 41, 42, 46])))

    result = service.check_fluctuation(city.id)

    assert result.should_alert is True
    assert result.time_window == 3
