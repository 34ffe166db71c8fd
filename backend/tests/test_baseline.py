from datetime import date

import pytest

from energy_portal.exceptions import DataIntegrityError
from energy_portal.models import BaselineType, EnergyBaseline
from energy_portal.services.energy_service import EnergyService

TODAY = date(2026, 1, 20)


def _seed(service, building, city, rows):
    """rows: (year, total_kbtu, hdd, cdd) for January."""
    for year, kbtu, hdd, cdd in rows:
        service.upload_utility_bill(building.id, 1, year, total_kbtu=kbtu)
        service.upload_degree_days(city.id, 1, year, heating_degree_days=hdd, cooling_degree_days=cdd)


def test_heating_baseline_from_three_years(db_session, city, building):
    service = EnergyService(db_session)
    _seed(service, building, city, [(2023, 1000, 100, 0), (2024, 1100, 100, 0), (2025, 1200, 100, 0)])

    result = service.compute_baseline(building.id, 1, today=TODAY)

    heating = result["heating"]
    assert heating.avg_consumption_per_degree_day == pytest.approx(11.0)
    assert heating.data_points == 3
    assert heating.period_start == date(2023, 1, 1)
    assert heating.period_end == date(2025, 1, 28)
    assert result["cooling"] is None


def test_fewer_than_three_bills_gives_no_baseline(db_session, city, building):
    service = EnergyService(db_session)
    _seed(service, building, city, [(2024, 1100, 100, 0), (2025, 1200, 100, 0)])

    assert service.compute_baseline(building.id, 1, today=TODAY) == {"heating": None, "cooling": None}


def test_bills_before_trailing_window_are_ignored(db_session, city, building):
    service = EnergyService(db_session)
    _seed(service, building, city, [(2022, 900, 100, 0), (2024, 1100, 100, 0), (2025, 1200, 100, 0)])

    assert service.compute_baseline(building.id, 1, today=TODAY)["heating"] is None


def test_types_need_their_own_data_points(db_session, city, building):
    service = EnergyService(db_session)
    _seed(service, building, city, [
        (2023, 1000, 100, 10), (2024, 1100, 100, 0), (2025, 1200, 100, 20),
    ])

    result = service.compute_baseline(building.id, 1, today=TODAY)

    assert result["heating"] is not None
    assert result["cooling"] is None


def test_both_types_share_period_bounds(db_session, city, building):
    service = EnergyService(db_session)
    _seed(service, building, city, [
        (2023, 1000, 100, 50), (2024, 1100, 100, 50), (2025, 1200, 100, 50),
    ])

    result = service.compute_baseline(building.id, 1, today=TODAY)

    assert result["cooling"].avg_consumption_per_degree_day == pytest.approx(22.0)
    assert result["cooling"].period_start == result["heating"].period_start
    assert result["cooling"].period_end == result["heating"].period_end


def test_recompute_replaces_existing_baseline(db_session, city, building):
    service = EnergyService(db_session)
    _seed(service, building, city, [(2023, 1000, 100, 0), (2024, 1100, 100, 0), (2025, 1200, 100, 0)])
    service.compute_baseline(building.id, 1, today=TODAY)

    service.upload_utility_bill(building.id, 1, 2025, total_kbtu=1500)
    result = service.compute_baseline(building.id, 1, today=TODAY)

    assert result["heating"].avg_consumption_per_degree_day == pytest.approx(12.0)
    assert db_session.query(EnergyBaseline).filter(
        EnergyBaseline.baseline_type == BaselineType.HEATING
    ).count() == 1


def test_recompute_with_same_data_is_stable(db_session, city, building):
    service = EnergyService(db_session)
    _seed(service, building, city, [(2023, 1000, 100, 0), (2024, 1100, 100, 0), (2025, 1200, 100, 0)])

    first = service.compute_baseline(building.id, 1, today=TODAY)["heating"]
    first_values = (first.avg_consumption_per_degree_day, first.data_points, first.period_start, first.period_end)
    second = service.compute_baseline(building.id, 1, today=TODAY)["heating"]

    assert (second.avg_consumption_per_degree_day, second.data_points, second.period_start, second.period_end) \
        == first_values
    assert db_session.query(EnergyBaseline).count() == 1


def test_missing_building_gives_empty_pair(db_session):
    assert EnergyService(db_session).compute_baseline(999, 1, today=TODAY) == {"heating": None, "cooling": None}


def test_upload_validation(db_session, city, building):
    service = EnergyService(db_session)

    with pytest.raises(DataIntegrityError):
        service.upload_utility_bill(building.id, 13, 2025, total_kbtu=100)
    with pytest.raises(DataIntegrityError):
        service.upload_utility_bill(building.id, 1, 2025, total_kbtu=-1)
    with pytest.raises(DataIntegrityError):
        service.upload_utility_bill(999, 1, 2025, total_kbtu=100)
    with pytest.raises(DataIntegrityError):
        service.upload_degree_days(city.id, 1, 2025, heating_degree_days=-5, cooling_degree_days=0)


def test_upload_replaces_bill_for_same_month(db_session, building):
    service = EnergyService(db_session)
    first = service.upload_utility_bill(building.id, 2, 2025, total_kbtu=500, gas_therms=3.0)
    second = service.upload_utility_bill(building.id, 2, 2025, total_kbtu=650)

    assert first.id == second.id
    assert second.total_kbtu == 650
    assert second.gas_therms is None
    assert len(service.utility_history(building.id)) == 1
