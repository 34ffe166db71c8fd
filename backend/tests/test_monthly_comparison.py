from datetime import date

import pytest

from energy_portal.exceptions import DataIntegrityError
from energy_portal.models import BaselineType, EnergyReport
from energy_portal.services.energy_service import EnergyService
from energy_portal.services.report_service import ReportService


def _baseline(service, building, baseline_type, value):
    service.save_baseline(building.id, 1, baseline_type, value, 2022, 2024, 3)
    service.db.commit()


def test_heating_savings(db_session, city, building):
    service = EnergyService(db_session)
    service.upload_utility_bill(building.id, 1, 2025, total_kbtu=900, electric_kwh=1200.0)
    service.upload_degree_days(city.id, 1, 2025, heating_degree_days=100, cooling_degree_days=0)
    _baseline(service, building, BaselineType.HEATING, 10.0)

    comparison = service.compute_monthly_comparison(building.id, 1, 2025)

    assert comparison.current_consumption_per_hdd == 9.0
    assert comparison.baseline_consumption_per_hdd == 10.0
    assert comparison.savings_percentage == 10.0
    assert comparison.savings_kbtu == 100.0
    assert comparison.electric_kwh == 1200.0
    assert comparison.hdd == 100
    assert comparison.cdd == 0


def test_cooling_used_when_month_has_no_hdd(db_session, city, building):
    service = EnergyService(db_session)
    service.upload_utility_bill(building.id, 1, 2025, total_kbtu=1100)
    service.upload_degree_days(city.id, 1, 2025, heating_degree_days=0, cooling_degree_days=50)
    _baseline(service, building, BaselineType.HEATING, 10.0)
    _baseline(service, building, BaselineType.COOLING, 20.0)

    comparison = service.compute_monthly_comparison(building.id, 1, 2025)

    assert comparison.current_consumption_per_hdd == 0.0
    assert comparison.current_consumption_per_cdd == 22.0
    assert comparison.savings_kbtu == -100.0
    assert comparison.savings_percentage == -10.0


def test_no_baseline_reports_zero_savings(db_session, city, building):
    service = EnergyService(db_session)
    service.upload_utility_bill(building.id, 1, 2025, total_kbtu=333)
    service.upload_degree_days(city.id, 1, 2025, heating_degree_days=70, cooling_degree_days=0)

    comparison = service.compute_monthly_comparison(building.id, 1, 2025)

    assert comparison.current_consumption_per_hdd == pytest.approx(4.7571)
    assert comparison.savings_percentage == 0.0
    assert comparison.savings_kbtu == 0.0


def test_missing_degree_days_returns_none(db_session, building):
    service = EnergyService(db_session)
    service.upload_utility_bill(building.id, 1, 2025, total_kbtu=900)

    assert service.compute_monthly_comparison(building.id, 1, 2025) is None
    assert service.compute_monthly_comparison(building.id, 2, 2025) is None


def test_invalid_month_raises(db_session, building):
    with pytest.raises(DataIntegrityError):
        EnergyService(db_session).compute_monthly_comparison(building.id, 0, 2025)


def test_saved_report_reloads_identical_figures(db_session, city, building):
    energy = EnergyService(db_session)
    energy.upload_utility_bill(building.id, 1, 2025, total_kbtu=900)
    energy.upload_degree_days(city.id, 1, 2025, heating_degree_days=100, cooling_degree_days=0)
    _baseline(energy, building, BaselineType.HEATING, 10.0)
    reports = ReportService(db_session, energy)

    report = reports.generate_report(building.id, 1, 2025)
    row = reports.save_report(report)

    assert row.savings_percentage == 10.0
    assert row.utility_bill_id is not None
    assert report.building_name == building.name
    assert report.heating_baseline.period_start == date(2022, 1, 1)
    assert report.cooling_baseline is None
    assert reports.load_comparison(building.id, 1, 2025) == report.comparison


def test_saving_report_twice_keeps_one_row(db_session, city, building):
    energy = EnergyService(db_session)
    energy.upload_utility_bill(building.id, 1, 2025, total_kbtu=900)
    energy.upload_degree_days(city.id, 1, 2025, heating_degree_days=100, cooling_degree_days=0)
    reports = ReportService(db_session, energy)

    first = reports.save_report(reports.generate_report(building.id, 1, 2025))
    energy.upload_utility_bill(building.id, 1, 2025, total_kbtu=800)
    second = reports.save_report(reports.generate_report(building.id, 1, 2025))

    assert first.id == second.id
    assert db_session.query(EnergyReport).count() == 1
    assert reports.load_comparison(building.id, 1, 2025).total_kbtu == 800


def test_report_without_data_is_none(db_session, building):
    assert ReportService(db_session).generate_report(building.id, 1, 2025) is None
