from typing import Optional
import logging
from sqlalchemy.orm import Session

from energy_portal.models import Building, BaselineType, EnergyBaseline, EnergyReport
from energy_portal.schemas.energy import BaselinePeriodInfo, MonthlyComparison, ReportData
from energy_portal.services.energy_service import EnergyService

logger = logging.getLogger(__name__)


def _period_info(baseline: Optional[EnergyBaseline]) -> Optional[BaselinePeriodInfo]:
    if not baseline:
        return None
    return BaselinePeriodInfo(
        period_start=baseline.period_start,
        period_end=baseline.period_end,
        data_points=baseline.data_points,
    )


class ReportService:
    def __init__(self, db: Session, energy_service: Optional[EnergyService] = None):
        self.db = db
        self.energy = energy_service or EnergyService(db)

    def generate_report(self, building_id: int, month: int, year: int) -> Optional[ReportData]:
        comparison = self.energy.compute_monthly_comparison(building_id, month, year)
        if not comparison:
            return None

        building = self.db.query(Building).filter(Building.id == building_id).first()
        if not building:
            return None

        return ReportData(
            building_id=building.id,
            building_name=building.name,
            month=month,
            year=year,
            comparison=comparison,
            heating_baseline=_period_info(self.energy.get_baseline(building_id, month, BaselineType.HEATING)),
            cooling_baseline=_period_info(self.energy.get_baseline(building_id, month, BaselineType.COOLING)),
        )

    def save_report(self, report: ReportData) -> EnergyReport:
        """Insert or replace the report row for (building, month, year)."""
        bill, dd = self.energy.get_bill_and_degree_days(report.building_id, report.month, report.year)

        row = self.get_report(report.building_id, report.month, report.year)
        if not row:
            row = EnergyReport(building_id=report.building_id, month=report.month, year=report.year)
            self.db.add(row)

        c = report.comparison
        row.utility_bill_id = bill.id if bill else None
        row.degree_days_id = dd.id if dd else None
        row.consumption_per_hdd = c.current_consumption_per_hdd
        row.consumption_per_cdd = c.current_consumption_per_cdd
        row.baseline_consumption_per_hdd = c.baseline_consumption_per_hdd
        row.baseline_consumption_per_cdd = c.baseline_consumption_per_cdd
        row.savings_percentage = c.savings_percentage
        row.savings_kbtu = c.savings_kbtu
        row.report_data = report.model_dump(mode="json")

        self.db.commit()
        self.db.refresh(row)
        logger.info(f"Saved energy report {row.id} for building {report.building_id} {report.year}-{report.month:02d}")
        return row

    def get_report(self, building_id: int, month: int, year: int) -> Optional[EnergyReport]:
        return self.db.query(EnergyReport).filter(
            EnergyReport.building_id == building_id,
            EnergyReport.month == month,
            EnergyReport.year == year
        ).first()

    def load_report(self, building_id: int, month: int, year: int) -> Optional[ReportData]:
        row = self.get_report(building_id, month, year)
        if not row or not row.report_data:
            return None
        return ReportData.model_validate(row.report_data)

    def load_comparison(self, building_id: int, month: int, year: int) -> Optional[MonthlyComparison]:
        report = self.load_report(building_id, month, year)
        return report.comparison if report else None
