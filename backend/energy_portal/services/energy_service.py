from datetime import date
from typing import Dict, List, Optional
import logging
import numpy as np
from sqlalchemy.orm import Session

from energy_portal.config import settings
from energy_portal.exceptions import DataIntegrityError
from energy_portal.rounding import round_half_up
from energy_portal.models import Building, BaselineType, DegreeDayRecord, EnergyBaseline, UtilityBill
from energy_portal.schemas.energy import MonthlyComparison

logger = logging.getLogger(__name__)


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise DataIntegrityError(f"Month must be between 1 and 12, got {month}")


def _period_key(year: int, month: int) -> int:
    return year * 100 + month


class EnergyService:
    """
    Degree-day normalized energy analysis: utility bill and degree-day upserts,
    per-month baselines, and month-over-month savings against those baselines.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Uploads -------------------------------------------------------------

    def upload_utility_bill(
        self,
        building_id: int,
        month: int,
        year: int,
        total_kbtu: float,
        electric_kwh: Optional[float] = None,
        gas_therms: Optional[float] = None,
        fuel_oil_gallons: Optional[float] = None,
        district_steam_mbtu: Optional[float] = None,
        uploaded_by: Optional[str] = None,
    ) -> UtilityBill:
        """Insert or replace the bill for (building, month, year)."""
        _check_month(month)
        if total_kbtu < 0:
            raise DataIntegrityError("total_kbtu cannot be negative")

        building = self.db.query(Building).filter(Building.id == building_id).first()
        if not building:
            raise DataIntegrityError(f"Building {building_id} not found")

        bill = self.db.query(UtilityBill).filter(
            UtilityBill.building_id == building_id,
            UtilityBill.month == month,
            UtilityBill.year == year
        ).first()

        if not bill:
            bill = UtilityBill(building_id=building_id, month=month, year=year)
            self.db.add(bill)

        bill.electric_kwh = electric_kwh
        bill.gas_therms = gas_therms
        bill.fuel_oil_gallons = fuel_oil_gallons
        bill.district_steam_mbtu = district_steam_mbtu
        bill.total_kbtu = total_kbtu
        bill.uploaded_by = uploaded_by

        self.db.commit()
        self.db.refresh(bill)
        return bill

    def upload_degree_days(
        self,
        city_id: int,
        month: int,
        year: int,
        heating_degree_days: float,
        cooling_degree_days: float,
        uploaded_by: Optional[str] = None,
    ) -> DegreeDayRecord:
        """Insert or replace the degree days for (city, month, year)."""
        _check_month(month)
        if heating_degree_days < 0 or cooling_degree_days < 0:
            raise DataIntegrityError("Degree days cannot be negative")

        record = self.db.query(DegreeDayRecord).filter(
            DegreeDayRecord.city_id == city_id,
            DegreeDayRecord.month == month,
            DegreeDayRecord.year == year
        ).first()

        if not record:
            record = DegreeDayRecord(city_id=city_id, month=month, year=year)
            self.db.add(record)

        record.heating_degree_days = heating_degree_days
        record.cooling_degree_days = cooling_degree_days
        record.uploaded_by = uploaded_by

        self.db.commit()
        self.db.refresh(record)
        return record

    def utility_history(self, building_id: int, limit: int = 36) -> List[UtilityBill]:
        return self.db.query(UtilityBill).filter(
            UtilityBill.building_id == building_id
        ).order_by(UtilityBill.year.desc(), UtilityBill.month.desc()).limit(limit).all()

    def degree_day_history(self, city_id: int, limit: int = 36) -> List[DegreeDayRecord]:
        return self.db.query(DegreeDayRecord).filter(
            DegreeDayRecord.city_id == city_id
        ).order_by(DegreeDayRecord.year.desc(), DegreeDayRecord.month.desc()).limit(limit).all()

    # --- Baselines -----------------------------------------------------------

    def compute_baseline(self, building_id: int, month: int, today: Optional[date] = None) -> Dict[str, Optional[EnergyBaseline]]:
        """
        Average kBTU per degree day for this calendar month over the trailing
        years of bills. Heating and cooling are accumulated independently: a bill
        counts toward each type whose degree days are positive, and each type
        needs its own minimum number of data points before it is saved.
        """
        _check_month(month)
        today = today or date.today()
        result = {BaselineType.HEATING.value: None, BaselineType.COOLING.value: None}

        building = self.db.query(Building).filter(Building.id == building_id).first()
        if not building:
            return result

        cutoff = _period_key(today.year - settings.baseline_years, today.month)
        bills = [
            b for b in self.db.query(UtilityBill).filter(
                UtilityBill.building_id == building_id,
                UtilityBill.month == month
            ).order_by(UtilityBill.year.desc()).all()
            if _period_key(b.year, b.month) >= cutoff
        ]

        if len({b.year for b in bills}) < settings.baseline_min_data_points:
            logger.info(f"Not enough bills for baseline: building {building_id}, month {month} ({len(bills)} found)")
            return result

        degree_days = {
            dd.year: dd for dd in self.db.query(DegreeDayRecord).filter(
                DegreeDayRecord.city_id == building.city_id,
                DegreeDayRecord.month == month,
                DegreeDayRecord.year.in_([b.year for b in bills])
            ).all()
        }

        heating = []
        cooling = []
        for bill in bills:
            dd = degree_days.get(bill.year)
            if not dd:
                continue
            if dd.heating_degree_days and dd.heating_degree_days > 0:
                heating.append(float(bill.total_kbtu) / float(dd.heating_degree_days))
            if dd.cooling_degree_days and dd.cooling_degree_days > 0:
                cooling.append(float(bill.total_kbtu) / float(dd.cooling_degree_days))

        # Known asymmetry: both types share the year span of all qualifying bills,
        # even when fewer of those bills contributed to one of them. Kept as-is
        # until product decides whether the period should be per type.
        min_year = min(b.year for b in bills)
        max_year = max(b.year for b in bills)

        for baseline_type, values in ((BaselineType.HEATING, heating), (BaselineType.COOLING, cooling)):
            if len(values) >= settings.baseline_min_data_points:
                result[baseline_type.value] = self.save_baseline(
                    building_id, month, baseline_type, float(np.mean(values)), min_year, max_year, len(values)
                )

        self.db.commit()
        return result

    def save_baseline(
        self,
        building_id: int,
        month: int,
        baseline_type: BaselineType,
        avg_consumption_per_degree_day: float,
        start_year: int,
        end_year: int,
        data_points: int,
    ) -> EnergyBaseline:
        """Replace the baseline for (building, month, type)."""
        baseline = self.get_baseline(building_id, month, baseline_type)
        if not baseline:
            baseline = EnergyBaseline(building_id=building_id, month=month, baseline_type=baseline_type)
            self.db.add(baseline)

        baseline.avg_consumption_per_degree_day = avg_consumption_per_degree_day
        baseline.period_start = date(start_year, month, 1)
        baseline.period_end = date(end_year, month, 28)
        baseline.data_points = data_points
        self.db.flush()

        logger.info(
            f"Saved {baseline_type.value} baseline for building {building_id}, month {month}: "
            f"{avg_consumption_per_degree_day:.4f} kBTU/DD over {data_points} points"
        )
        return baseline

    def get_baseline(self, building_id: int, month: int, baseline_type: BaselineType) -> Optional[EnergyBaseline]:
        return self.db.query(EnergyBaseline).filter(
            EnergyBaseline.building_id == building_id,
            EnergyBaseline.month == month,
            EnergyBaseline.baseline_type == baseline_type
        ).first()

    # --- Comparison ----------------------------------------------------------

    def get_bill_and_degree_days(self, building_id: int, month: int, year: int):
        """The bill and the matching city degree days, or (None, None) if either is missing."""
        bill = self.db.query(UtilityBill).filter(
            UtilityBill.building_id == building_id,
            UtilityBill.month == month,
            UtilityBill.year == year
        ).first()
        if not bill:
            return None, None

        building = self.db.query(Building).filter(Building.id == building_id).first()
        if not building:
            return None, None

        dd = self.db.query(DegreeDayRecord).filter(
            DegreeDayRecord.city_id == building.city_id,
            DegreeDayRecord.month == month,
            DegreeDayRecord.year == year
        ).first()
        if not dd:
            return None, None
        return bill, dd

    def compute_monthly_comparison(self, building_id: int, month: int, year: int) -> Optional[MonthlyComparison]:
        """
        Savings for one building-month against its degree-day baseline.

        Heating is preferred when a heating baseline exists and the month had
        HDD; otherwise cooling; otherwise savings are reported as zero.
        Positive savings mean less consumption than the historical norm.
        """
        _check_month(month)
        bill, dd = self.get_bill_and_degree_days(building_id, month, year)
        if bill is None:
            return None

        hdd = float(dd.heating_degree_days or 0)
        cdd = float(dd.cooling_degree_days or 0)
        total_kbtu = float(bill.total_kbtu)

        per_hdd = total_kbtu / hdd if hdd > 0 else 0.0
        per_cdd = total_kbtu / cdd if cdd > 0 else 0.0

        heating = self.get_baseline(building_id, month, BaselineType.HEATING)
        cooling = self.get_baseline(building_id, month, BaselineType.COOLING)
        baseline_hdd = float(heating.avg_consumption_per_degree_day) if heating else None
        baseline_cdd = float(cooling.avg_consumption_per_degree_day) if cooling else None

        expected = None
        if baseline_hdd and hdd > 0:
            expected = baseline_hdd * hdd
        elif baseline_cdd and cdd > 0:
            expected = baseline_cdd * cdd

        savings_kbtu = 0.0
        savings_pct = 0.0
        if expected:
            savings_kbtu = expected - total_kbtu
            savings_pct = savings_kbtu / expected * 100

        return MonthlyComparison(
            month=month,
            year=year,
            current_consumption_per_hdd=round_half_up(per_hdd, 4),
            baseline_consumption_per_hdd=round_half_up(baseline_hdd, 4) if baseline_hdd else 0.0,
            current_consumption_per_cdd=round_half_up(per_cdd, 4),
            baseline_consumption_per_cdd=round_half_up(baseline_cdd, 4) if baseline_cdd else 0.0,
            savings_percentage=round_half_up(savings_pct, 2),
            savings_kbtu=round_half_up(savings_kbtu, 2),
            electric_kwh=bill.electric_kwh,
            gas_therms=bill.gas_therms,
            fuel_oil_gallons=bill.fuel_oil_gallons,
            district_steam_mbtu=bill.district_steam_mbtu,
            total_kbtu=total_kbtu,
            hdd=hdd,
            cdd=cdd,
        )
