from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional

from energy_portal.models.energy_baseline import BaselineType


class UtilityBillCreate(BaseModel):
    building_id: int
    month: int = Field(..., ge=1, le=12)
    year: int
    electric_kwh: Optional[float] = None
    gas_therms: Optional[float] = None
    fuel_oil_gallons: Optional[float] = None
    district_steam_mbtu: Optional[float] = None
    total_kbtu: float = Field(..., ge=0)
    uploaded_by: Optional[str] = None


class UtilityBillResponse(UtilityBillCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DegreeDayCreate(BaseModel):
    city_id: int
    month: int = Field(..., ge=1, le=12)
    year: int
    heating_degree_days: float = Field(..., ge=0)
    cooling_degree_days: float = Field(..., ge=0)
    uploaded_by: Optional[str] = None


class DegreeDayResponse(DegreeDayCreate):
    id: int

    class Config:
        from_attributes = True


class BaselineResponse(BaseModel):
    building_id: int
    month: int
    baseline_type: BaselineType
    avg_consumption_per_degree_day: float
    period_start: date
    period_end: date
    data_points: int

    class Config:
        from_attributes = True


class BaselinePair(BaseModel):
    heating: Optional[BaselineResponse] = None
    cooling: Optional[BaselineResponse] = None


class MonthlyComparison(BaseModel):
    month: int
    year: int
    current_consumption_per_hdd: float
    baseline_consumption_per_hdd: float
    current_consumption_per_cdd: float
    baseline_consumption_per_cdd: float
    savings_percentage: float
    savings_kbtu: float
    electric_kwh: Optional[float] = None
    gas_therms: Optional[float] = None
    fuel_oil_gallons: Optional[float] = None
    district_steam_mbtu: Optional[float] = None
    total_kbtu: float
    hdd: float
    cdd: float


class BaselinePeriodInfo(BaseModel):
    period_start: date
    period_end: date
    data_points: int


class ReportData(BaseModel):
    building_id: int
    building_name: str
    month: int
    year: int
    comparison: MonthlyComparison
    heating_baseline: Optional[BaselinePeriodInfo] = None
    cooling_baseline: Optional[BaselinePeriodInfo] = None


class ReportResponse(BaseModel):
    id: int
    report: ReportData
