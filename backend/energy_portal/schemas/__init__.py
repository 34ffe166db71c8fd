from energy_portal.schemas.forecast import GridDescriptor, ForecastPoint, ForecastResponse
from energy_portal.schemas.alert import AlertCheckResult, DailySummary, CycleReport, CycleFailure
from energy_portal.schemas.city import CityCreate, CityUpdate, CityResponse
from energy_portal.schemas.building import (
    BuildingCreate, BuildingUpdate, BuildingPause, BuildingResponse, RecipientCreate, RecipientUpdate, RecipientResponse,
)
from energy_portal.schemas.energy import (
    UtilityBillCreate, UtilityBillResponse, DegreeDayCreate, DegreeDayResponse,
    BaselineResponse, BaselinePair, MonthlyComparison, BaselinePeriodInfo, ReportData, ReportResponse,
)
from energy_portal.schemas.compliance import (
    ComplianceStatus, ComplianceUploadCreate, ComplianceUploadResponse, ComplianceRateResponse,
)
from energy_portal.schemas.template import MessageTemplateUpdate, MessageTemplateResponse

__all__ = [
    "GridDescriptor", "ForecastPoint", "ForecastResponse",
    "AlertCheckResult", "DailySummary", "CycleReport", "CycleFailure",
    "CityCreate", "CityUpdate", "CityResponse",
    "BuildingCreate", "BuildingUpdate", "BuildingPause", "BuildingResponse",
    "RecipientCreate", "RecipientUpdate", "RecipientResponse",
    "UtilityBillCreate", "UtilityBillResponse", "DegreeDayCreate", "DegreeDayResponse",
    "BaselineResponse", "BaselinePair", "MonthlyComparison", "BaselinePeriodInfo", "ReportData", "ReportResponse",
    "ComplianceStatus", "ComplianceUploadCreate", "ComplianceUploadResponse", "ComplianceRateResponse",
    "MessageTemplateUpdate", "MessageTemplateResponse",
]
