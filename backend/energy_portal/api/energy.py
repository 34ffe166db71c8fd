from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
import csv
import enum
import io
import logging

from energy_portal.database import get_db
from energy_portal.models import Building, City
from energy_portal.schemas import (
    BaselinePair, BaselineResponse, DegreeDayCreate, DegreeDayResponse,
    MonthlyComparison, ReportData, ReportResponse, UtilityBillCreate, UtilityBillResponse,
)
from energy_portal.services.energy_service import EnergyService
from energy_portal.services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/utility", response_model=UtilityBillResponse)
async def upload_utility(bill: UtilityBillCreate, db: Session = Depends(get_db)):
    """Insert or replace a building's monthly utility bill."""
    try:
        return EnergyService(db).upload_utility_bill(**bill.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/degree-days", response_model=DegreeDayResponse)
async def upload_degree_days(record: DegreeDayCreate, db: Session = Depends(get_db)):
    """Insert or replace a city's monthly heating/cooling degree days."""
    try:
        return EnergyService(db).upload_degree_days(**record.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/buildings/{building_id}/utility", response_model=List[UtilityBillResponse])
async def utility_history(building_id: int, limit: int = Query(36, le=120), db: Session = Depends(get_db)):
    return EnergyService(db).utility_history(building_id, limit)


@router.get("/cities/{city_id}/degree-days", response_model=List[DegreeDayResponse])
async def degree_day_history(city_id: int, limit: int = Query(36, le=120), db: Session = Depends(get_db)):
    return EnergyService(db).degree_day_history(city_id, limit)


@router.post("/buildings/{building_id}/baseline/{month}", response_model=BaselinePair)
async def calculate_baseline(building_id: int, month: int, db: Session = Depends(get_db)):
    """Recompute heating and cooling baselines for one calendar month."""
    try:
        result = EnergyService(db).compute_baseline(building_id, month)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return BaselinePair(
        heating=BaselineResponse.model_validate(result["heating"]) if result["heating"] else None,
        cooling=BaselineResponse.model_validate(result["cooling"]) if result["cooling"] else None,
    )


@router.get("/buildings/{building_id}/comparison/{year}/{month}", response_model=MonthlyComparison)
async def monthly_comparison(building_id: int, year: int, month: int, db: Session = Depends(get_db)):
    try:
        comparison = EnergyService(db).compute_monthly_comparison(building_id, month, year)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not comparison:
        raise HTTPException(status_code=404, detail="No utility or degree-day data for this month")
    return comparison


@router.post("/buildings/{building_id}/reports/{year}/{month}", response_model=ReportResponse)
async def generate_report(building_id: int, year: int, month: int, db: Session = Depends(get_db)):
    """Compute the monthly comparison and store it as a report record."""
    service = ReportService(db)
    try:
        report = service.generate_report(building_id, month, year)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not report:
        raise HTTPException(status_code=404, detail="No utility or degree-day data for this month")

    row = service.save_report(report)
    return ReportResponse(id=row.id, report=report)


@router.get("/buildings/{building_id}/reports/{year}/{month}", response_model=ReportData)
async def get_report(building_id: int, year: int, month: int, db: Session = Depends(get_db)):
    report = ReportService(db).load_report(building_id, month, year)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    return report


class ImportKind(str, enum.Enum):
    UTILITY = "utility"
    DEGREE_DAYS = "degree-days"


# Normalized header -> accepted spellings
IMPORT_COLUMNS = {
    ImportKind.UTILITY: {
        "required": {"month": ["month"], "year": ["year"], "total_kbtu": ["totalkbtu"]},
        "optional": {
            "electric_kwh": ["electrickwh"],
            "gas_therms": ["gastherms"],
            "fuel_oil_gallons": ["fueloilgallons"],
            "district_steam_mbtu": ["districtsteammbtu"],
        },
    },
    ImportKind.DEGREE_DAYS: {
        "required": {
            "month": ["month"],
            "year": ["year"],
            "heating_degree_days": ["hdd", "heatingdegreedays"],
            "cooling_degree_days": ["cdd", "coolingdegreedays"],
        },
        "optional": {},
    },
}


def normalize_field(field):
    return field.strip().lower().replace(" ", "").replace("_", "")


def parse_number(val):
    if val is None or not val.strip():
        return None
    return float(val.strip().replace(",", ""))


@router.post("/import/{kind}")
async def import_csv(
    kind: ImportKind,
    target_id: int = Form(...),
    file: UploadFile = File(...),
    uploaded_by: Optional[str] = Form(None),
    db: Session = Depends(get_db)
):
    """
    Bulk import monthly utility bills (target is a building) or degree days
    (target is a city) from a CSV file. Bad rows are reported and skipped.
    Utility imports recompute the baselines of every month they touch.
    """
    if kind == ImportKind.UTILITY:
        target = db.query(Building).filter(Building.id == target_id).first()
    else:
        target = db.query(City).filter(City.id == target_id).first()
    if not target:
        raise HTTPException(status_code=404, detail=f"{'Building' if kind == ImportKind.UTILITY else 'City'} not found")

    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed")

    content = await file.read()
    try:
        decoded = content.decode('utf-8-sig')
    except UnicodeDecodeError:
        decoded = content.decode('latin-1')

    reader = csv.DictReader(io.StringIO(decoded))
    if not reader.fieldnames:
        raise HTTPException(status_code=400, detail="CSV file is empty")

    field_map = {normalize_field(f): f for f in reader.fieldnames}
    columns = IMPORT_COLUMNS[kind]

    def resolve(spellings):
        return next((field_map[s] for s in spellings if s in field_map), None)

    required = {name: resolve(spellings) for name, spellings in columns["required"].items()}
    missing = [name for name, header in required.items() if header is None]
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required columns: {', '.join(missing)}. Found: {', '.join(reader.fieldnames)}"
        )
    optional = {name: resolve(spellings) for name, spellings in columns["optional"].items()}

    service = EnergyService(db)
    results = []
    errors = []
    months = set()

    for row_num, row in enumerate(reader, start=2):
        try:
            values = {name: parse_number(row.get(header)) for name, header in required.items()}
            blank = [name for name, value in values.items() if value is None]
            if blank:
                errors.append(f"Row {row_num}: Missing value for {', '.join(blank)}")
                continue
            month, year = int(values.pop("month")), int(values.pop("year"))

            if kind == ImportKind.UTILITY:
                extras = {name: parse_number(row.get(header)) for name, header in optional.items() if header}
                bill = service.upload_utility_bill(
                    target_id, month, year, uploaded_by=uploaded_by, **values, **extras
                )
                months.add(month)
                results.append({"row": row_num, "id": bill.id, "month": month, "year": year})
            else:
                record = service.upload_degree_days(target_id, month, year, uploaded_by=uploaded_by, **values)
                results.append({"row": row_num, "id": record.id, "month": month, "year": year})
        except ValueError as e:
            db.rollback()
            errors.append(f"Row {row_num}: {e}")

    for month in sorted(months):
        service.compute_baseline(target_id, month)

    logger.info(f"Imported {len(results)} {kind.value} rows for {target_id} ({len(errors)} errors)")
    return {"processed": len(results), "errors": errors, "results": results}
