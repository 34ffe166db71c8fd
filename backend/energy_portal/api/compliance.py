from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from energy_portal.config import settings
from energy_portal.database import get_db
from energy_portal.schemas import (
    ComplianceRateResponse, ComplianceStatus, ComplianceUploadCreate, ComplianceUploadResponse,
)
from energy_portal.services.compliance_service import ComplianceService

router = APIRouter()


@router.get("/messages/{message_id}", response_model=ComplianceStatus)
async def message_compliance(message_id: int, db: Session = Depends(get_db)):
    status = ComplianceService(db).evaluate_compliance(message_id)
    if not status:
        raise HTTPException(status_code=404, detail="Message not found")
    return status


@router.get("/buildings/{building_id}/rate", response_model=ComplianceRateResponse)
async def building_rate(
    building_id: int,
    days: Optional[int] = Query(None, ge=1, le=365),
    db: Session = Depends(get_db)
):
    days = days or settings.compliance_rate_days
    rate = ComplianceService(db).building_compliance_rate(building_id, days)
    return ComplianceRateResponse(building_id=building_id, days=days, compliance_rate=rate)


@router.post("/uploads", response_model=ComplianceUploadResponse)
async def record_upload(upload: ComplianceUploadCreate, db: Session = Depends(get_db)):
    """Record that a compliance photo was uploaded for the message carrying this token."""
    row = ComplianceService(db).record_upload(upload.upload_token, upload.uploaded_at, upload.file_name)
    if not row:
        raise HTTPException(status_code=404, detail="Unknown upload token")
    return row
