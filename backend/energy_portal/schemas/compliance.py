from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ComplianceStatus(BaseModel):
    building_id: int
    message_id: int
    is_compliant: bool
    hours_since_message: float
    has_upload: bool
    upload_time: Optional[datetime] = None
    hours_to_upload: Optional[float] = None


class ComplianceUploadCreate(BaseModel):
    upload_token: str
    uploaded_at: Optional[datetime] = None
    file_name: Optional[str] = None


class ComplianceUploadResponse(BaseModel):
    id: int
    message_id: int
    building_id: int
    file_name: Optional[str] = None
    uploaded_at: datetime
    compliance_window_hours: int
    is_compliant: bool

    class Config:
        from_attributes = True


class ComplianceRateResponse(BaseModel):
    building_id: int
    days: int
    compliance_rate: float
