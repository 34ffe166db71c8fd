from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from energy_portal.models.building import ContactPreference


class BuildingBase(BaseModel):
    name: str
    address: Optional[str] = None
    is_active: bool = True


class BuildingCreate(BuildingBase):
    city_id: int


class BuildingUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None


class BuildingPause(BaseModel):
    is_paused: bool = True


class BuildingResponse(BuildingBase):
    id: int
    city_id: int
    is_paused: bool
    receives_alerts: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RecipientBase(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    preference: ContactPreference = ContactPreference.EMAIL
    is_active: bool = True


class RecipientCreate(RecipientBase):
    pass


class RecipientUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    preference: Optional[ContactPreference] = None
    is_active: Optional[bool] = None


class RecipientResponse(RecipientBase):
    id: int
    building_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
