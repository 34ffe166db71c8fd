from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class CityBase(BaseModel):
    name: str
    state: Optional[str] = None
    nws_office: str
    nws_grid_x: int
    nws_grid_y: int
    alert_temp_delta: float = Field(10.0, gt=0)
    alert_window_hours: int = Field(6, ge=1)
    is_active: bool = True


class CityCreate(CityBase):
    pass


class CityUpdate(BaseModel):
    name: Optional[str] = None
    state: Optional[str] = None
    nws_office: Optional[str] = None
    nws_grid_x: Optional[int] = None
    nws_grid_y: Optional[int] = None
    alert_temp_delta: Optional[float] = Field(None, gt=0)
    alert_window_hours: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class CityResponse(CityBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
