from pydantic import BaseModel
from datetime import datetime


class GridDescriptor(BaseModel):
    """NWS grid point: forecast office plus X/Y cell."""
    office: str
    grid_x: int
    grid_y: int


class ForecastPoint(BaseModel):
    time: datetime
    temp_f: float


class ForecastResponse(BaseModel):
    city_id: int
    office: str
    forecast: list[ForecastPoint]
