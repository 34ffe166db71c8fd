from pydantic import BaseModel
from datetime import datetime
from typing import List


class AlertCheckResult(BaseModel):
    should_alert: bool
    temperature_change: float
    time_window: int
    current_temp: float
    future_temp: float
    timestamp: datetime  # forecast time at the end of the window


class DailySummary(BaseModel):
    average_temp: float
    min_temp: int
    max_temp: int
    temperature_change: float


class CycleFailure(BaseModel):
    city_id: int
    error: str


class CycleReport(BaseModel):
    cities_checked: int = 0
    alerts_fired: int = 0
    alert_ids: List[int] = []
    failures: List[CycleFailure] = []
    timestamp: datetime
