from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from energy_portal.models.message import MessageKind


class MessageTemplateUpdate(BaseModel):
    subject: Optional[str] = None
    content: str


class MessageTemplateResponse(BaseModel):
    id: int
    city_id: int
    kind: MessageKind
    subject: Optional[str] = None
    content: str
    is_active: bool
    updated_at: datetime

    class Config:
        from_attributes = True
