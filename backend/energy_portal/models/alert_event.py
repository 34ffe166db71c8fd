from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, JSON, Enum
from sqlalchemy.orm import relationship
import enum
from energy_portal.database import Base, utcnow


class AlertKind(str, enum.Enum):
    SUDDEN_FLUCTUATION = "sudden_fluctuation"
    DAILY_SUMMARY = "daily_summary"


class AlertEvent(Base):
    __tablename__ = "alert_events"

    id = Column(Integer, primary_key=True, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    kind = Column(Enum(AlertKind), nullable=False)
    measurement_data = Column(JSON, nullable=False)
    threshold_snapshot = Column(JSON, nullable=False, default=dict)
    triggered_at = Column(DateTime, default=utcnow, index=True)

    # Flips to True once messages have been queued for this event
    processed = Column(Boolean, default=False, nullable=False)

    city = relationship("City", back_populates="alert_events")
    messages = relationship("Message", back_populates="alert_event")

    def __repr__(self):
        return f"<AlertEvent(id={self.id}, city_id={self.city_id}, kind='{self.kind}', processed={self.processed})>"
