from sqlalchemy import Column, Integer, String, DateTime, Float, Boolean, CheckConstraint
from sqlalchemy.orm import relationship
from energy_portal.database import Base, utcnow


class City(Base):
    """A monitored city and its alert thresholds."""
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    state = Column(String(50), nullable=True)

    # NWS grid descriptor
    nws_office = Column(String(10), nullable=False)
    nws_grid_x = Column(Integer, nullable=False)
    nws_grid_y = Column(Integer, nullable=False)

    alert_temp_delta = Column(Float, nullable=False, default=10.0)  # °F
    alert_window_hours = Column(Integer, nullable=False, default=6)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint('alert_temp_delta > 0', name='check_alert_temp_delta_positive'),
        CheckConstraint('alert_window_hours >= 1', name='check_alert_window_hours_min'),
    )

    # Relationships
    buildings = relationship("Building", back_populates="city")
    snapshots = relationship("TemperatureSnapshot", back_populates="city")
    alert_events = relationship("AlertEvent", back_populates="city")
    degree_days = relationship("DegreeDayRecord", back_populates="city")

    def __repr__(self):
        return f"<City(id={self.id}, name='{self.name}', office='{self.nws_office}')>"
