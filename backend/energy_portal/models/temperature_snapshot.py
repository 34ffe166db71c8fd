from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from energy_portal.database import Base, utcnow


class TemperatureSnapshot(Base):
    """
    Append-only record of the forecast seen for a city during one cycle.
    Rows are never updated; the daily summary reads them as "yesterday".
    """
    __tablename__ = "temperature_snapshots"

    id = Column(Integer, primary_key=True, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    recorded_at = Column(DateTime, nullable=False, index=True)
    temperature_f = Column(Float, nullable=False)
    forecast_data = Column(JSON, nullable=True)  # [{time, temp_f}, ...]
    created_at = Column(DateTime, default=utcnow)

    city = relationship("City", back_populates="snapshots")

    def __repr__(self):
        return f"<TemperatureSnapshot(id={self.id}, city_id={self.city_id}, temp={self.temperature_f})>"
