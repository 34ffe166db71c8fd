from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from energy_portal.database import Base, utcnow


class UtilityBill(Base):
    __tablename__ = "utility_bills"

    id = Column(Integer, primary_key=True, index=True)
    building_id = Column(Integer, ForeignKey("buildings.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)

    # Fuel breakdown (optional per fuel)
    electric_kwh = Column(Float, nullable=True)
    gas_therms = Column(Float, nullable=True)
    fuel_oil_gallons = Column(Float, nullable=True)
    district_steam_mbtu = Column(Float, nullable=True)

    total_kbtu = Column(Float, nullable=False)
    uploaded_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('building_id', 'month', 'year', name='uq_utility_building_month_year'),
        CheckConstraint('month >= 1 AND month <= 12', name='check_utility_month'),
        CheckConstraint('total_kbtu >= 0', name='check_total_kbtu_non_negative'),
    )

    building = relationship("Building", back_populates="utility_bills")

    def __repr__(self):
        return f"<UtilityBill(building_id={self.building_id}, {self.year}-{self.month:02d}, kbtu={self.total_kbtu})>"


class DegreeDayRecord(Base):
    __tablename__ = "degree_days"

    id = Column(Integer, primary_key=True, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    heating_degree_days = Column(Float, nullable=False, default=0.0)
    cooling_degree_days = Column(Float, nullable=False, default=0.0)
    uploaded_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('city_id', 'month', 'year', name='uq_degree_days_city_month_year'),
        CheckConstraint('month >= 1 AND month <= 12', name='check_degree_days_month'),
    )

    city = relationship("City", back_populates="degree_days")

    def __repr__(self):
        return (
            f"<DegreeDayRecord(city_id={self.city_id}, {self.year}-{self.month:02d}, "
            f"hdd={self.heating_degree_days}, cdd={self.cooling_degree_days})>"
        )
