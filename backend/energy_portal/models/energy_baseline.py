from sqlalchemy import Column, Integer, Float, Date, DateTime, ForeignKey, UniqueConstraint, Enum, JSON
import enum
from energy_portal.database import Base, utcnow


class BaselineType(str, enum.Enum):
    HEATING = "heating"
    COOLING = "cooling"


class EnergyBaseline(Base):
    """
    Multi-year average consumption per degree day for one building/month.
    Recomputing replaces the row for (building, month, type); there is no history.
    """
    __tablename__ = "energy_baselines"

    id = Column(Integer, primary_key=True, index=True)
    building_id = Column(Integer, ForeignKey("buildings.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    baseline_type = Column(Enum(BaselineType), nullable=False)
    avg_consumption_per_degree_day = Column(Float, nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    data_points = Column(Integer, nullable=False)
    calculated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('building_id', 'month', 'baseline_type', name='uq_baseline_building_month_type'),
    )

    def __repr__(self):
        return (
            f"<EnergyBaseline(building_id={self.building_id}, month={self.month}, "
            f"type='{self.baseline_type}', avg={self.avg_consumption_per_degree_day})>"
        )


class EnergyReport(Base):
    """Persisted monthly comparison for one building-month."""
    __tablename__ = "energy_reports"

    id = Column(Integer, primary_key=True, index=True)
    building_id = Column(Integer, ForeignKey("buildings.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    utility_bill_id = Column(Integer, ForeignKey("utility_bills.id"), nullable=True)
    degree_days_id = Column(Integer, ForeignKey("degree_days.id"), nullable=True)

    consumption_per_hdd = Column(Float, nullable=False, default=0.0)
    consumption_per_cdd = Column(Float, nullable=False, default=0.0)
    baseline_consumption_per_hdd = Column(Float, nullable=False, default=0.0)
    baseline_consumption_per_cdd = Column(Float, nullable=False, default=0.0)
    savings_percentage = Column(Float, nullable=False, default=0.0)
    savings_kbtu = Column(Float, nullable=False, default=0.0)
    report_data = Column(JSON, nullable=True)
    generated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('building_id', 'month', 'year', name='uq_report_building_month_year'),
    )

    def __repr__(self):
        return f"<EnergyReport(building_id={self.building_id}, {self.year}-{self.month:02d}, savings={self.savings_percentage}%)>"
