from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship
import enum
from energy_portal.database import Base, utcnow


class ContactPreference(str, enum.Enum):
    EMAIL = "email"
    SMS = "sms"
    BOTH = "both"


class Building(Base):
    __tablename__ = "buildings"

    id = Column(Integer, primary_key=True, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_paused = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    city = relationship("City", back_populates="buildings")
    recipients = relationship("Recipient", back_populates="building")
    utility_bills = relationship("UtilityBill", back_populates="building")

    @property
    def receives_alerts(self) -> bool:
        return bool(self.is_active and not self.is_paused)

    def __repr__(self):
        return f"<Building(id={self.id}, name='{self.name}', city_id={self.city_id})>"


class Recipient(Base):
    __tablename__ = "recipients"

    id = Column(Integer, primary_key=True, index=True)
    building_id = Column(Integer, ForeignKey("buildings.id"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    preference = Column(Enum(ContactPreference), default=ContactPreference.EMAIL, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    building = relationship("Building", back_populates="recipients")

    def __repr__(self):
        return f"<Recipient(id={self.id}, building_id={self.building_id}, preference='{self.preference}')>"
