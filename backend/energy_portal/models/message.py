from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
import enum
from energy_portal.database import Base, utcnow


class MessageKind(str, enum.Enum):
    ALERT = "alert"
    DAILY_SUMMARY = "daily_summary"
    WARNING = "warning"


class Channel(str, enum.Enum):
    EMAIL = "email"
    SMS = "sms"


class Message(Base):
    """
    A message dispatched to one recipient over one channel.
    Delivery is attempted once; a failed message is never retried in place.
    """
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    alert_event_id = Column(Integer, ForeignKey("alert_events.id"), nullable=True, index=True)
    building_id = Column(Integer, ForeignKey("buildings.id"), nullable=False, index=True)
    recipient_id = Column(Integer, ForeignKey("recipients.id"), nullable=False, index=True)
    kind = Column(Enum(MessageKind), nullable=False, index=True)
    channel = Column(Enum(Channel), nullable=False)
    content = Column(Text, nullable=False)
    upload_token = Column(String(64), nullable=True, unique=True, index=True)

    # Delivery
    sent_at = Column(DateTime, nullable=True, index=True)
    delivered = Column(Boolean, default=False, nullable=False)
    delivery_status = Column(String(50), default="pending")  # pending, delivered, failed, error
    created_at = Column(DateTime, default=utcnow, index=True)

    alert_event = relationship("AlertEvent", back_populates="messages")
    building = relationship("Building")
    recipient = relationship("Recipient")
    uploads = relationship("ComplianceUpload", back_populates="message")

    @property
    def dispatched_at(self):
        """When the message went out, falling back to when it was queued."""
        return self.sent_at or self.created_at

    def __repr__(self):
        return f"<Message(id={self.id}, building_id={self.building_id}, kind='{self.kind}', delivered={self.delivered})>"


class MessageTemplate(Base):
    __tablename__ = "message_templates"

    id = Column(Integer, primary_key=True, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    kind = Column(Enum(MessageKind), nullable=False)
    subject = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<MessageTemplate(id={self.id}, city_id={self.city_id}, kind='{self.kind}')>"
