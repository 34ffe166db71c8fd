from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from energy_portal.database import Base, utcnow


class ComplianceUpload(Base):
    """
    Evidence uploaded in response to a message.
    is_compliant is always derived from uploaded_at - message sent time.
    """
    __tablename__ = "compliance_uploads"

    id = Column(Integer, primary_key=True, index=True)
    message_id = Column(Integer, ForeignKey("messages.id"), nullable=False, index=True)
    building_id = Column(Integer, ForeignKey("buildings.id"), nullable=False, index=True)
    file_name = Column(String(500), nullable=True)
    uploaded_at = Column(DateTime, default=utcnow, nullable=False)
    compliance_window_hours = Column(Integer, nullable=False)
    is_compliant = Column(Boolean, default=False, nullable=False)

    message = relationship("Message", back_populates="uploads")

    def __repr__(self):
        return f"<ComplianceUpload(id={self.id}, message_id={self.message_id}, compliant={self.is_compliant})>"
