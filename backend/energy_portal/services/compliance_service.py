from datetime import datetime, timedelta
from typing import Optional
import logging
from sqlalchemy import and_, exists
from sqlalchemy.orm import Session, aliased

from energy_portal.config import settings
from energy_portal.database import as_utc_naive, utcnow
from energy_portal.rounding import round_half_up
from energy_portal.models import ComplianceUpload, Message, MessageKind
from energy_portal.schemas.compliance import ComplianceStatus
from energy_portal.services.message_service import MessageService

logger = logging.getLogger(__name__)

# Messages that ask the recipient for a compliance photo
ACTIONABLE_KINDS = (MessageKind.ALERT, MessageKind.DAILY_SUMMARY)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def upload_is_compliant(sent_at: datetime, uploaded_at: datetime, window_hours: float) -> bool:
    """An upload counts when it arrives no later than window_hours after the message."""
    return hours_between(sent_at, uploaded_at) <= window_hours


class ComplianceService:
    def __init__(self, db: Session, message_service: Optional[MessageService] = None):
        self.db = db
        self.messages = message_service or MessageService(db)

    def first_upload(self, message_id: int) -> Optional[ComplianceUpload]:
        return self.db.query(ComplianceUpload).filter(
            ComplianceUpload.message_id == message_id
        ).order_by(ComplianceUpload.uploaded_at).first()

    def evaluate_compliance(self, message_id: int, now: Optional[datetime] = None) -> Optional[ComplianceStatus]:
        """
        Compliance of one dispatched message. Without an upload the message is
        non-compliant; with one, compliance depends on how long after the
        message the upload arrived. `hours_since_message` is informational only
        and never decides compliance.
        """
        message = self.db.query(Message).filter(Message.id == message_id).first()
        if not message:
            return None

        now = now or utcnow()
        sent_at = message.dispatched_at
        upload = self.first_upload(message.id)

        hours_to_upload = None
        is_compliant = False
        if upload:
            hours_to_upload = hours_between(sent_at, upload.uploaded_at)
            is_compliant = upload_is_compliant(sent_at, upload.uploaded_at, settings.compliance_window_hours)

        return ComplianceStatus(
            building_id=message.building_id,
            message_id=message.id,
            is_compliant=is_compliant,
            hours_since_message=round_half_up(hours_between(sent_at, now), 1),
            has_upload=upload is not None,
            upload_time=upload.uploaded_at if upload else None,
            hours_to_upload=round_half_up(hours_to_upload, 2) if hours_to_upload is not None else None,
        )

    def building_compliance_rate(self, building_id: int, days: Optional[int] = None, now: Optional[datetime] = None) -> float:
        """
        Percentage of delivered alert/summary messages in the trailing period that
        were answered in time. A building with nothing to answer is 100% compliant.
        """
        now = now or utcnow()
        days = days if days is not None else settings.compliance_rate_days
        start = now - timedelta(days=days)

        message_ids = [m.id for m in self.db.query(Message.id).filter(
            Message.building_id == building_id,
            Message.kind.in_(ACTIONABLE_KINDS),
            Message.delivered == True,
            Message.sent_at >= start
        ).all()]

        if not message_ids:
            return 100.0

        compliant = 0
        for message_id in message_ids:
            status = self.evaluate_compliance(message_id, now)
            if status and status.is_compliant:
                compliant += 1

        return round_half_up(compliant / len(message_ids) * 100, 1)

    def record_upload(
        self,
        upload_token: str,
        uploaded_at: Optional[datetime] = None,
        file_name: Optional[str] = None,
    ) -> Optional[ComplianceUpload]:
        """Store an upload against the message carrying this token."""
        message = self.db.query(Message).filter(Message.upload_token == upload_token).first()
        if not message:
            return None

        uploaded_at = as_utc_naive(uploaded_at) if uploaded_at else utcnow()
        window = settings.compliance_window_hours
        upload = ComplianceUpload(
            message_id=message.id,
            building_id=message.building_id,
            file_name=file_name,
            uploaded_at=uploaded_at,
            compliance_window_hours=window,
            is_compliant=upload_is_compliant(message.dispatched_at, uploaded_at, window),
        )
        self.db.add(upload)
        self.db.commit()
        self.db.refresh(upload)
        logger.info(f"Recorded upload {upload.id} for message {message.id} (compliant={upload.is_compliant})")
        return upload

    def recompute_upload(self, upload_id: int) -> Optional[ComplianceUpload]:
        """Re-derive is_compliant from the stored timestamps and window."""
        upload = self.db.query(ComplianceUpload).filter(ComplianceUpload.id == upload_id).first()
        if not upload or not upload.message:
            return None

        upload.is_compliant = upload_is_compliant(
            upload.message.dispatched_at, upload.uploaded_at, upload.compliance_window_hours
        )
        self.db.commit()
        return upload

    def overdue_messages(self, now: Optional[datetime] = None):
        """
        Delivered alert/summary messages past the window with no upload, skipping
        buildings that already got a warning after the message went out.
        """
        now = now or utcnow()
        deadline = now - timedelta(hours=settings.compliance_window_hours)
        warning = aliased(Message)

        return self.db.query(Message).filter(
            Message.delivered == True,
            Message.kind.in_(ACTIONABLE_KINDS),
            Message.sent_at < deadline,
            ~exists().where(ComplianceUpload.message_id == Message.id),
            ~exists().where(and_(
                warning.building_id == Message.building_id,
                warning.kind == MessageKind.WARNING,
                warning.created_at > Message.sent_at,
            ))
        ).order_by(Message.sent_at).all()

    def send_compliance_warnings(self, now: Optional[datetime] = None) -> int:
        """Queue a warning for each overdue message. Returns the number of messages warned about."""
        now = now or utcnow()
        warned = 0
        for message in self.overdue_messages(now):
            if self.messages.queue_warning(message, hours_between(message.sent_at, now), now=now):
                warned += 1

        self.db.commit()
        if warned:
            logger.info(f"Queued compliance warnings for {warned} overdue message(s)")
        return warned
