from datetime import datetime, timedelta
from typing import Dict, List, Optional
import hashlib
import logging
import uuid
from sqlalchemy.orm import Session

from energy_portal.config import settings
from energy_portal.database import utcnow
from energy_portal.exceptions import DataIntegrityError
from energy_portal.models import (
    AlertEvent, AlertKind, Building, Channel, ContactPreference, Message, MessageKind, Recipient,
)
from energy_portal.notifications.base import MessageTransport
from energy_portal.services.template_service import TemplateService, PLACEHOLDERS, render_template

logger = logging.getLogger(__name__)

ALERT_MESSAGE_KINDS = {
    AlertKind.SUDDEN_FLUCTUATION: MessageKind.ALERT,
    AlertKind.DAILY_SUMMARY: MessageKind.DAILY_SUMMARY,
}


def generate_upload_token(building_id: int) -> str:
    payload = f"{uuid.uuid4()}:{building_id}:{utcnow().timestamp()}"
    return hashlib.sha256(payload.encode()).hexdigest()[:32]


def upload_url(token: str) -> str:
    return f"{settings.app_url.rstrip('/')}/upload?token={token}"


def channels_for(recipient: Recipient) -> List[Channel]:
    """Channels a recipient can actually be reached on, given their preference."""
    channels = []
    if recipient.preference in (ContactPreference.EMAIL, ContactPreference.BOTH) and recipient.email:
        channels.append(Channel.EMAIL)
    if recipient.preference in (ContactPreference.SMS, ContactPreference.BOTH) and recipient.phone:
        channels.append(Channel.SMS)
    return channels


class MessageService:
    def __init__(self, db: Session, template_service: Optional[TemplateService] = None):
        self.db = db
        self.templates = template_service or TemplateService(db)

    def create_messages_from_alert(self, event: AlertEvent) -> List[int]:
        """
        Fan an alert event out to every active recipient of every active,
        non-paused building in the event's city. Messages are flushed, not committed.
        """
        kind = ALERT_MESSAGE_KINDS[event.kind]
        city = event.city
        if city is None:
            raise DataIntegrityError(f"Alert event {event.id} references missing city {event.city_id}")

        template = self.templates.template_for(city.id, kind)
        measurements = {k: v for k, v in (event.measurement_data or {}).items() if k in PLACEHOLDERS[kind]}

        buildings = self.db.query(Building).filter(
            Building.city_id == city.id
        ).order_by(Building.id).all()

        message_ids = []
        for building in buildings:
            if not building.receives_alerts:
                continue
            for recipient in building.recipients:
                if not recipient.is_active:
                    continue
                for channel in channels_for(recipient):
                    token = generate_upload_token(building.id)
                    variables = {
                        **measurements,
                        "city_name": city.name,
                        "building_name": building.name,
                        "upload_url": upload_url(token),
                    }
                    message = Message(
                        alert_event_id=event.id,
                        building_id=building.id,
                        recipient_id=recipient.id,
                        kind=kind,
                        channel=channel,
                        content=render_template(kind, template, variables),
                        upload_token=token,
                        delivered=False,
                        delivery_status="pending",
                    )
                    self.db.add(message)
                    self.db.flush()
                    message_ids.append(message.id)

        logger.info(f"Queued {len(message_ids)} {kind.value} message(s) for alert event {event.id}")
        return message_ids

    def queue_warning(self, original: Message, hours_ago: float, now: Optional[datetime] = None) -> List[int]:
        """Queue a compliance warning to the recipient of an unanswered message."""
        recipient = original.recipient
        building = original.building
        if recipient is None or building is None:
            raise DataIntegrityError(f"Message {original.id} references a missing recipient or building")
        if not recipient.is_active:
            return []

        template = self.templates.template_for(building.city_id, MessageKind.WARNING)
        content = render_template(MessageKind.WARNING, template, {
            "hours_ago": round(hours_ago, 1),
            "city_name": building.city.name if building.city else "",
            "building_name": building.name,
            "upload_url": upload_url(original.upload_token) if original.upload_token else "",
        })

        message_ids = []
        for channel in channels_for(recipient):
            warning = Message(
                building_id=building.id,
                recipient_id=recipient.id,
                kind=MessageKind.WARNING,
                channel=channel,
                content=content,
                delivered=False,
                delivery_status="pending",
                created_at=now or utcnow(),
            )
            self.db.add(warning)
            self.db.flush()
            message_ids.append(warning.id)
        return message_ids

    def pending_messages(self, now: Optional[datetime] = None) -> List[Message]:
        now = now or utcnow()
        cutoff = now - timedelta(hours=settings.pending_message_max_age_hours)
        return self.db.query(Message).filter(
            Message.delivered == False,
            Message.delivery_status == "pending",
            Message.created_at > cutoff
        ).order_by(Message.created_at, Message.id).limit(settings.pending_message_batch_size).all()

    def send_pending_messages(self, transport: MessageTransport, now: Optional[datetime] = None) -> Dict[str, int]:
        """
        Attempt delivery of queued messages once each. The outcome is terminal
        for the message: failures are recorded, not retried.
        """
        now = now or utcnow()
        messages = self.pending_messages(now)
        sent = 0
        failed = 0

        for msg in messages:
            msg.sent_at = now
            try:
                if msg.recipient is None:
                    raise DataIntegrityError(f"Message {msg.id} has no recipient")
                result = transport.deliver(msg, msg.recipient)
                msg.delivered = result.success
                msg.delivery_status = "delivered" if result.success else "failed"
                if not result.success:
                    logger.warning(f"Delivery failed for message {msg.id}: {result.error}")
            except Exception as e:
                logger.error(f"Error processing message {msg.id}: {e}")
                msg.delivered = False
                msg.delivery_status = "error"

            if msg.delivered:
                sent += 1
            else:
                failed += 1

        self.db.commit()
        logger.info(f"Send pending: {len(messages)} processed, {sent} sent, {failed} failed")
        return {"processed": len(messages), "sent": sent, "failed": failed}
