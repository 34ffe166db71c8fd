from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from energy_portal.models import Channel, Message, MessageKind, Recipient

EMAIL_SUBJECTS = {
    MessageKind.ALERT: "Temperature Alert - Action Required",
    MessageKind.WARNING: "Compliance Warning",
    MessageKind.DAILY_SUMMARY: "Daily Temperature Summary",
}


@dataclass
class DeliveryResult:
    success: bool
    error: Optional[str] = None


class MessageTransport(ABC):
    """Delivers a queued message over its channel. Extend this to add email/SMS providers."""

    @abstractmethod
    def send_email(self, to: str, subject: str, body: str) -> DeliveryResult:
        pass

    @abstractmethod
    def send_sms(self, to: str, body: str) -> DeliveryResult:
        pass

    @classmethod
    @abstractmethod
    def get_transport_type(cls) -> str:
        """Return the unique identifier for this transport."""
        pass

    def deliver(self, message: Message, recipient: Recipient) -> DeliveryResult:
        """Route a message to the channel it was queued for."""
        if message.channel == Channel.SMS:
            if not recipient.phone:
                return DeliveryResult(success=False, error="Recipient has no phone number")
            return self.send_sms(recipient.phone, message.content)

        if not recipient.email:
            return DeliveryResult(success=False, error="Recipient has no email address")
        subject = EMAIL_SUBJECTS.get(message.kind, "Building Energy Notice")
        return self.send_email(recipient.email, subject, message.content)
