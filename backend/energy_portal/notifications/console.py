import logging

from energy_portal.notifications.base import MessageTransport, DeliveryResult

logger = logging.getLogger(__name__)


class ConsoleTransport(MessageTransport):
    """Writes messages to the log instead of sending them. Default for development."""

    @classmethod
    def get_transport_type(cls) -> str:
        return "console"

    def send_email(self, to: str, subject: str, body: str) -> DeliveryResult:
        logger.info(f"[email] to={to} subject='{subject}' ({len(body)} chars)")
        return DeliveryResult(success=True)

    def send_sms(self, to: str, body: str) -> DeliveryResult:
        logger.info(f"[sms] to={to} ({len(body)} chars)")
        return DeliveryResult(success=True)
