from energy_portal.notifications.base import MessageTransport, DeliveryResult, EMAIL_SUBJECTS
from energy_portal.notifications.console import ConsoleTransport

# Registry of available transports
TRANSPORT_REGISTRY = {
    "console": ConsoleTransport,
}


def get_transport(transport_type: str) -> MessageTransport:
    """Factory function to get the configured message transport."""
    if transport_type not in TRANSPORT_REGISTRY:
        raise ValueError(f"Unknown notification transport: {transport_type}")

    return TRANSPORT_REGISTRY[transport_type]()


__all__ = ["MessageTransport", "DeliveryResult", "ConsoleTransport", "EMAIL_SUBJECTS", "get_transport", "TRANSPORT_REGISTRY"]
