from energy_portal.database import Base
from energy_portal.models.city import City
from energy_portal.models.building import Building, Recipient, ContactPreference
from energy_portal.models.temperature_snapshot import TemperatureSnapshot
from energy_portal.models.alert_event import AlertEvent, AlertKind
from energy_portal.models.message import Message, MessageTemplate, MessageKind, Channel
from energy_portal.models.compliance_upload import ComplianceUpload
from energy_portal.models.utility import UtilityBill, DegreeDayRecord
from energy_portal.models.energy_baseline import EnergyBaseline, EnergyReport, BaselineType

__all__ = [
    "Base",
    "City",
    "Building",
    "Recipient",
    "ContactPreference",
    "TemperatureSnapshot",
    "AlertEvent",
    "AlertKind",
    "Message",
    "MessageTemplate",
    "MessageKind",
    "Channel",
    "ComplianceUpload",
    "UtilityBill",
    "DegreeDayRecord",
    "EnergyBaseline",
    "EnergyReport",
    "BaselineType",
]
