import re
from typing import Dict, Optional, Any
from sqlalchemy.orm import Session

from energy_portal.exceptions import TemplateError
from energy_portal.models import MessageTemplate, MessageKind

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")

_COMMON = frozenset({"city_name", "building_name", "upload_url"})

# Placeholders each message kind understands
PLACEHOLDERS: Dict[MessageKind, frozenset] = {
    MessageKind.ALERT: _COMMON | {"temperature_change", "time_window", "current_temp", "future_temp"},
    MessageKind.DAILY_SUMMARY: _COMMON | {"average_temp", "min_temp", "max_temp", "temperature_change"},
    MessageKind.WARNING: _COMMON | {"hours_ago"},
}

DEFAULT_TEMPLATES: Dict[MessageKind, str] = {
    MessageKind.ALERT: (
        "SUDDEN TEMPERATURE ALERT\n\n"
        "Temperature is expected to change by {{temperature_change}}°F "
        "in the next {{time_window}} hours "
        "({{current_temp}}°F -> {{future_temp}}°F).\n\n"
        "Please adjust heating/cooling settings for {{building_name}} accordingly.\n\n"
        "Upload compliance photo: {{upload_url}}"
    ),
    MessageKind.DAILY_SUMMARY: (
        "Daily Temperature Summary for {{city_name}}\n\n"
        "Average: {{average_temp}}°F\n"
        "High: {{max_temp}}°F\n"
        "Low: {{min_temp}}°F\n"
        "Change from yesterday: {{temperature_change}}°F\n\n"
        "Please confirm your settings adjustment.\n\n"
        "Upload compliance photo: {{upload_url}}"
    ),
    MessageKind.WARNING: (
        "COMPLIANCE WARNING\n\n"
        "You have not uploaded a compliance photo for the message sent {{hours_ago}} hours ago.\n\n"
        "Please upload your photo immediately. Failure to comply may void your guarantee.\n\n"
        "Upload link: {{upload_url}}"
    ),
}


def template_placeholders(template: str) -> set:
    return set(PLACEHOLDER_PATTERN.findall(template))


def validate_template(kind: MessageKind, template: str) -> None:
    unknown = template_placeholders(template) - PLACEHOLDERS[kind]
    if unknown:
        raise TemplateError(f"Unknown placeholder(s) for {kind.value} template: {', '.join(sorted(unknown))}")


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_template(kind: MessageKind, template: str, variables: Dict[str, Any]) -> str:
    """
    Substitute {{name}} placeholders. Both the template and the variables must
    stay within the kind's placeholder set; values left out render as "".
    """
    validate_template(kind, template)
    unknown = set(variables) - PLACEHOLDERS[kind]
    if unknown:
        raise TemplateError(f"Unknown variable(s) for {kind.value} message: {', '.join(sorted(unknown))}")

    return PLACEHOLDER_PATTERN.sub(lambda m: _format_value(variables.get(m.group(1))), template)


class TemplateService:
    def __init__(self, db: Session):
        self.db = db

    def get_template(self, city_id: int, kind: MessageKind) -> Optional[MessageTemplate]:
        return self.db.query(MessageTemplate).filter(
            MessageTemplate.city_id == city_id,
            MessageTemplate.kind == kind,
            MessageTemplate.is_active == True
        ).first()

    def template_for(self, city_id: int, kind: MessageKind) -> str:
        """City override if one is active, otherwise the built-in default."""
        template = self.get_template(city_id, kind)
        return template.content if template else DEFAULT_TEMPLATES[kind]

    def save_template(self, city_id: int, kind: MessageKind, content: str, subject: Optional[str] = None) -> MessageTemplate:
        validate_template(kind, content)

        existing = self.get_template(city_id, kind)
        if existing:
            existing.content = content
            existing.subject = subject
            template = existing
        else:
            template = MessageTemplate(city_id=city_id, kind=kind, content=content, subject=subject, is_active=True)
            self.db.add(template)

        self.db.commit()
        self.db.refresh(template)
        return template

    def deactivate_template(self, template_id: int) -> bool:
        template = self.db.query(MessageTemplate).filter(MessageTemplate.id == template_id).first()
        if not template:
            return False
        template.is_active = False
        self.db.commit()
        return True
