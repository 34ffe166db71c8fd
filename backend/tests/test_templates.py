import pytest

from energy_portal.exceptions import DataIntegrityError, TemplateError
from energy_portal.models import MessageKind
from energy_portal.services.template_service import (
    DEFAULT_TEMPLATES, TemplateService, render_template, validate_template,
)


@pytest.mark.parametrize("kind", list(MessageKind))
def test_default_templates_are_valid(kind):
    validate_template(kind, DEFAULT_TEMPLATES[kind])


def test_render_substitutes_values():
    text = render_template(
        MessageKind.ALERT,
        "{{ building_name }}: {{current_temp}} -> {{future_temp}} ({{temperature_change}})",
        {"building_name": "Harbor Lofts", "current_temp": 48.0, "future_temp": 60.5, "temperature_change": 12.5},
    )

    assert text == "Harbor Lofts: 48 -> 60.5 (12.5)"


def test_missing_values_render_empty():
    assert render_template(MessageKind.WARNING, "Sent {{hours_ago}}h ago{{upload_url}}", {}) == "Sent h ago"


def test_unknown_placeholder_is_rejected():
    with pytest.raises(TemplateError):
        validate_template(MessageKind.WARNING, "Average {{average_temp}}")


def test_unknown_variable_is_rejected():
    with pytest.raises(TemplateError) as exc:
        render_template(MessageKind.DAILY_SUMMARY, "{{average_temp}}", {"average_temp": 50, "hours_ago": 3})

    assert "hours_ago" in str(exc.value)
    assert isinstance(exc.value, DataIntegrityError)


def test_city_override_replaces_default(db_session, city):
    service = TemplateService(db_session)
    assert service.template_for(city.id, MessageKind.ALERT) == DEFAULT_TEMPLATES[MessageKind.ALERT]

    saved = service.save_template(city.id, MessageKind.ALERT, "Swing of {{temperature_change}}F at {{building_name}}")
    service.save_template(city.id, MessageKind.ALERT, "Swing: {{temperature_change}}")

    assert service.template_for(city.id, MessageKind.ALERT) == "Swing: {{temperature_change}}"
    assert service.get_template(city.id, MessageKind.ALERT).id == saved.id

    assert service.deactivate_template(saved.id) is True
    assert service.template_for(city.id, MessageKind.ALERT) == DEFAULT_TEMPLATES[MessageKind.ALERT]


def test_invalid_override_is_not_saved(db_session, city):
    service = TemplateService(db_session)

    with pytest.raises(TemplateError):
        service.save_template(city.id, MessageKind.DAILY_SUMMARY, "{{future_temp}}")

    assert service.get_template(city.id, MessageKind.DAILY_SUMMARY) is None
