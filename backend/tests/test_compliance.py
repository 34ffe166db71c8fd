from datetime import timedelta

from energy_portal.models import Message, MessageKind
from energy_portal.services.compliance_service import ComplianceService

from conftest import make_building, make_message, make_recipient


def test_upload_within_window_is_compliant(db_session, building, recipient, now):
    message = make_message(db_session, building, recipient, sent_at=now, token="tok-on-time")
    service = ComplianceService(db_session)

    upload = service.record_upload("tok-on-time", uploaded_at=now + timedelta(minutes=90), file_name="thermostat.jpg")
    status = service.evaluate_compliance(message.id, now=now + timedelta(hours=5))

    assert upload.is_compliant is True
    assert upload.compliance_window_hours == 2
    assert status.is_compliant is True
    assert status.has_upload is True
    assert status.hours_to_upload == 1.5
    assert status.hours_since_message == 5.0


def test_late_upload_is_not_compliant(db_session, building, recipient, now):
    message = make_message(db_session, building, recipient, sent_at=now, token="tok-late")
    service = ComplianceService(db_session)

    upload = service.record_upload("tok-late", uploaded_at=now + timedelta(minutes=150))
    status = service.evaluate_compliance(message.id, now=now + timedelta(hours=3))

    assert upload.is_compliant is False
    assert status.is_compliant is False
    assert status.hours_to_upload == 2.5


def test_no_upload_is_not_compliant(db_session, building, recipient, now):
    message = make_message(db_session, building, recipient, sent_at=now)

    status = ComplianceService(db_session).evaluate_compliance(message.id, now=now + timedelta(minutes=30))

    assert status.is_compliant is False
    assert status.has_upload is False
    assert status.upload_time is None


def test_unsent_message_falls_back_to_created_at(db_session, building, recipient, now):
    message = make_message(db_session, building, recipient, sent_at=None, token="tok-queued",
                           delivered=False, created_at=now)
    service = ComplianceService(db_session)

    service.record_upload("tok-queued", uploaded_at=now + timedelta(hours=1))

    assert service.evaluate_compliance(message.id, now=now + timedelta(hours=1)).is_compliant is True


def test_unknown_message_and_token(db_session):
    service = ComplianceService(db_session)

    assert service.evaluate_compliance(12345) is None
    assert service.record_upload("no-such-token") is None


def test_rate_is_full_without_eligible_messages(db_session, building, now):
    assert ComplianceService(db_session).building_compliance_rate(building.id, now=now) == 100.0


def test_rate_counts_only_delivered_alerts_in_period(db_session, building, recipient, now):
    service = ComplianceService(db_session)
    make_message(db_session, building, recipient, sent_at=now - timedelta(days=2), token="tok-a")
    make_message(db_session, building, recipient, sent_at=now - timedelta(days=1), token="tok-b")
    make_message(db_session, building, recipient, sent_at=now - timedelta(days=1), kind=MessageKind.WARNING)
    make_message(db_session, building, recipient, sent_at=now - timedelta(days=60))
    service.record_upload("tok-a", uploaded_at=now - timedelta(days=2) + timedelta(minutes=30))

    assert service.building_compliance_rate(building.id, days=30, now=now) == 50.0


def test_recompute_upload_uses_stored_window(db_session, building, recipient, now):
    make_message(db_session, building, recipient, sent_at=now, token="tok-window")
    service = ComplianceService(db_session)
    upload = service.record_upload("tok-window", uploaded_at=now + timedelta(minutes=150))

    upload.compliance_window_hours = 3
    db_session.commit()

    assert service.recompute_upload(upload.id).is_compliant is True


def test_overdue_message_gets_one_warning(db_session, building, recipient, now):
    original = make_message(db_session, building, recipient, sent_at=now, token="tok-overdue")
    service = ComplianceService(db_session)

    assert service.send_compliance_warnings(now=now + timedelta(hours=3)) == 1
    assert service.send_compliance_warnings(now=now + timedelta(hours=4)) == 0

    warnings = db_session.query(Message).filter(Message.kind == MessageKind.WARNING).all()
    assert len(warnings) == 1
    assert warnings[0].recipient_id == recipient.id
    assert warnings[0].upload_token is None
    assert "3 hours ago" in warnings[0].content
    assert original.upload_token in warnings[0].content


def test_no_warning_inside_window_or_after_upload(db_session, building, recipient, now):
    make_message(db_session, building, recipient, sent_at=now, token="tok-answered")
    service = ComplianceService(db_session)

    assert service.send_compliance_warnings(now=now + timedelta(hours=1)) == 0

    service.record_upload("tok-answered", uploaded_at=now + timedelta(hours=1))
    assert service.send_compliance_warnings(now=now + timedelta(hours=3)) == 0


def test_inactive_recipient_is_not_warned(db_session, city, now):
    building = make_building(db_session, city, name="Elm Court")
    recipient = make_recipient(db_session, building, active=False)
    make_message(db_session, building, recipient, sent_at=now)

    assert ComplianceService(db_session).send_compliance_warnings(now=now + timedelta(hours=3)) == 0


def test_elapsed_time_does_not_change_compliance(db_session, building, recipient, now):
    message = make_message(db_session, building, recipient, sent_at=now, token="tok-elapsed")
    service = ComplianceService(db_session)
    service.record_upload("tok-elapsed", uploaded_at=now + timedelta(minutes=30))

    soon = service.evaluate_compliance(message.id, now=now + timedelta(hours=1))
    much_later = service.evaluate_compliance(message.id, now=now + timedelta(days=30))

    assert soon.is_compliant is True
    assert much_later.is_compliant is True
    assert much_later.hours_since_message == 720.0
