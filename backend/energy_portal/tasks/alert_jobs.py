import logging
import httpx

from energy_portal.config import settings
from energy_portal.database import SessionLocal
from energy_portal.notifications import get_transport
from energy_portal.providers import get_weather_provider
from energy_portal.services.alert_orchestrator import AlertOrchestrator
from energy_portal.services.compliance_service import ComplianceService
from energy_portal.services.message_service import MessageService

logger = logging.getLogger(__name__)


def _run_alert_cycle(daily_summary: bool):
    session = SessionLocal()
    try:
        with httpx.Client() as client:
            provider = get_weather_provider(settings.weather_provider, client=client)
            orchestrator = AlertOrchestrator(session, provider)
            if daily_summary:
                report = orchestrator.run_daily_summary_cycle()
            else:
                report = orchestrator.run_fluctuation_cycle()

        MessageService(session).send_pending_messages(get_transport(settings.notification_transport))
        return report
    except Exception as e:
        logger.error(f"Alert cycle job failed: {e}")
        session.rollback()
        return None
    finally:
        session.close()


def check_alerts_job():
    """
    Scheduled job: sudden-fluctuation check for every active city,
    followed by delivery of whatever was queued.
    """
    logger.info("Starting scheduled alert check")
    report = _run_alert_cycle(daily_summary=False)
    logger.info("Scheduled alert check completed")
    return report


def daily_summary_job():
    """Scheduled job: daily temperature summary for every active city."""
    logger.info("Starting scheduled daily summary")
    report = _run_alert_cycle(daily_summary=True)
    logger.info("Scheduled daily summary completed")
    return report


def compliance_warning_job():
    """Scheduled job: warn recipients who missed the compliance window."""
    logger.info("Starting scheduled compliance check")
    session = SessionLocal()
    try:
        message_service = MessageService(session)
        warned = ComplianceService(session, message_service).send_compliance_warnings()
        if warned:
            message_service.send_pending_messages(get_transport(settings.notification_transport))
        return warned
    except Exception as e:
        logger.error(f"Compliance check job failed: {e}")
        session.rollback()
        return None
    finally:
        session.close()


def send_pending_job():
    """Scheduled job: deliver anything still queued."""
    session = SessionLocal()
    try:
        return MessageService(session).send_pending_messages(get_transport(settings.notification_transport))
    except Exception as e:
        logger.error(f"Send pending job failed: {e}")
        session.rollback()
        return None
    finally:
        session.close()
