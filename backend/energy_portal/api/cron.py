from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session
from typing import Optional
import httpx

from energy_portal.config import settings
from energy_portal.database import get_db
from energy_portal.notifications import get_transport
from energy_portal.providers import get_weather_provider
from energy_portal.schemas import CycleReport
from energy_portal.services.alert_orchestrator import AlertOrchestrator
from energy_portal.services.compliance_service import ComplianceService
from energy_portal.services.message_service import MessageService

router = APIRouter()


def verify_cron_secret(x_cron_secret: Optional[str] = Header(None)):
    if not settings.cron_secret or x_cron_secret != settings.cron_secret:
        raise HTTPException(status_code=403, detail="Forbidden")


def _send_pending(db: Session) -> dict:
    return MessageService(db).send_pending_messages(get_transport(settings.notification_transport))


@router.post("/check-alerts", response_model=CycleReport, dependencies=[Depends(verify_cron_secret)])
def check_alerts(db: Session = Depends(get_db)):
    """Run the sudden-fluctuation cycle for all active cities, then deliver queued messages."""
    with httpx.Client() as client:
        provider = get_weather_provider(settings.weather_provider, client=client)
        report = AlertOrchestrator(db, provider).run_fluctuation_cycle()
    _send_pending(db)
    return report


@router.post("/daily-summary", response_model=CycleReport, dependencies=[Depends(verify_cron_secret)])
def daily_summary(db: Session = Depends(get_db)):
    """Run the daily summary cycle for all active cities, then deliver queued messages."""
    with httpx.Client() as client:
        provider = get_weather_provider(settings.weather_provider, client=client)
        report = AlertOrchestrator(db, provider).run_daily_summary_cycle()
    _send_pending(db)
    return report


@router.post("/check-compliance", dependencies=[Depends(verify_cron_secret)])
def check_compliance(db: Session = Depends(get_db)):
    """Queue warnings for overdue messages and deliver them."""
    message_service = MessageService(db)
    warned = ComplianceService(db, message_service).send_compliance_warnings()
    delivery = _send_pending(db) if warned else {"processed": 0, "sent": 0, "failed": 0}
    return {"warnings_sent": warned, **delivery}


@router.post("/send-pending", dependencies=[Depends(verify_cron_secret)])
def send_pending(db: Session = Depends(get_db)):
    return _send_pending(db)
