from fastapi import APIRouter, Depends
from marcheurs.core.dates import club_today
from marcheurs.core.dependencies import verify_webhook_secret
from marcheurs.core.mailer import BrevoMailer, get_mailer
from marcheurs.database.supabase_client import get_admin_supabase
from marcheurs.modules.notifications.schemas import WebhookEvent, DispatchResult
from marcheurs.modules.notifications.service import NotificationService
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def get_notification_service(
    supabase: Optional[Client] = Depends(get_admin_supabase),
    mailer: Optional[BrevoMailer] = Depends(get_mailer)
) -> NotificationService:
    return NotificationService(supabase, mailer)


@router.post("/notify", response_model=DispatchResult, dependencies=[Depends(verify_webhook_secret)])
async def notify(
    event: WebhookEvent,
    service: NotificationService = Depends(get_notification_service)
):
    """
    Database webhook for profiles, hikes and photos.

    Returns "skipped" when the change warrants no email (replayed event,
    hike published with a past date, no member to inform).
    """
    logger.info(f"Event received: {event.type} on {event.table}")
    return service.dispatch(event, club_today())
