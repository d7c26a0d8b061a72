from fastapi import APIRouter, Depends, HTTPException, Request
from marcheurs.core.mailer import BrevoMailer, get_mailer
from marcheurs.modules.auth_email.schemas import AuthEmailHook
from marcheurs.modules.auth_email.service import AuthEmailService
from pydantic import ValidationError
from typing import Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hooks", tags=["hooks"])


def get_auth_email_service(mailer: Optional[BrevoMailer] = Depends(get_mailer)) -> AuthEmailService:
    return AuthEmailService(mailer)


@router.post("/auth-email")
async def send_auth_email(
    request: Request,
    service: AuthEmailService = Depends(get_auth_email_service)
):
    """Render and send a Supabase Auth email with the club's branding"""
    try:
        hook = AuthEmailHook.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        logger.error(f"Invalid auth email payload: {e}")
        raise HTTPException(status_code=400, detail="Invalid payload")
    return service.send(hook)
