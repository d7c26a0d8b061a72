import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from marcheurs.config import settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """The transactional email API refused the message or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _as_contacts(addresses: Iterable[str]) -> List[Dict[str, str]]:
    return [{"email": address} for address in addresses]


class BrevoMailer:
    def __init__(self, api_key: Optional[str] = None, sender_email: Optional[str] = None,
                 sender_name: Optional[str] = None, api_url: Optional[str] = None):
        self.api_key = (api_key if api_key is not None else settings.brevo_api_key or "").strip()
        self.sender_email = sender_email if sender_email is not None else settings.effective_sender_email
        if not self.api_key:
            raise ValueError("BREVO_API_KEY must be configured")
        if not self.sender_email:
            raise ValueError("SENDER_EMAIL or ADMIN_EMAIL must be configured")
        self.sender_name = sender_name or settings.sender_name
        self.api_url = api_url or settings.brevo_api_url

    def send(self, to: List[str], subject: str, html: str, bcc: Optional[List[str]] = None) -> Dict[str, Any]:
        """Send one HTML email and return the provider's JSON answer."""
        payload: Dict[str, Any] = {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": _as_contacts(to),
            "subject": subject,
            "htmlContent": html,
        }
        if bcc:
            payload["bcc"] = _as_contacts(bcc)

        headers = {
            "accept": "application/json",
            "api-key": self.api_key,
            "content-type": "application/json",
        }
        try:
            with httpx.Client(timeout=10.0) as client:
                response = client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Brevo request failed: %s", exc)
            raise EmailDeliveryError(f"Brevo unreachable: {exc}") from exc

        body = _response_body(response)
        if response.is_error:
            logger.error("Brevo Error (%s): %s", response.status_code, body)
            raise EmailDeliveryError("Brevo Error", status_code=response.status_code, body=body)

        logger.info("Email sent: %s (to=%d, bcc=%d)", subject, len(to), len(bcc or []))
        return body if isinstance(body, dict) else {"response": body}


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def get_mailer() -> Optional[BrevoMailer]:
    """Mailer built from settings, or None when the provider is not configured."""
    try:
        return BrevoMailer()
    except ValueError as e:
        logger.error(f"Mailer not configured: {e}")
        return None
