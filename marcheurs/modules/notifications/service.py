from supabase import Client
from marcheurs.config import settings
from marcheurs.core.mailer import BrevoMailer, EmailDeliveryError
from marcheurs.modules.notifications.content import (
    Lookups, build_email, DEFAULT_AUTHOR, DEFAULT_CREATOR, DEFAULT_HIKE_TITLE
)
from marcheurs.modules.notifications.decisions import Audience, Decision, decide
from marcheurs.modules.notifications.schemas import WebhookEvent, DispatchResult
from marcheurs.modules.profiles.service import format_display_name
from datetime import date
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import hashlib
import json
import logging
import time

logger = logging.getLogger(__name__)

# Notices already emailed, keyed by payload fingerprint and template (webhooks may be redelivered as-is)
_SENT_EVENTS: Dict[str, float] = {}
_SENT_EVENTS_TTL_SEC = 600
_SENT_EVENTS_MAX_SIZE = 1000


def event_fingerprint(event: WebhookEvent) -> str:
    payload = json.dumps(
        [event.table, event.type, event.record, event.old_record],
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(payload.encode()).hexdigest()


def _already_sent(fingerprint: str) -> bool:
    expiry = _SENT_EVENTS.get(fingerprint)
    if expiry is None:
        return False
    if time.monotonic() < expiry:
        return True
    del _SENT_EVENTS[fingerprint]
    return False


def _remember_sent(fingerprint: str):
    now = time.monotonic()
    if len(_SENT_EVENTS) >= _SENT_EVENTS_MAX_SIZE:
        for key in [k for k, expiry in _SENT_EVENTS.items() if expiry <= now]:
            del _SENT_EVENTS[key]
    if len(_SENT_EVENTS) < _SENT_EVENTS_MAX_SIZE:
        _SENT_EVENTS[fingerprint] = now + _SENT_EVENTS_TTL_SEC


def clear_sent_events():
    _SENT_EVENTS.clear()


class NotificationService:
    """Turns database change events into emails sent through Brevo."""

    def __init__(self, supabase: Optional[Client], mailer: Optional[BrevoMailer]):
        self.supabase = supabase
        self.mailer = mailer

    def _check_config(self):
        missing = []
        if self.mailer is None:
            missing.append("BREVO_API_KEY")
        if not settings.admin_email:
            missing.append("ADMIN_EMAIL")
        if self.supabase is None:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        if missing:
            logger.error(f"Notification config missing: {', '.join(missing)}")
            raise HTTPException(status_code=500, detail=f"Config Error: missing {', '.join(missing)}")

    def dispatch(self, event: WebhookEvent, today: date) -> DispatchResult:
        """Send every email the event warrants; a replayed event sends nothing."""
        self._check_config()
        decisions = decide(event, today)
        if not decisions:
            return DispatchResult(status="skipped", reason="No notification for this change")

        fingerprint = event_fingerprint(event)
        pending = [d for d in decisions if not _already_sent(f"{fingerprint}:{d.template}")]
        if not pending:
            logger.info(f"Duplicate delivery of {event.type} on {event.table}, skipped")
            return DispatchResult(status="skipped", reason="Duplicate delivery")

        lookups = self._lookups(event)
        sent = []
        for decision in pending:
            recipients = self._recipients(decision)
            if not recipients:
                logger.info(f"No recipients for {decision.template}, skipped")
                continue
            self._send(decision, lookups, recipients)
            _remember_sent(f"{fingerprint}:{decision.template}")
            sent.append(decision.template)

        if not sent:
            return DispatchResult(status="skipped", reason="No recipients")
        return DispatchResult(status="sent", notices=sent)

    def _send(self, decision: Decision, lookups: Lookups, recipients: List[str]):
        subject, html = build_email(decision, lookups)
        try:
            if decision.audience is Audience.MEMBERS:
                # members must not see each other's address
                self.mailer.send([self.mailer.sender_email], subject, html, bcc=recipients)
            else:
                self.mailer.send(recipients, subject, html)
        except EmailDeliveryError as e:
            raise HTTPException(status_code=500, detail={"error": str(e), "provider": e.body})

    def _recipients(self, decision: Decision) -> List[str]:
        if decision.audience is Audience.PROFILE_OWNER:
            return [decision.row["email"]] if decision.row.get("email") else []
        if decision.audience is Audience.MEMBERS:
            return self.get_member_emails()
        return self.get_admin_emails()

    def get_admin_emails(self) -> List[str]:
        """Emails of admin profiles, or ADMIN_EMAIL when none can be found."""
        try:
            result = self.supabase.table("profiles")\
                .select("email")\
                .eq("role", "admin")\
                .execute()
            emails = _unique_emails(result.data)
        except Exception as e:
            logger.warning(f"Could not load admin profiles, using ADMIN_EMAIL: {e}")
            emails = []
        return emails or [settings.admin_email]

    def get_member_emails(self) -> List[str]:
        """Emails of every approved member, deduplicated."""
        try:
            result = self.supabase.table("profiles")\
                .select("email")\
                .eq("approved", True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching members: {e}")
            raise HTTPException(status_code=500, detail=f"Error fetching members: {e}")
        return _unique_emails(result.data)

    def _lookups(self, event: WebhookEvent) -> Lookups:
        row = event.record if event.type != "DELETE" else event.old_record
        row = row or {}
        if event.table == "hikes":
            creator = self._find_row("profiles", row.get("created_by"))
            return Lookups(creator_name=format_display_name(creator, DEFAULT_CREATOR))
        if event.table == "photos":
            author = self._find_row("profiles", row.get("user_id"))
            hike = self._find_row("hikes", row.get("hike_id"))
            return Lookups(
                author_name=format_display_name(author, DEFAULT_AUTHOR),
                hike_title=(hike or {}).get("title") or DEFAULT_HIKE_TITLE,
            )
        return Lookups()

    def _find_row(self, table: str, row_id: Any) -> Optional[Dict[str, Any]]:
        if not row_id:
            return None
        try:
            result = self.supabase.table(table)\
                .select("*")\
                .eq("id", row_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.warning(f"Lookup of {table} {row_id} failed: {e}")
            return None
        return result.data[0] if result.data else None


def _unique_emails(rows: Optional[List[Dict[str, Any]]]) -> List[str]:
    emails = []
    for row in rows or []:
        email = (row.get("email") or "").strip()
        if email and email not in emails:
            emails.append(email)
    return emails
