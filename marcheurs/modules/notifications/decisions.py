"""
Decision table for database change notifications.

``decide`` looks at one webhook event and returns the emails it warrants, as
(transition -> audience, template) rows of DECISION_TABLE. It performs no I/O:
recipients and wording are resolved later by the service and content modules.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from marcheurs.core.dates import parse_day
from marcheurs.modules.hikes.sectioning import is_published
from marcheurs.modules.notifications.schemas import WebhookEvent

logger = logging.getLogger(__name__)


class Transition(str, Enum):
    PROFILE_COMPLETED = "profile_completed"
    PROFILE_APPROVED = "profile_approved"
    HIKE_DELETED = "hike_deleted"
    HIKE_NEWLY_PUBLISHED = "hike_newly_published"
    HIKE_UNPUBLISHED = "hike_unpublished"
    HIKE_PUBLISHED_EDITED = "hike_published_edited"
    HIKE_DRAFT_EDITED = "hike_draft_edited"
    PHOTO_ADDED = "photo_added"
    PHOTO_DELETED = "photo_deleted"


class Audience(str, Enum):
    ADMINS = "admins"            # every profile with role = admin
    PROFILE_OWNER = "owner"      # the email of the profile row itself
    MEMBERS = "members"          # every approved profile, in blind copy


@dataclass(frozen=True)
class Rule:
    audience: Audience
    template: str


DECISION_TABLE: Dict[Transition, Rule] = {
    Transition.PROFILE_COMPLETED: Rule(Audience.ADMINS, "profile_completed"),
    Transition.PROFILE_APPROVED: Rule(Audience.PROFILE_OWNER, "account_approved"),
    Transition.HIKE_DELETED: Rule(Audience.ADMINS, "hike_deleted"),
    Transition.HIKE_NEWLY_PUBLISHED: Rule(Audience.MEMBERS, "hike_published"),
    Transition.HIKE_UNPUBLISHED: Rule(Audience.ADMINS, "hike_unpublished"),
    Transition.HIKE_PUBLISHED_EDITED: Rule(Audience.ADMINS, "hike_updated"),
    Transition.HIKE_DRAFT_EDITED: Rule(Audience.ADMINS, "hike_draft_updated"),
    Transition.PHOTO_ADDED: Rule(Audience.ADMINS, "photo_added"),
    Transition.PHOTO_DELETED: Rule(Audience.ADMINS, "photo_deleted"),
}


@dataclass(frozen=True)
class Decision:
    transition: Transition
    audience: Audience
    template: str
    row: Dict[str, Any]
    event_type: str


def _became_true(old: Optional[Dict[str, Any]], new: Dict[str, Any], field: str) -> bool:
    return new.get(field) is True and (old or {}).get(field) is not True


def profile_transitions(event: WebhookEvent) -> List[Transition]:
    if event.type != "UPDATE" or not event.record:
        return []
    found = []
    if _became_true(event.old_record, event.record, "is_profile_completed"):
        found.append(Transition.PROFILE_COMPLETED)
    if _became_true(event.old_record, event.record, "approved"):
        if event.record.get("email"):
            found.append(Transition.PROFILE_APPROVED)
        else:
            logger.warning(f"Approved profile {event.record.get('id')} has no email")
    return found


def classify_hike_change(old: Optional[Dict[str, Any]], new: Dict[str, Any]) -> Transition:
    """One of the four INSERT/UPDATE cases, by status before and after."""
    was_published = bool(old) and is_published(old.get("status"))
    now_published = is_published(new.get("status"))
    if now_published and not was_published:
        return Transition.HIKE_NEWLY_PUBLISHED
    if was_published and not now_published:
        return Transition.HIKE_UNPUBLISHED
    if now_published:
        return Transition.HIKE_PUBLISHED_EDITED
    return Transition.HIKE_DRAFT_EDITED


def hike_transitions(event: WebhookEvent, today: date) -> List[Transition]:
    if event.type == "DELETE":
        return [Transition.HIKE_DELETED]
    if not event.record:
        return []
    transition = classify_hike_change(event.old_record, event.record)
    if transition is Transition.HIKE_NEWLY_PUBLISHED:
        hike_day = parse_day(event.record.get("date")) or today
        if hike_day < today:
            logger.info(
                f"Skipped broadcast: hike {event.record.get('title')} is published "
                f"but its date ({hike_day.isoformat()}) is in the past."
            )
            return []
    return [transition]


def photo_transitions(event: WebhookEvent) -> List[Transition]:
    if event.type == "INSERT" and event.record:
        return [Transition.PHOTO_ADDED]
    if event.type == "DELETE":
        return [Transition.PHOTO_DELETED]
    return []


def transitions_for(event: WebhookEvent, today: date) -> List[Transition]:
    if event.table == "profiles":
        return profile_transitions(event)
    if event.table == "hikes":
        return hike_transitions(event, today)
    if event.table == "photos":
        return photo_transitions(event)
    return []


def decide(event: WebhookEvent, today: date) -> List[Decision]:
    """Emails warranted by this event; an empty list means skip."""
    row = event.record if event.type != "DELETE" else (event.old_record or {})
    decisions = []
    for transition in transitions_for(event, today):
        rule = DECISION_TABLE[transition]
        decisions.append(Decision(transition, rule.audience, rule.template, row or {}, event.type))
    return decisions
