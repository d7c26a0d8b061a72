from datetime import date

import pytest

from marcheurs.modules.notifications.decisions import Audience, Transition, classify_hike_change, decide
from marcheurs.modules.notifications.schemas import WebhookEvent

TODAY = date(2025, 6, 1)


def event(table, type, record=None, old_record=None):
    return WebhookEvent(table=table, type=type, record=record, old_record=old_record, schema="public")


def transitions(evt):
    return [d.transition for d in decide(evt, TODAY)]


def test_profile_completion_goes_to_admins():
    decisions = decide(event(
        "profiles", "UPDATE",
        record={"id": "p1", "email": "a@example.org", "is_profile_completed": True},
        old_record={"id": "p1", "email": "a@example.org", "is_profile_completed": False},
    ), TODAY)

    assert [(d.transition, d.audience) for d in decisions] == [(Transition.PROFILE_COMPLETED, Audience.ADMINS)]


def test_profile_already_completed_is_ignored():
    assert transitions(event(
        "profiles", "UPDATE",
        record={"id": "p1", "is_profile_completed": True, "city": "Aix"},
        old_record={"id": "p1", "is_profile_completed": True, "city": "Rousset"},
    )) == []


def test_profile_approval_goes_to_owner():
    decisions = decide(event(
        "profiles", "UPDATE",
        record={"id": "p1", "email": "a@example.org", "approved": True},
        old_record={"id": "p1", "email": "a@example.org", "approved": False},
    ), TODAY)

    assert [(d.transition, d.audience) for d in decisions] == [(Transition.PROFILE_APPROVED, Audience.PROFILE_OWNER)]


def test_approval_without_email_is_ignored():
    assert transitions(event(
        "profiles", "UPDATE",
        record={"id": "p1", "approved": True},
        old_record={"id": "p1", "approved": False},
    )) == []


def test_one_update_can_complete_and_approve():
    assert transitions(event(
        "profiles", "UPDATE",
        record={"id": "p1", "email": "a@example.org", "approved": True, "is_profile_completed": True},
        old_record={"id": "p1", "email": "a@example.org", "approved": False, "is_profile_completed": False},
    )) == [Transition.PROFILE_COMPLETED, Transition.PROFILE_APPROVED]


def test_profile_insert_is_ignored():
    assert transitions(event("profiles", "INSERT", record={"id": "p1", "is_profile_completed": True})) == []


@pytest.mark.parametrize("old, new, expected", [
    (None, "published", Transition.HIKE_NEWLY_PUBLISHED),
    ("draft", "published", Transition.HIKE_NEWLY_PUBLISHED),
    ("draft", "Publiée", Transition.HIKE_NEWLY_PUBLISHED),
    ("published", "draft", Transition.HIKE_UNPUBLISHED),
    ("published", "published", Transition.HIKE_PUBLISHED_EDITED),
    ("Publiée", "published", Transition.HIKE_PUBLISHED_EDITED),
    ("draft", "draft", Transition.HIKE_DRAFT_EDITED),
    (None, "draft", Transition.HIKE_DRAFT_EDITED),
    ("planned", "planned", Transition.HIKE_DRAFT_EDITED),
])
def test_classify_hike_change(old, new, expected):
    old_record = {"status": old} if old else None
    assert classify_hike_change(old_record, {"status": new}) is expected


def test_past_hike_publication_is_not_broadcast():
    assert transitions(event(
        "hikes", "UPDATE",
        record={"id": "h1", "title": "Bimont", "status": "published", "date": "2025-01-01"},
        old_record={"id": "h1", "title": "Bimont", "status": "draft", "date": "2025-01-01"},
    )) == []


def test_hike_published_for_today_is_broadcast():
    decisions = decide(event(
        "hikes", "UPDATE",
        record={"id": "h1", "title": "Bimont", "status": "published", "date": "2025-06-01"},
        old_record={"id": "h1", "title": "Bimont", "status": "draft", "date": "2025-06-01"},
    ), TODAY)

    assert [d.audience for d in decisions] == [Audience.MEMBERS]


def test_undated_hike_publication_is_broadcast():
    assert transitions(event(
        "hikes", "INSERT", record={"id": "h1", "title": "Bimont", "status": "published"},
    )) == [Transition.HIKE_NEWLY_PUBLISHED]


def test_hike_delete_uses_old_record():
    decisions = decide(event("hikes", "DELETE", old_record={"id": "h1", "title": "Bimont"}), TODAY)

    assert decisions[0].transition is Transition.HIKE_DELETED
    assert decisions[0].row["title"] == "Bimont"


def test_photo_events():
    assert transitions(event("photos", "INSERT", record={"id": "x"})) == [Transition.PHOTO_ADDED]
    assert transitions(event("photos", "DELETE", old_record={"id": "x"})) == [Transition.PHOTO_DELETED]
    assert transitions(event("photos", "UPDATE", record={"id": "x"}, old_record={"id": "x"})) == []


def test_unknown_table_is_ignored():
    assert transitions(event("registrations", "INSERT", record={"id": "r"})) == []
