"""Which hikes a member sees, split into upcoming and archived."""

from datetime import date
from typing import Iterable, List, Optional, Tuple

from marcheurs.modules.hikes.schemas import HikeResponse, HikeSections

PUBLISHED_STATUSES = {"published", "Publiée"}
DRAFT_STATUS = "draft"


def is_published(status: Optional[str]) -> bool:
    return status in PUBLISHED_STATUSES


def visible_hikes(hikes: Iterable[HikeResponse], privileged: bool) -> List[HikeResponse]:
    """Drafts are only shown to admins and editors."""
    if privileged:
        return list(hikes)
    return [hike for hike in hikes if hike.status != DRAFT_STATUS]


def partition_hikes(hikes: Iterable[HikeResponse], today: date) -> Tuple[List[HikeResponse], List[HikeResponse]]:
    """Split by day: a hike dated today is still upcoming.

    Upcoming is soonest first with undated hikes last; archived is most
    recent first.
    """
    dated_upcoming, undated, archived = [], [], []
    for hike in hikes:
        if hike.date is None:
            undated.append(hike)
        elif hike.date >= today:
            dated_upcoming.append(hike)
        else:
            archived.append(hike)

    dated_upcoming.sort(key=lambda h: h.date)
    archived.sort(key=lambda h: h.date, reverse=True)
    return dated_upcoming + undated, archived


def section_hikes(hikes: Iterable[HikeResponse], today: date, privileged: bool = False) -> HikeSections:
    upcoming, archived = partition_hikes(visible_hikes(hikes, privileged), today)
    return HikeSections(upcoming=upcoming, archived=archived)
