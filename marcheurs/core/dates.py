from datetime import date, datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo

from marcheurs.config import settings


def club_today() -> date:
    """Today's date where the club walks; hike dates carry no time of day."""
    return datetime.now(ZoneInfo(settings.club_timezone)).date()


def parse_day(value: Union[str, date, datetime, None]) -> Optional[date]:
    """Day part of a hike date ('2025-06-01', '2025-06-01T08:00:00+00:00', date, datetime)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None
