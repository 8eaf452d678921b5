"""
Seasonal ranking for the homepage "Today's Picks"
"""
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from slctrips.schemas.destination import DestinationRecord

OCTOBER = 10
BOOST_TAGS = ("haunted", "ghost", "halloween", "fall-colors")
DEFAULT_PICKS = 6


def is_october(now: datetime) -> bool:
    # Month of whatever clock the caller passed in; the API passes server-local time
    return now.month == OCTOBER


def seasonal_boost(tags: Optional[Iterable[str]], now: datetime) -> int:
    """
    Count of Halloween-season tags on a destination during October, else 0.
    """
    if not is_october(now):
        return 0
    lowered = {tag.lower() for tag in (tags or []) if tag}
    return sum(1 for tag in BOOST_TAGS if tag in lowered)


def featured_score(destination: DestinationRecord, now: datetime) -> float:
    return (destination.rating or 0) + seasonal_boost(destination.season_tags, now)


def pick_featured(
    destinations: Sequence[DestinationRecord],
    limit: int = DEFAULT_PICKS,
    now: Optional[datetime] = None,
) -> List[DestinationRecord]:
    """
    Rank the whole candidate list by rating plus seasonal boost and keep
    the top ``limit``. Equal scores keep their input order.

    ``now`` defaults to the server clock; pass it explicitly to pin a date.
    """
    if now is None:
        now = datetime.now()
    ranked = sorted(destinations, key=lambda d: featured_score(d, now), reverse=True)
    return ranked[:max(limit, 0)]
