"""
Today's Picks - the homepage featured destinations
"""
from fastapi import APIRouter, Depends
from datetime import datetime, timezone
import logging

from slctrips.config import settings
from slctrips.services.destination_repository import DestinationRepository, get_destination_repository
from slctrips.services.seasonal import pick_featured

router = APIRouter()
logger = logging.getLogger(__name__)


def get_now() -> datetime:
    """Clock used for seasonal ranking (server-local time)"""
    return datetime.now()


@router.get("/todays-picks")
async def get_todays_picks(
    repo: DestinationRepository = Depends(get_destination_repository),
    now: datetime = Depends(get_now),
):
    """
    Featured destinations ranked by rating plus seasonal boost.
    Falls back to the whole catalog when nothing is flagged featured.
    """
    limit = settings.FEATURED_PICKS_LIMIT
    candidates = await repo.fetch_featured()
    if not candidates:
        logger.info("No featured destinations, ranking the full catalog")
        candidates = await repo.fetch_all()

    picks = pick_featured(candidates, limit=limit, now=now)
    return {
        "success": True,
        "picks": picks,
        "count": len(picks),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
