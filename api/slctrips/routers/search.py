"""
Destination Search Endpoint
"""
from fastapi import APIRouter, Depends, Query
from datetime import datetime, timezone
from typing import Optional
import logging

from slctrips.config import settings
from slctrips.services.destination_repository import DestinationRepository, get_destination_repository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/search")
async def search_destinations(
    q: Optional[str] = Query(None, max_length=100, description="Name, category or subcategory text"),
    repo: DestinationRepository = Depends(get_destination_repository),
):
    """
    Search destinations by name, category or subcategory.
    A missing or blank query returns no results rather than an error.
    """
    query = (q or "").strip()
    destinations = []
    if query:
        destinations = await repo.search(query, limit=settings.SEARCH_RESULT_LIMIT)
        logger.debug(f"Search {query!r} matched {len(destinations)} destinations")

    return {
        "success": True,
        "destinations": destinations,
        "count": len(destinations),
        "query": query,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
