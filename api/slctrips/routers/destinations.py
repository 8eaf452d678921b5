"""
Destination Listing, Discovery & Detail Endpoints
"""
from fastapi import APIRouter, Depends, Query
from datetime import datetime, timezone
from typing import List, Optional
import logging

from slctrips.config import settings
from slctrips.schemas.destination import (
    AffiliateGearResponse,
    CategoryListResponse,
    DestinationDetailResponse,
    DestinationListResponse,
    DestinationRecord,
    DiscoveryFilters,
    DiscoveryResponse,
    Pagination,
)
from slctrips.services.destination_repository import DestinationRepository, get_destination_repository
from slctrips.services.discovery import (
    ALL,
    DRIVE_BANDS,
    DiscoveryQuery,
    discover,
    distinct_values,
    resolve_sort_key,
)
from slctrips.utils.errors import BadRequest, NotFound

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=DestinationListResponse)
async def list_destinations(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    category: Optional[str] = Query(None, description="Exact category"),
    search: Optional[str] = Query(None, description="Substring of the destination name"),
    repo: DestinationRepository = Depends(get_destination_repository),
):
    """
    List destinations alphabetically with limit/offset paging
    """
    destinations, total = await repo.fetch_page(limit=limit, offset=offset, category=category, search=search)
    logger.info(f"Listed {len(destinations)} of {total} destinations")
    return DestinationListResponse(
        destinations=destinations,
        pagination=Pagination(limit=limit, offset=offset, total=total),
    )


@router.get("/count")
async def count_destinations(repo: DestinationRepository = Depends(get_destination_repository)):
    """Total number of destinations"""
    count = await repo.count()
    return {
        "success": True,
        "count": count,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(repo: DestinationRepository = Depends(get_destination_repository)):
    """
    Category, subcategory and drive-band choices for the filter selectors.
    Categories are whatever the stored rows currently use.
    """
    destinations = await repo.fetch_all()
    return CategoryListResponse(
        categories=distinct_values(destinations, "category"),
        subcategories=distinct_values(destinations, "subcategory"),
        drive_bands=[band.label for band in DRIVE_BANDS],
    )


@router.get("/discover", response_model=DiscoveryResponse)
async def discover_destinations(
    q: Optional[str] = Query(None, description="Search name, category and descriptions"),
    category: Optional[str] = Query(None, description="Exact category, or 'All'"),
    subcategory: Optional[str] = Query(None, description="Exact subcategory, or 'All'"),
    drive: Optional[str] = Query(None, description="Drive band label, e.g. '90 minutes'"),
    sort: Optional[str] = Query(None, description="name_asc, rating_desc or drive_time_asc"),
    page_size: int = Query(settings.DISCOVERY_PAGE_SIZE, ge=1, le=200),
    repo: DestinationRepository = Depends(get_destination_repository),
):
    """
    Filter and sort the full destination catalog for the destinations page.
    Unknown category, drive or sort values are ignored rather than rejected.
    """
    sort_key = resolve_sort_key(sort)
    criteria = DiscoveryQuery(
        query=q,
        category=category,
        subcategory=subcategory,
        band=drive,
        sort=sort_key,
    )
    if category and category != ALL:
        candidates = await repo.fetch_by_category(category)
    else:
        candidates = await repo.fetch_all()
    results = discover(candidates, criteria, page_size=page_size)

    return DiscoveryResponse(
        destinations=results,
        count=len(results),
        filters=DiscoveryFilters(
            query=q,
            category=category,
            subcategory=subcategory,
            drive=criteria.drive_band.label if criteria.drive_band else None,
            sort=sort_key.value,
        ),
    )


@router.get("/gear", response_model=List[AffiliateGearResponse])
async def get_destination_gear(
    id: Optional[str] = Query(None, description="Destination id, slug or name"),
    repo: DestinationRepository = Depends(get_destination_repository),
):
    """
    Active affiliate gear for a destination (at most four items).
    No gear is an empty list, not an error.
    """
    if not id:
        raise BadRequest("Destination ID is required")

    destination = await repo.fetch_by_id(id)
    if destination is None:
        return []
    return await repo.fetch_gear(destination.id, limit=settings.GEAR_ITEMS_LIMIT)


def _maps_fields(destination: DestinationRecord) -> dict:
    if destination.latitude is None or destination.longitude is None:
        return {"maps_embed_url": None, "maps_link": None, "weather_api_coords": None}

    coords = f"{destination.latitude},{destination.longitude}"
    embed_url = None
    if settings.GOOGLE_MAPS_API_KEY:
        embed_url = (
            "https://www.google.com/maps/embed/v1/place"
            f"?key={settings.GOOGLE_MAPS_API_KEY}&q={coords}&zoom=14"
        )
    return {
        "maps_embed_url": embed_url,
        "maps_link": f"https://www.google.com/maps/search/?api=1&query={coords}",
        "weather_api_coords": {"lat": destination.latitude, "lon": destination.longitude},
    }


@router.get("/{slug}/details", response_model=DestinationDetailResponse)
async def get_destination_details(
    slug: str,
    repo: DestinationRepository = Depends(get_destination_repository),
):
    """
    Destination page payload: record, gear in display order, map links
    """
    found = await repo.fetch_detail(slug)
    if found is None:
        raise NotFound("Destination not found", slug=slug)

    destination, gear = found
    gear = sorted(gear, key=lambda item: item.display_order)
    return DestinationDetailResponse(
        **destination.model_dump(),
        destination_affiliate_gear=gear,
        **_maps_fields(destination),
    )


@router.get("/{id}", response_model=DestinationRecord)
async def get_destination(
    id: str,
    repo: DestinationRepository = Depends(get_destination_repository),
):
    """
    Resolve a destination by uuid, legacy numeric id, slug, then name
    """
    destination = await repo.fetch_by_id(id)
    if destination is None:
        logger.warning(f"Destination not found: {id}")
        raise NotFound("Destination not found", id=id)

    logger.info(f"Found destination: {destination.name}")
    return destination
