"""
Affiliate Link & Click Tracking Endpoints
"""
from fastapi import APIRouter, Query
from prometheus_client import Counter
from pydantic import BaseModel, Field
from typing import Optional
import logging

from slctrips.services.affiliates import NETWORKS, amazon_link, awin_link, viator_link
from slctrips.utils.errors import BadRequest

router = APIRouter()
logger = logging.getLogger(__name__)

AFFILIATE_CLICKS = Counter(
    'affiliate_clicks_total',
    'Outbound affiliate link clicks',
    ['network']
)


class AffiliateClick(BaseModel):
    """A click on an outbound partner link"""
    network: str = Field(..., min_length=1, max_length=50)
    destination_id: Optional[str] = None
    product: Optional[str] = None
    url: Optional[str] = None

    class Config:
        extra = "allow"


@router.get("/link")
async def build_affiliate_link(
    network: str = Query(..., description="amazon, awin or viator"),
    target: Optional[str] = Query(None, description="ASIN for amazon, destination URL otherwise"),
    mid: Optional[str] = Query(None, description="AWIN merchant id"),
):
    """
    Build a tagged partner link
    """
    network = network.lower()
    if network not in NETWORKS:
        raise BadRequest(f"Unknown affiliate network '{network}'")
    if not target:
        raise BadRequest("target is required")

    if network == "amazon":
        url = amazon_link(target)
    elif network == "awin":
        if not mid:
            raise BadRequest("mid is required for awin links")
        url = awin_link(mid, target)
    else:
        url = viator_link(target)

    return {"network": network, "url": url}


@router.post("/track")
async def track_click(click: AffiliateClick):
    """Record an outbound affiliate click"""
    network = click.network.lower()
    AFFILIATE_CLICKS.labels(network=network if network in NETWORKS else "other").inc()
    logger.info(f"affiliate-track {click.model_dump(exclude_none=True)}")
    return {"ok": True}
