"""
TripKit Endpoints - listing, detail, free subscription and paid checkout
"""
from fastapi import APIRouter, Depends, Query, Request
from email_validator import validate_email, EmailNotValidError
from typing import Optional
import logging

from slctrips.config import settings
from slctrips.schemas.tripkit import (
    CheckoutRequest,
    SubscribeRequest,
    TripKitDestinationGroups,
    TripKitDetailResponse,
    TripKitListResponse,
)
from slctrips.services.tripkit_repository import TripKitRepository, get_tripkit_repository
from slctrips.utils.errors import BadRequest, ConfigurationError, NotFound

router = APIRouter()
logger = logging.getLogger(__name__)

DEFAULT_CONSENT_TEXT = "I agree to receive emails about this TripKit"


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def _require_valid_email(email: str) -> str:
    email = email.strip()
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise BadRequest("Invalid email address")
    return email.lower()


@router.get("", response_model=TripKitListResponse)
async def list_tripkits(
    status: str = Query("active"),
    featured: Optional[bool] = Query(None),
    tier: Optional[str] = Query(None),
    state: Optional[str] = Query(None, min_length=2, max_length=2, description="Two-letter state code"),
    repo: TripKitRepository = Depends(get_tripkit_repository),
):
    """
    List TripKits, featured first then by price
    """
    tripkits = await repo.list_tripkits(status=status, featured=featured, tier=tier, state=state)
    return TripKitListResponse(tripkits=tripkits, count=len(tripkits))


@router.post("/subscribe")
async def subscribe(
    body: SubscribeRequest,
    request: Request,
    repo: TripKitRepository = Depends(get_tripkit_repository),
):
    """
    Email capture for free TripKits. Consent must be given explicitly.
    """
    if not body.email or not body.tripkit_id:
        raise BadRequest("Email and tripkit_id are required")

    email = _require_valid_email(body.email)

    if not body.consent_given:
        raise BadRequest("Email consent is required")

    tripkit = await repo.get_by_id(body.tripkit_id)
    if tripkit is None:
        raise NotFound("TripKit not found")

    if tripkit.price and tripkit.price > 0:
        raise BadRequest("This TripKit requires purchase. Use /api/tripkits/checkout instead.")

    subscriber_id = await repo.upsert_subscriber(
        email=email,
        tripkit=tripkit,
        name=body.name.strip() if body.name and body.name.strip() else None,
        source=body.source,
        consent_text=body.consent_text or DEFAULT_CONSENT_TEXT,
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )

    return {
        "success": True,
        "message": "Successfully subscribed",
        "subscriber_id": str(subscriber_id),
        "tripkit": {"name": tripkit.name, "slug": tripkit.slug},
        "download_url": f"/tripkits/{tripkit.slug}/download",
        "next_steps": "Check your email for download link and welcome message",
    }


@router.post("/checkout")
async def checkout(
    body: CheckoutRequest,
    request: Request,
    repo: TripKitRepository = Depends(get_tripkit_repository),
):
    """
    Start a purchase for a paid TripKit by recording a pending order.
    Payment collection is not wired yet, so no real session URL is returned.
    """
    if not body.tripkit_id or not body.email:
        raise BadRequest("tripkit_id and email are required")

    email = _require_valid_email(body.email)

    tripkit = await repo.get_by_id(body.tripkit_id)
    if tripkit is None:
        raise NotFound("TripKit not found")

    if not tripkit.price:
        raise BadRequest("This TripKit is free. Use /api/tripkits/subscribe instead.")

    if not tripkit.stripe_price_id:
        raise ConfigurationError("Stripe not configured for this TripKit", status_code=500)

    order = await repo.create_order(
        tripkit=tripkit,
        email=email,
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )

    response = {
        "success": True,
        "message": "Checkout session created",
        "order_id": str(order.id),
        "checkout_url": "#",
    }
    if not settings.STRIPE_SECRET_KEY:
        response["note"] = "Stripe integration pending - set STRIPE_SECRET_KEY environment variable"
    return response


@router.get("/{slug}", response_model=TripKitDetailResponse)
async def get_tripkit(
    slug: str,
    repo: TripKitRepository = Depends(get_tripkit_repository),
):
    """
    TripKit with its destinations split into preview and full sets
    """
    tripkit = await repo.get_by_slug(slug)
    if tripkit is None:
        raise NotFound(f"TripKit '{slug}' not found")

    destinations = await repo.get_destinations(tripkit.id)
    preview = [d for d in destinations if d.is_preview]
    full = [d for d in destinations if not d.is_preview]

    return TripKitDetailResponse(
        **tripkit.model_dump(),
        destinations=TripKitDestinationGroups(
            all=destinations,
            preview=preview,
            full=full,
            total_count=len(destinations),
            preview_count=len(preview),
        ),
    )
