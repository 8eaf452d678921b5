"""
TripKit Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any, Union
from datetime import datetime
from uuid import UUID

from slctrips.schemas.destination import DestinationRecord


class TripKitSummary(BaseModel):
    """TripKit as shown in listings"""
    id: Union[UUID, str]
    name: str
    slug: str
    tagline: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = 0
    tier: Optional[str] = None
    status: Optional[str] = None
    featured: bool = False
    cover_image_url: Optional[str] = None
    collection_type: Optional[str] = None
    primary_theme: Optional[str] = None
    states_covered: List[str] = []
    destination_count: Optional[int] = 0
    features: List[str] = []
    target_audience: Optional[str] = None
    created_at: Optional[datetime] = None
    published_at: Optional[datetime] = None

    @field_validator("states_covered", "features", mode="before")
    @classmethod
    def _null_lists(cls, value):
        return value or []

    @field_validator("featured", mode="before")
    @classmethod
    def _null_flag(cls, value):
        return bool(value)

    class Config:
        from_attributes = True


class TripKitRecord(TripKitSummary):
    """Full TripKit row including guide content and payment ids"""
    content_sections: List[Any] = []
    stripe_product_id: Optional[str] = None
    stripe_price_id: Optional[str] = None

    @field_validator("content_sections", mode="before")
    @classmethod
    def _null_sections(cls, value):
        return value or []


class TripKitListResponse(BaseModel):
    tripkits: List[TripKitSummary]
    count: int


class TripKitDestinationEntry(DestinationRecord):
    """A destination as linked into a TripKit"""
    display_order: int = 0
    is_preview: bool = False
    tripkit_state_code: Optional[str] = None


class TripKitDestinationGroups(BaseModel):
    all: List[TripKitDestinationEntry]
    preview: List[TripKitDestinationEntry]
    full: List[TripKitDestinationEntry]
    total_count: int
    preview_count: int


class TripKitDetailResponse(TripKitRecord):
    destinations: TripKitDestinationGroups


class SubscribeRequest(BaseModel):
    """Email capture for a free TripKit; presence is checked by the endpoint"""
    email: Optional[str] = None
    name: Optional[str] = None
    tripkit_id: Optional[str] = None
    consent_given: bool = False
    consent_text: Optional[str] = None
    source: str = Field(default="tripkit_download", max_length=100)


class CheckoutRequest(BaseModel):
    tripkit_id: Optional[str] = None
    email: Optional[str] = None
