"""
Destination Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union, Dict
from uuid import UUID


class DestinationRecord(BaseModel):
    """Logical destination shape used by discovery, ranking and the API"""
    id: Union[UUID, int, str]
    legacy_id: Optional[int] = None
    slug: Optional[str] = None
    name: str
    category: Optional[str] = None
    subcategory: Optional[str] = None
    drive_time_minutes: int = Field(default=0, ge=0)
    rating: Optional[float] = None
    season_tags: List[str] = []
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    county: Optional[str] = None
    region: Optional[str] = None
    description_short: Optional[str] = None
    description_long: Optional[str] = None
    image_url: Optional[str] = None
    featured: bool = False

    @field_validator("season_tags", mode="before")
    @classmethod
    def _null_tags(cls, value):
        return value or []

    @field_validator("drive_time_minutes", mode="before")
    @classmethod
    def _null_drive_time(cls, value):
        return 0 if value is None else value

    @field_validator("featured", mode="before")
    @classmethod
    def _null_flag(cls, value):
        return bool(value)

    class Config:
        from_attributes = True


class AffiliateGearResponse(BaseModel):
    """Schema for a recommended product"""
    id: Union[UUID, str]
    product_name: str
    product_description: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    tags: List[str] = []
    affiliate_link: str
    image_url: Optional[str] = None
    price: Optional[float] = None
    price_range: Optional[str] = None
    display_order: int = 0
    featured: bool = False

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value):
        return value or []

    @field_validator("display_order", mode="before")
    @classmethod
    def _null_order(cls, value):
        return value or 0

    @field_validator("featured", mode="before")
    @classmethod
    def _null_flag(cls, value):
        return bool(value)

    class Config:
        from_attributes = True


class DestinationDetailResponse(DestinationRecord):
    """Destination with gear and map/weather helpers"""
    destination_affiliate_gear: List[AffiliateGearResponse] = []
    maps_embed_url: Optional[str] = None
    maps_link: Optional[str] = None
    weather_api_coords: Optional[Dict[str, float]] = None


class Pagination(BaseModel):
    limit: int
    offset: int
    total: int


class DestinationListResponse(BaseModel):
    """Schema for paginated destination list"""
    destinations: List[DestinationRecord]
    pagination: Pagination


class DiscoveryFilters(BaseModel):
    """Echo of the filters a discovery request ran with"""
    query: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    drive: Optional[str] = None
    sort: str


class DiscoveryResponse(BaseModel):
    destinations: List[DestinationRecord]
    count: int
    filters: DiscoveryFilters


class CategoryListResponse(BaseModel):
    categories: List[str]
    subcategories: List[str]
    drive_bands: List[str]
