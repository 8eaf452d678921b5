"""
Destination Models
"""
from sqlalchemy import Column, String, Text, Integer, Float, Boolean, DateTime, Numeric, ForeignKey, ARRAY, func
from sqlalchemy.dialects.postgresql import UUID
import uuid

from slctrips.utils.database import Base


class Destination(Base):
    __tablename__ = "destinations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    legacy_id = Column(Integer, unique=True, nullable=True, index=True)  # serial id from the first schema
    slug = Column(String(255), unique=True, nullable=True, index=True)
    name = Column(String(255), nullable=False)

    # Free-text classification, not an enum
    category = Column(String(100), index=True)
    subcategory = Column(String(100))

    drive_time_minutes = Column("drive_time", Integer, nullable=False, default=0)  # from Salt Lake City
    rating = Column(Float)
    season_tags = Column(ARRAY(String), default=list)  # ["haunted", "fall-colors", ...]

    latitude = Column(Float)
    longitude = Column(Float)
    county = Column(String(100))
    region = Column(String(100))

    description_short = Column(Text)
    description_long = Column(Text)
    image_url = Column(Text)
    featured = Column(Boolean, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Destination {self.name} ({self.slug})>"


class AffiliateGear(Base):
    """Recommended products linked to a destination"""
    __tablename__ = "destination_affiliate_gear"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    destination_id = Column(UUID(as_uuid=True), ForeignKey("destinations.id", ondelete="CASCADE"), nullable=False, index=True)

    product_name = Column(String(255), nullable=False)
    product_description = Column(Text)
    category = Column(String(100))
    brand = Column(String(100))
    tags = Column(ARRAY(String), default=list)

    affiliate_link = Column(Text, nullable=False)
    image_url = Column(Text)
    price = Column(Numeric(10, 2))
    price_range = Column(String(50))

    display_order = Column(Integer, default=0)
    featured = Column(Boolean, default=False)
    active = Column(Boolean, default=True)

    def __repr__(self):
        return f"<AffiliateGear {self.product_name}>"
