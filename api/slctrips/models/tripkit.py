"""
TripKit Models - curated guides, their destinations, subscribers and orders
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, Numeric, ForeignKey, ARRAY, JSON, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid

from slctrips.utils.database import Base


class TripKit(Base):
    __tablename__ = "tripkits"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    tagline = Column(String(500))
    description = Column(Text)

    price = Column(Numeric(10, 2), default=0)  # 0 = free
    tier = Column(String(50))  # free, premium, ...
    status = Column(String(20), default="draft", index=True)  # draft, active, archived
    featured = Column(Boolean, default=False)

    cover_image_url = Column(Text)
    collection_type = Column(String(100))
    primary_theme = Column(String(100))
    states_covered = Column(ARRAY(String), default=list)  # ["UT", "ID"]
    destination_count = Column(Integer, default=0)
    features = Column(ARRAY(String), default=list)
    target_audience = Column(String(255))
    content_sections = Column(JSON, default=list)  # ordered guide sections

    stripe_product_id = Column(String(255))
    stripe_price_id = Column(String(255))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    published_at = Column(DateTime(timezone=True))

    def __repr__(self):
        return f"<TripKit {self.slug}>"


class TripKitDestination(Base):
    """Junction between a TripKit and its destinations"""
    __tablename__ = "tripkit_destinations"

    tripkit_id = Column(UUID(as_uuid=True), ForeignKey("tripkits.id", ondelete="CASCADE"), primary_key=True)
    destination_id = Column(UUID(as_uuid=True), ForeignKey("destinations.id", ondelete="CASCADE"), primary_key=True)
    display_order = Column(Integer, default=0)
    is_preview = Column(Boolean, default=False)  # visible without purchase
    state_code = Column(String(2))

    destination = relationship("Destination", lazy="joined")


class TripKitEmailSubscriber(Base):
    __tablename__ = "tripkit_email_subscribers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255))
    source = Column(String(100), default="tripkit_download")
    tripkit_id = Column(UUID(as_uuid=True), ForeignKey("tripkits.id", ondelete="SET NULL"))

    # GDPR consent record
    consent_given = Column(Boolean, nullable=False, default=False)
    consent_timestamp = Column(DateTime(timezone=True))
    consent_text = Column(Text)
    ip_address = Column(String(64))
    user_agent = Column(Text)

    status = Column(String(20), default="active")
    tags = Column(ARRAY(String), default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<TripKitEmailSubscriber {self.email}>"


class TripKitOrder(Base):
    __tablename__ = "tripkit_orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    stripe_session_id = Column(String(255), unique=True)
    tripkit_id = Column(UUID(as_uuid=True), ForeignKey("tripkits.id"), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    amount_cents = Column(Integer, nullable=False)
    currency = Column(String(3), default="usd")
    status = Column(String(20), default="pending")  # pending, paid, refunded
    ip_address = Column(String(64))
    user_agent = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<TripKitOrder {self.id} {self.status}>"
