"""
TripKit Data Access - guides, linked destinations, subscribers and orders
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy import select
from datetime import datetime, timezone
from typing import List, Optional
import logging
import uuid

from slctrips.models.tripkit import TripKit, TripKitDestination, TripKitEmailSubscriber, TripKitOrder
from slctrips.schemas.destination import DestinationRecord
from slctrips.schemas.tripkit import TripKitRecord, TripKitDestinationEntry
from slctrips.utils.database import get_db

logger = logging.getLogger(__name__)


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class TripKitRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_tripkits(
        self,
        status: str = "active",
        featured: Optional[bool] = None,
        tier: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[TripKitRecord]:
        """Featured kits first, then cheapest first"""
        stmt = select(TripKit).where(TripKit.status == status)
        if featured is not None:
            stmt = stmt.where(TripKit.featured.is_(featured))
        if tier:
            stmt = stmt.where(TripKit.tier == tier)
        if state:
            stmt = stmt.where(TripKit.states_covered.contains([state.upper()]))
        stmt = stmt.order_by(TripKit.featured.desc(), TripKit.price.asc())

        result = await self.db.execute(stmt)
        return [TripKitRecord.model_validate(kit) for kit in result.scalars().all()]

    async def get_by_slug(self, slug: str) -> Optional[TripKitRecord]:
        result = await self.db.execute(select(TripKit).where(TripKit.slug == slug))
        kit = result.scalar_one_or_none()
        return TripKitRecord.model_validate(kit) if kit else None

    async def get_by_id(self, tripkit_id) -> Optional[TripKitRecord]:
        key = _as_uuid(tripkit_id)
        if key is None:
            return None
        result = await self.db.execute(select(TripKit).where(TripKit.id == key))
        kit = result.scalar_one_or_none()
        return TripKitRecord.model_validate(kit) if kit else None

    async def get_destinations(self, tripkit_id) -> List[TripKitDestinationEntry]:
        """Linked destinations in display order"""
        result = await self.db.execute(
            select(TripKitDestination)
            .where(TripKitDestination.tripkit_id == tripkit_id)
            .order_by(TripKitDestination.display_order.asc())
        )
        entries = []
        for link in result.unique().scalars().all():
            if link.destination is None:
                continue
            record = DestinationRecord.model_validate(link.destination)
            entries.append(TripKitDestinationEntry(
                **record.model_dump(),
                display_order=link.display_order or 0,
                is_preview=bool(link.is_preview),
                tripkit_state_code=link.state_code,
            ))
        return entries

    async def upsert_subscriber(
        self,
        email: str,
        tripkit: TripKitRecord,
        name: Optional[str],
        source: str,
        consent_text: str,
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> uuid.UUID:
        """Insert a subscriber or refresh the existing row with the same email"""
        values = {
            "email": email,
            "name": name,
            "source": source,
            "tripkit_id": tripkit.id,
            "consent_given": True,
            "consent_timestamp": datetime.now(timezone.utc),
            "consent_text": consent_text,
            "ip_address": ip_address,
            "user_agent": user_agent,
            "status": "active",
            "tags": [tripkit.slug, "free_download"],
        }
        stmt = insert(TripKitEmailSubscriber).values(id=uuid.uuid4(), **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[TripKitEmailSubscriber.email],
            set_=values,
        ).returning(TripKitEmailSubscriber.id)

        result = await self.db.execute(stmt)
        subscriber_id = result.scalar_one()
        logger.info(f"Subscriber {subscriber_id} captured for TripKit {tripkit.slug}")
        return subscriber_id

    async def create_order(
        self,
        tripkit: TripKitRecord,
        email: str,
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> TripKitOrder:
        """Record a pending order for a paid TripKit"""
        order = TripKitOrder(
            id=uuid.uuid4(),
            tripkit_id=tripkit.id,
            email=email,
            amount_cents=round((tripkit.price or 0) * 100),
            currency="usd",
            status="pending",
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.db.add(order)
        await self.db.flush()
        logger.info(f"Pending order {order.id} created for TripKit {tripkit.slug}")
        return order


async def get_tripkit_repository(db: AsyncSession = Depends(get_db)) -> TripKitRepository:
    return TripKitRepository(db)
