"""
Destination Data Access - the only place that queries destination tables

Each method is a single round trip to the hosted database (no cache, no
retry). Rows leave this module as ``DestinationRecord`` so discovery and
ranking never depend on the storage layout.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar
import logging
import re
import uuid

from slctrips.models.destination import Destination, AffiliateGear
from slctrips.schemas.destination import DestinationRecord, AffiliateGearResponse
from slctrips.utils.database import get_db

logger = logging.getLogger(__name__)

T = TypeVar("T")
Lookup = Callable[[str], Awaitable[Optional[T]]]


async def resolve_first(identifier: str, lookups: Sequence[Lookup]) -> Optional[T]:
    """
    Try each lookup in order and return the first hit, or None when every
    stage misses.
    """
    for lookup in lookups:
        found = await lookup(identifier)
        if found is not None:
            logger.debug(f"Resolved {identifier!r} via {getattr(lookup, '__name__', lookup)}")
            return found
    return None


INT4_MAX = 2**31 - 1


def legacy_id_value(identifier: str) -> Optional[int]:
    """ASCII digits that fit the integer id column, else None"""
    if not (identifier.isascii() and identifier.isdigit()):
        return None
    value = int(identifier)
    return value if value <= INT4_MAX else None


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def name_pattern(identifier: str) -> str:
    """Turn a slug-like id into an ILIKE pattern: 'temple-square' -> '%temple square%'"""
    words = re.sub(r"\s+", " ", identifier.replace("-", " ")).strip()
    return f"%{_escape_like(words)}%"


class DestinationRepository:
    """
    Read access to ``destinations`` and ``destination_affiliate_gear``
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _to_record(row: Destination) -> DestinationRecord:
        return DestinationRecord.model_validate(row)

    async def _first(self, stmt) -> Optional[DestinationRecord]:
        result = await self.db.execute(stmt.limit(1))
        row = result.scalars().first()
        return self._to_record(row) if row is not None else None

    async def _all(self, stmt) -> List[DestinationRecord]:
        result = await self.db.execute(stmt)
        return [self._to_record(row) for row in result.scalars().all()]

    # Listing

    async def fetch_all(self) -> List[DestinationRecord]:
        return await self._all(select(Destination).order_by(Destination.name))

    async def fetch_page(
        self,
        limit: int,
        offset: int,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[DestinationRecord], int]:
        """One page ordered by name, plus the total matching the same filters"""
        query = select(Destination)
        if category:
            query = query.where(Destination.category == category)
        if search:
            query = query.where(Destination.name.ilike(f"%{_escape_like(search)}%"))

        records = await self._all(query.order_by(Destination.name).offset(offset).limit(limit))

        count_result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        total = count_result.scalar() or 0
        return records, total

    async def fetch_by_category(self, category: str) -> List[DestinationRecord]:
        return await self._all(
            select(Destination).where(Destination.category == category).order_by(Destination.name)
        )

    async def fetch_featured(self, limit: Optional[int] = None) -> List[DestinationRecord]:
        stmt = select(Destination).where(Destination.featured.is_(True)).order_by(Destination.name)
        if limit:
            stmt = stmt.limit(limit)
        return await self._all(stmt)

    async def search(self, q: str, limit: int) -> List[DestinationRecord]:
        """Substring match on name, category or subcategory"""
        pattern = f"%{_escape_like(q)}%"
        return await self._all(
            select(Destination)
            .where(or_(
                Destination.name.ilike(pattern),
                Destination.category.ilike(pattern),
                Destination.subcategory.ilike(pattern),
            ))
            .order_by(Destination.name)
            .limit(limit)
        )

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Destination))
        return result.scalar() or 0

    # Single record lookups

    async def by_uuid(self, identifier: str) -> Optional[DestinationRecord]:
        try:
            key = uuid.UUID(identifier)
        except ValueError:
            return None
        return await self._first(select(Destination).where(Destination.id == key))

    async def by_legacy_id(self, identifier: str) -> Optional[DestinationRecord]:
        value = legacy_id_value(identifier)
        if value is None:
            return None
        return await self._first(select(Destination).where(Destination.legacy_id == value))

    async def by_slug(self, identifier: str) -> Optional[DestinationRecord]:
        return await self._first(select(Destination).where(Destination.slug == identifier))

    async def by_name(self, identifier: str) -> Optional[DestinationRecord]:
        pattern = name_pattern(identifier)
        if pattern == "%%":
            return None
        return await self._first(
            select(Destination).where(Destination.name.ilike(pattern)).order_by(Destination.name)
        )

    def lookup_stages(self) -> List[Lookup]:
        """Order in which an id from a URL is resolved"""
        return [self.by_uuid, self.by_legacy_id, self.by_slug, self.by_name]

    async def fetch_by_id(self, identifier: str) -> Optional[DestinationRecord]:
        """
        uuid -> legacy integer id -> exact slug -> fuzzy name, first hit wins
        """
        return await resolve_first(identifier.strip(), self.lookup_stages())

    async def fetch_by_slug(self, slug: str) -> Optional[DestinationRecord]:
        return await self.by_slug(slug)

    # Gear

    async def fetch_gear(self, destination_id, limit: Optional[int] = None) -> List[AffiliateGearResponse]:
        """Active gear for a destination, by display order then featured first"""
        stmt = (
            select(AffiliateGear)
            .where(AffiliateGear.destination_id == destination_id, AffiliateGear.active.is_(True))
            .order_by(AffiliateGear.display_order.asc(), AffiliateGear.featured.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return [AffiliateGearResponse.model_validate(g) for g in result.scalars().all()]

    async def fetch_detail(self, slug: str) -> Optional[Tuple[DestinationRecord, List[AffiliateGearResponse]]]:
        record = await self.fetch_by_slug(slug)
        if record is None:
            return None
        gear = await self.fetch_gear(record.id)
        return record, gear


async def get_destination_repository(db: AsyncSession = Depends(get_db)) -> DestinationRepository:
    """
    Dependency that provides the destination data access facade
    Usage: repo: DestinationRepository = Depends(get_destination_repository)
    """
    return DestinationRepository(db)
