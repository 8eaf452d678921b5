"""
Shared fixtures: an in-memory destination catalog, fake repositories and
a TestClient wired to them through dependency overrides.
"""
import uuid
from datetime import datetime
from types import SimpleNamespace
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from slctrips.main import app
from slctrips.routers.picks import get_now
from slctrips.schemas.destination import AffiliateGearResponse, DestinationRecord
from slctrips.schemas.tripkit import TripKitDestinationEntry, TripKitRecord
from slctrips.services.destination_repository import (
    DestinationRepository,
    get_destination_repository,
    legacy_id_value,
)
from slctrips.services.tripkit_repository import get_tripkit_repository

ARCHES_ID = "6f1c2b8e-4a55-4d0e-9a43-0d9d2f6f0a01"
PARK_CITY_ID = "6f1c2b8e-4a55-4d0e-9a43-0d9d2f6f0a02"
TEMPLE_SQUARE_ID = "6f1c2b8e-4a55-4d0e-9a43-0d9d2f6f0a03"
FREE_KIT_ID = "0b7e5d7a-9a59-4f0e-8f0c-5a1f0f5a0001"
PAID_KIT_ID = "0b7e5d7a-9a59-4f0e-8f0c-5a1f0f5a0002"
UNPRICED_KIT_ID = "0b7e5d7a-9a59-4f0e-8f0c-5a1f0f5a0003"


def make_destination(name: str, drive_time: int, **fields) -> DestinationRecord:
    fields.setdefault("id", str(uuid.uuid4()))
    return DestinationRecord(name=name, drive_time_minutes=drive_time, **fields)


def scenario_destinations() -> List[DestinationRecord]:
    """The three-destination catalog used by the end-to-end scenarios"""
    return [
        make_destination("Arches National Park", 240, id=ARCHES_ID, slug="arches-national-park",
                         category="Outdoor", subcategory="National Park", rating=4.9,
                         latitude=38.7331, longitude=-109.5925),
        make_destination("Park City Main Street", 45, id=PARK_CITY_ID, slug="park-city-main-street",
                         category="Town", subcategory="Historic District", rating=4.5),
        make_destination("Temple Square", 15, id=TEMPLE_SQUARE_ID, slug=None, legacy_id=17,
                         category="Cultural", subcategory="Historic District", rating=4.7,
                         description_short="Downtown gardens and historic buildings"),
    ]


class InMemoryDestinationRepository(DestinationRepository):
    """DestinationRepository with its queries answered from a list"""

    def __init__(self, destinations: List[DestinationRecord], gear: Optional[dict] = None):
        self.db = None
        self.destinations = list(destinations)
        self.gear = gear or {}
        self.stages_called: List[str] = []

    async def fetch_all(self):
        return sorted(self.destinations, key=lambda d: d.name)

    async def fetch_page(self, limit, offset, category=None, search=None):
        rows = await self.fetch_all()
        if category:
            rows = [d for d in rows if d.category == category]
        if search:
            rows = [d for d in rows if search.lower() in d.name.lower()]
        return rows[offset:offset + limit], len(rows)

    async def fetch_by_category(self, category):
        return [d for d in await self.fetch_all() if d.category == category]

    async def fetch_featured(self, limit=None):
        rows = [d for d in await self.fetch_all() if d.featured]
        return rows[:limit] if limit else rows

    async def search(self, q, limit):
        needle = q.lower()
        return [
            d for d in await self.fetch_all()
            if any(needle in (v or "").lower() for v in (d.name, d.category, d.subcategory))
        ][:limit]

    async def count(self):
        return len(self.destinations)

    async def by_uuid(self, identifier):
        self.stages_called.append("uuid")
        try:
            key = uuid.UUID(identifier)
        except ValueError:
            return None
        return next((d for d in self.destinations if str(d.id) == str(key)), None)

    async def by_legacy_id(self, identifier):
        self.stages_called.append("legacy_id")
        value = legacy_id_value(identifier)
        if value is None:
            return None
        return next((d for d in self.destinations if d.legacy_id == value), None)

    async def by_slug(self, identifier):
        self.stages_called.append("slug")
        return next((d for d in self.destinations if d.slug == identifier), None)

    async def by_name(self, identifier):
        self.stages_called.append("name")
        words = " ".join(identifier.replace("-", " ").split()).lower()
        if not words:
            return None
        return next((d for d in await self.fetch_all() if words in d.name.lower()), None)

    async def fetch_gear(self, destination_id, limit=None):
        items = sorted(self.gear.get(str(destination_id), []), key=lambda g: g.display_order)
        return items[:limit] if limit else items


class FakeTripKitRepository:
    def __init__(self):
        self.tripkits = [
            TripKitRecord(id=FREE_KIT_ID, name="TK-000 Utah Starter", slug="utah-starter",
                          price=0, tier="free", status="active", featured=True,
                          states_covered=["UT"]),
            TripKitRecord(id=PAID_KIT_ID, name="Haunted Utah", slug="haunted-utah",
                          price=12.99, tier="premium", status="active",
                          stripe_price_id="price_123", states_covered=["UT", "ID"]),
            TripKitRecord(id=UNPRICED_KIT_ID, name="Ski Utah", slug="ski-utah",
                          price=24.0, tier="premium", status="draft"),
        ]
        self.links = {
            FREE_KIT_ID: [
                TripKitDestinationEntry(**scenario_destinations()[2].model_dump(), display_order=1, is_preview=True),
                TripKitDestinationEntry(**scenario_destinations()[0].model_dump(), display_order=2, is_preview=False),
            ],
        }
        self.subscribers = []
        self.orders = []

    async def list_tripkits(self, status="active", featured=None, tier=None, state=None):
        kits = [k for k in self.tripkits if k.status == status]
        if featured is not None:
            kits = [k for k in kits if k.featured == featured]
        if tier:
            kits = [k for k in kits if k.tier == tier]
        if state:
            kits = [k for k in kits if state.upper() in k.states_covered]
        return sorted(kits, key=lambda k: (not k.featured, k.price or 0))

    async def get_by_slug(self, slug):
        return next((k for k in self.tripkits if k.slug == slug), None)

    async def get_by_id(self, tripkit_id):
        return next((k for k in self.tripkits if str(k.id) == str(tripkit_id)), None)

    async def get_destinations(self, tripkit_id):
        return sorted(self.links.get(str(tripkit_id), []), key=lambda d: d.display_order)

    async def upsert_subscriber(self, email, tripkit, **fields):
        self.subscribers.append({"email": email, "tripkit": tripkit.slug, **fields})
        return uuid.UUID(int=len(self.subscribers))

    async def create_order(self, tripkit, email, ip_address, user_agent):
        order = SimpleNamespace(id=uuid.UUID(int=1000 + len(self.orders)), tripkit_id=tripkit.id,
                                email=email, amount_cents=round(tripkit.price * 100))
        self.orders.append(order)
        return order


@pytest.fixture
def destinations() -> List[DestinationRecord]:
    return scenario_destinations()


@pytest.fixture
def destination_repo(destinations) -> InMemoryDestinationRepository:
    gear = {
        ARCHES_ID: [
            AffiliateGearResponse(id="g2", product_name="Hydration pack", affiliate_link="https://example.com/b", display_order=2),
            AffiliateGearResponse(id="g1", product_name="Sun hat", affiliate_link="https://example.com/a", display_order=1),
        ],
    }
    return InMemoryDestinationRepository(destinations, gear=gear)


@pytest.fixture
def tripkit_repo() -> FakeTripKitRepository:
    return FakeTripKitRepository()


@pytest.fixture
def october_now() -> datetime:
    return datetime(2024, 10, 15, 12, 0)


@pytest.fixture
def client(destination_repo, tripkit_repo, october_now):
    app.dependency_overrides[get_destination_repository] = lambda: destination_repo
    app.dependency_overrides[get_tripkit_repository] = lambda: tripkit_repo
    app.dependency_overrides[get_now] = lambda: october_now
    yield TestClient(app)
    app.dependency_overrides.clear()
