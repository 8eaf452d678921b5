"""SQLAlchemy Models"""
from slctrips.models.destination import Destination, AffiliateGear
from slctrips.models.tripkit import TripKit, TripKitDestination, TripKitEmailSubscriber, TripKitOrder

__all__ = [
    "Destination", "AffiliateGear",
    "TripKit", "TripKitDestination", "TripKitEmailSubscriber", "TripKitOrder",
]
