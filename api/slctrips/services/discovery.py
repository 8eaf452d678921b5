"""
Destination Discovery - search, category and drive-time filtering, sorting

Every function here is pure: it reads the list it is given and returns a
new list. Unknown category, band or sort values fall back to "no filter"
or the default order instead of raising.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union
import unicodedata

from slctrips.schemas.destination import DestinationRecord

ALL = "All"  # selector sentinel that disables a category filter
DEFAULT_PAGE_SIZE = 24


@dataclass(frozen=True)
class DriveBand:
    """Inclusive drive-time range in minutes from Salt Lake City"""
    label: str
    min: int
    max: int

    def contains(self, minutes: int) -> bool:
        return self.min <= minutes <= self.max


DRIVE_BANDS: List[DriveBand] = [
    DriveBand("30 minutes", 0, 30),
    DriveBand("90 minutes", 31, 90),
    DriveBand("3 hours", 91, 180),
    DriveBand("5 hours", 181, 300),
    DriveBand("8 hours", 301, 480),
    DriveBand("12 hours", 481, 720),
]


def band_from_label(label: Optional[str]) -> Optional[DriveBand]:
    """Case-insensitive exact label match; unknown labels give None"""
    if not label:
        return None
    lower = label.lower()
    for band in DRIVE_BANDS:
        if band.label.lower() == lower:
            return band
    return None


class SortKey(str, Enum):
    NAME_ASC = "name_asc"
    RATING_DESC = "rating_desc"
    DRIVE_TIME_ASC = "drive_time_asc"


# Filters

def apply_search_filter(destinations: Sequence[DestinationRecord], query: Optional[str]) -> List[DestinationRecord]:
    """
    Keep destinations whose name, category, subcategory or descriptions
    contain the query (trimmed, case-insensitive). A blank query keeps all.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(destinations)

    def matches(d: DestinationRecord) -> bool:
        fields = (d.name, d.category, d.subcategory, d.description_short, d.description_long)
        return any(needle in str(value).lower() for value in fields if value)

    return [d for d in destinations if matches(d)]


def apply_category_filter(
    destinations: Sequence[DestinationRecord],
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
) -> List[DestinationRecord]:
    """Exact, case-sensitive match on category and subcategory; "All" disables either"""
    out = list(destinations)
    if category and category != ALL:
        out = [d for d in out if d.category == category]
    if subcategory and subcategory != ALL:
        out = [d for d in out if d.subcategory == subcategory]
    return out


def apply_drive_band_filter(destinations: Sequence[DestinationRecord], band: Optional[DriveBand]) -> List[DestinationRecord]:
    if band is None:
        return list(destinations)
    return [d for d in destinations if band.contains(d.drive_time_minutes)]


# Sorting

def _name_key(destination: DestinationRecord) -> str:
    # Accent- and case-insensitive, close to a locale collation
    decomposed = unicodedata.normalize("NFKD", destination.name or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def _rating_key(destination: DestinationRecord) -> float:
    return -(destination.rating or 0)


def _drive_time_key(destination: DestinationRecord) -> int:
    return destination.drive_time_minutes


_SORT_KEYS = {
    SortKey.NAME_ASC: _name_key,
    SortKey.RATING_DESC: _rating_key,
    SortKey.DRIVE_TIME_ASC: _drive_time_key,
}


def sort_destinations(
    destinations: Sequence[DestinationRecord],
    sort: Union[SortKey, str, None] = SortKey.NAME_ASC,
) -> List[DestinationRecord]:
    """
    Stable sort by the given key. Unknown or missing keys sort by name.
    """
    key = _SORT_KEYS.get(sort, _name_key)
    return sorted(destinations, key=key)


def resolve_sort_key(sort: Union[SortKey, str, None]) -> SortKey:
    """Normalize a requested sort to a known key (name_asc when unknown)"""
    try:
        return SortKey(sort)
    except ValueError:
        return SortKey.NAME_ASC


# Pipeline

@dataclass
class DiscoveryQuery:
    """What a visitor asked the destinations page for"""
    query: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    band: Union[DriveBand, str, None] = None
    sort: Union[SortKey, str, None] = SortKey.NAME_ASC

    @property
    def drive_band(self) -> Optional[DriveBand]:
        if isinstance(self.band, DriveBand):
            return self.band
        return band_from_label(self.band)


def discover(
    destinations: Sequence[DestinationRecord],
    criteria: Optional[DiscoveryQuery] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> List[DestinationRecord]:
    """
    Run search, category/subcategory, drive band and sort in that order,
    then keep the first ``page_size`` results. There is no offset: results
    past the first page are dropped.
    """
    criteria = criteria or DiscoveryQuery()

    results = apply_search_filter(destinations, criteria.query)
    results = apply_category_filter(results, criteria.category, criteria.subcategory)
    results = apply_drive_band_filter(results, criteria.drive_band)
    results = sort_destinations(results, criteria.sort)
    return results[:max(page_size, 0)]


def distinct_values(destinations: Iterable[DestinationRecord], field: str) -> List[str]:
    """Sorted distinct non-empty values of a field, for populating selectors"""
    values = {getattr(d, field, None) for d in destinations}
    return sorted((v for v in values if v), key=str.casefold)
