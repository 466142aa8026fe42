"""
Filtering and sorting of already-fetched need and school collections.

Every function here is pure and never raises on malformed records: a missing
timestamp sorts as the earliest instant, an unknown priority sorts last and a
missing text field is searched as an empty string. Records may be ORM objects,
pydantic models or plain dicts (as returned by the HTTP API).
"""
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Sequence

from schoolneeds.core.constants import ALL, PRIORITY_RANK, UNKNOWN_PRIORITY_RANK, SortKey
from schoolneeds.schemas.listing import NeedFilters, SchoolFilters

NEED_SEARCH_FIELDS = ("title", "description")
SCHOOL_SEARCH_FIELDS = ("name", "description", "address")


def field_value(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def plain_value(value: Any) -> Any:
    """Enum members compare by their stored value."""
    return getattr(value, "value", value)


def is_active(criterion: Any) -> bool:
    criterion = plain_value(criterion)
    return criterion is not None and criterion != "" and criterion != ALL


def matches_value(actual: Any, criterion: Any) -> bool:
    # enumerations: exact, case-sensitive
    if not is_active(criterion):
        return True
    return plain_value(actual) == plain_value(criterion)


def matches_search(record: Any, query: Optional[str], fields: Sequence[str]) -> bool:
    needle = (query or "").strip().lower()
    if not needle:
        return True
    haystack = " ".join(str(field_value(record, name) or "") for name in fields).lower()
    return needle in haystack


def need_governorate(need: Any) -> Any:
    """A need's governorate is its school's."""
    governorate = field_value(need, "governorate")
    if governorate is None:
        school = field_value(need, "school")
        if school is not None:
            governorate = field_value(school, "governorate")
    return governorate


def need_matches(need: Any, filters: NeedFilters) -> bool:
    if not matches_value(field_value(need, "category"), filters.category):
        return False
    if not matches_value(field_value(need, "priority"), filters.priority):
        return False
    if not matches_value(field_value(need, "status"), filters.status):
        return False
    # the school is only looked up when the predicate is active
    if is_active(filters.governorate) and not matches_value(need_governorate(need), filters.governorate):
        return False
    return matches_search(need, filters.search, NEED_SEARCH_FIELDS)


def school_matches(school: Any, filters: SchoolFilters) -> bool:
    if not matches_value(field_value(school, "governorate"), filters.governorate):
        return False
    if not matches_value(field_value(school, "education_level"), filters.education_level):
        return False
    if not matches_value(field_value(school, "status"), filters.status):
        return False
    return matches_search(school, filters.search, SCHOOL_SEARCH_FIELDS)


def filter_needs(needs: Iterable[Any], filters: Optional[NeedFilters] = None) -> List[Any]:
    """Sub-sequence of ``needs`` satisfying every active predicate, order preserved."""
    filters = filters or NeedFilters()
    return [need for need in needs if need_matches(need, filters)]


def filter_schools(schools: Iterable[Any], filters: Optional[SchoolFilters] = None) -> List[Any]:
    filters = filters or SchoolFilters()
    return [school for school in schools if school_matches(school, filters)]


def timestamp_key(value: Any) -> float:
    """Seconds since the epoch; anything unreadable is the lowest possible instant."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return float("-inf")
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    return float("-inf")


def priority_rank(value: Any) -> int:
    key = plain_value(value)
    if not isinstance(key, str):
        return UNKNOWN_PRIORITY_RANK
    return PRIORITY_RANK.get(key, UNKNOWN_PRIORITY_RANK)


def sort_records(records: Iterable[Any], sort: Any = SortKey.NEWEST) -> List[Any]:
    """Stable sort by creation time or priority rank; unknown keys keep the input order."""
    key = plain_value(sort)
    if key == SortKey.NEWEST.value:
        # reverse=True keeps equal keys in their original order
        return sorted(records, key=lambda r: timestamp_key(field_value(r, "created_at")), reverse=True)
    if key == SortKey.OLDEST.value:
        return sorted(records, key=lambda r: timestamp_key(field_value(r, "created_at")))
    if key == SortKey.PRIORITY.value:
        return sorted(records, key=lambda r: priority_rank(field_value(r, "priority")))
    return list(records)


def list_needs(
    needs: Iterable[Any],
    filters: Optional[NeedFilters] = None,
    sort: Any = SortKey.NEWEST,
) -> List[Any]:
    """Filter then sort: the view rendered for a need listing."""
    return sort_records(filter_needs(needs, filters), sort)


def list_schools(
    schools: Iterable[Any],
    filters: Optional[SchoolFilters] = None,
    sort: Any = SortKey.NEWEST,
) -> List[Any]:
    return sort_records(filter_schools(schools, filters), sort)
