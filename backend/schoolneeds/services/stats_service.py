import math
from typing import Any, Dict, Iterable, List, Optional

from schoolneeds.core.constants import NeedPriority, NeedStatus, SchoolStatus
from schoolneeds.schemas.school import SchoolNeedSummary
from schoolneeds.schemas.stats import NeedStats, SchoolStats, GovernorateCount, CategoryBreakdown
from schoolneeds.services.listing_service import field_value, plain_value


def percentage(part: int, total: int) -> int:
    """Rounded percentage (half-up); 0 when there is nothing to divide by."""
    if total <= 0:
        return 0
    return int(math.floor(100 * part / total + 0.5))


def most_common_category(needs: Iterable[Any]) -> Optional[str]:
    """Category with the most needs; on a tie the first category encountered wins."""
    counts: Dict[str, int] = {}
    for need in needs:
        category = plain_value(field_value(need, "category"))
        if category is None:
            continue
        counts[category] = counts.get(category, 0) + 1

    best, best_count = None, 0
    for category, count in counts.items():
        if count > best_count:
            best, best_count = category, count
    return best


def need_stats(needs: Iterable[Any]) -> NeedStats:
    """Dashboard figures for a collection of needs (optionally one school's)."""
    needs = list(needs)
    stats = NeedStats(total=len(needs))

    for need in needs:
        status = plain_value(field_value(need, "status"))
        is_high = plain_value(field_value(need, "priority")) == NeedPriority.HIGH.value

        if status == NeedStatus.PENDING.value:
            stats.pending += 1
        elif status == NeedStatus.IN_PROGRESS.value:
            stats.in_progress += 1
        elif status == NeedStatus.FULFILLED.value:
            stats.fulfilled += 1

        if is_high:
            stats.high_priority += 1
            if status == NeedStatus.PENDING.value:
                stats.urgent += 1

    stats.fulfillment_rate = percentage(stats.fulfilled, stats.total)
    stats.most_common_category = most_common_category(needs)
    return stats


def school_stats(schools: Iterable[Any]) -> SchoolStats:
    schools = list(schools)
    stats = SchoolStats(total=len(schools))

    for school in schools:
        status = plain_value(field_value(school, "status"))
        if status == SchoolStatus.APPROVED.value:
            stats.approved += 1
        elif status == SchoolStatus.PENDING.value:
            stats.pending += 1
        elif status == SchoolStatus.REJECTED.value:
            stats.rejected += 1

    stats.approval_rate = percentage(stats.approved, stats.total)
    return stats


def school_need_summary(needs: Iterable[Any]) -> SchoolNeedSummary:
    """Moderation summary: pending counts everything not yet fulfilled."""
    summary = SchoolNeedSummary()
    for need in needs:
        status = plain_value(field_value(need, "status"))
        summary.total += 1
        if status == NeedStatus.FULFILLED.value:
            summary.fulfilled += 1
        if (
            plain_value(field_value(need, "priority")) == NeedPriority.HIGH.value
            and status == NeedStatus.PENDING.value
        ):
            summary.urgent += 1
    summary.pending = summary.total - summary.fulfilled
    return summary


def schools_by_governorate(schools: Iterable[Any]) -> List[GovernorateCount]:
    counts: Dict[str, int] = {}
    for school in schools:
        governorate = plain_value(field_value(school, "governorate")) or "unknown"
        counts[governorate] = counts.get(governorate, 0) + 1
    return [GovernorateCount(governorate=g, count=c) for g, c in counts.items()]


def needs_by_category(needs: Iterable[Any]) -> List[CategoryBreakdown]:
    breakdown: Dict[str, CategoryBreakdown] = {}
    for need in needs:
        category = plain_value(field_value(need, "category")) or "other"
        entry = breakdown.setdefault(
            category, CategoryBreakdown(category=category, count=0, fulfilled=0, pending=0)
        )
        entry.count += 1
        if plain_value(field_value(need, "status")) == NeedStatus.FULFILLED.value:
            entry.fulfilled += 1
        else:
            entry.pending += 1
    return list(breakdown.values())
