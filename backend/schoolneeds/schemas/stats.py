from typing import Optional, List

from pydantic import BaseModel


class NeedStats(BaseModel):
    """إحصائيات الاحتياجات للوحة التحكم"""
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    fulfilled: int = 0
    high_priority: int = 0
    urgent: int = 0                          # أولوية عالية ومعلق
    fulfillment_rate: int = 0                # نسبة مئوية مقرّبة
    most_common_category: Optional[str] = None


class SchoolStats(BaseModel):
    total: int = 0
    approved: int = 0
    pending: int = 0
    rejected: int = 0
    approval_rate: int = 0


class OverviewStats(BaseModel):
    needs: NeedStats
    schools: SchoolStats


class GovernorateCount(BaseModel):
    governorate: str
    count: int


class CategoryBreakdown(BaseModel):
    category: str
    count: int
    fulfilled: int
    pending: int


class AnalyticsResponse(BaseModel):
    schools_by_governorate: List[GovernorateCount]
    needs_by_category: List[CategoryBreakdown]
