from schoolneeds.schemas.need import (
    NeedCreate,
    NeedUpdate,
    NeedAdminUpdate,
    NeedResponse,
    NeedWithSchoolResponse,
    NeedList,
    BulkStatusUpdate,
    BulkDelete,
    BulkResult,
)
from schoolneeds.schemas.school import (
    SchoolCreate,
    SchoolProfileUpdate,
    SchoolAdminUpdate,
    SchoolResponse,
    SchoolAdminResponse,
    SchoolDetailResponse,
    SchoolNeedSummary,
)
from schoolneeds.schemas.listing import NeedFilters, SchoolFilters
from schoolneeds.schemas.stats import NeedStats, SchoolStats, OverviewStats, AnalyticsResponse
from schoolneeds.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
)
from schoolneeds.schemas.custom_page import CustomPageCreate, CustomPageUpdate, CustomPageResponse

__all__ = [
    # Need
    "NeedCreate",
    "NeedUpdate",
    "NeedAdminUpdate",
    "NeedResponse",
    "NeedWithSchoolResponse",
    "NeedList",
    "BulkStatusUpdate",
    "BulkDelete",
    "BulkResult",
    # School
    "SchoolCreate",
    "SchoolProfileUpdate",
    "SchoolAdminUpdate",
    "SchoolResponse",
    "SchoolAdminResponse",
    "SchoolDetailResponse",
    "SchoolNeedSummary",
    # Listing & stats
    "NeedFilters",
    "SchoolFilters",
    "NeedStats",
    "SchoolStats",
    "OverviewStats",
    "AnalyticsResponse",
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "UserResponse",
    # Pages
    "CustomPageCreate",
    "CustomPageUpdate",
    "CustomPageResponse",
]
