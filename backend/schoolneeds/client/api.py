"""
عميل HTTP للمنصة - يستخدمه تطبيق الواجهة والسكربتات
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Union
from uuid import UUID

import httpx
from pydantic import BaseModel

from schoolneeds.client.session import AuthContext
from schoolneeds.core.constants import ExportScope, NeedStatus, SortKey
from schoolneeds.schemas.auth import LoginResponse, UserResponse
from schoolneeds.schemas.audit import AuditLogResponse, NotificationResponse, PaginatedNotifications
from schoolneeds.schemas.custom_page import CustomPageCreate, CustomPageUpdate, CustomPageResponse
from schoolneeds.schemas.listing import NeedFilters, SchoolFilters
from schoolneeds.schemas.need import (
    NeedCreate,
    NeedUpdate,
    NeedAdminUpdate,
    NeedResponse,
    NeedWithSchoolResponse,
    BulkResult,
)
from schoolneeds.schemas.school import (
    SchoolCreate,
    SchoolProfileUpdate,
    SchoolAdminUpdate,
    SchoolResponse,
    SchoolAdminResponse,
    SchoolDetailResponse,
)
from schoolneeds.schemas.stats import NeedStats, OverviewStats, AnalyticsResponse

logger = logging.getLogger(__name__)

NETWORK_ERROR = "NETWORK_ERROR"


class BackendError(Exception):
    """A failed call: ``code`` is the machine-readable error code when the server sent one."""

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    @property
    def is_not_found(self) -> bool:
        return self.code == "NOT_FOUND" or self.status_code == 404

    @classmethod
    def from_response(cls, response: httpx.Response) -> "BackendError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        detail = body.get("detail", body) if isinstance(body, dict) else body
        error = detail.get("error") if isinstance(detail, dict) else None
        if error:
            return cls(error.get("message") or response.reason_phrase, error.get("code"),
                       response.status_code, error.get("details"))
        message = detail if isinstance(detail, str) else response.reason_phrase
        return cls(message, None, response.status_code, detail)


def _payload(data: BaseModel) -> dict:
    """Only the fields the caller set are sent."""
    return data.model_dump(mode="json", exclude_unset=True)


def _query(filters: Optional[BaseModel], **extra) -> Dict[str, Any]:
    params = filters.model_dump(exclude_none=True) if filters else {}
    for key, value in extra.items():
        if value is not None:
            params[key] = getattr(value, "value", value)
    return params


class SchoolNeedsClient:
    def __init__(
        self,
        base_url: str,
        session: Optional[AuthContext] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session or AuthContext()
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/api/v1",
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SchoolNeedsClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise BackendError("تعذر الاتصال بالخادم. يرجى المحاولة مرة أخرى", code=NETWORK_ERROR) from exc

        if response.is_error:
            error = BackendError.from_response(response)
            logger.warning("%s %s -> %s %s", method, path, response.status_code, error.code)
            raise error
        return response

    async def _json(self, method: str, path: str, **kwargs) -> Any:
        return (await self._request(method, path, **kwargs)).json()

    # === المصادقة ===

    async def sign_up(self, email: str, password: str, language: str = "ar") -> UserResponse:
        data = await self._json("POST", "/auth/register",
                                json={"email": email, "password": password, "language": language})
        return self._start_session(LoginResponse.model_validate(data))

    async def sign_in(self, email: str, password: str) -> UserResponse:
        data = await self._json("POST", "/auth/login", json={"email": email, "password": password})
        return self._start_session(LoginResponse.model_validate(data))

    async def sign_out(self) -> None:
        try:
            if self.session.token:
                await self._request("POST", "/auth/logout")
        finally:
            self.session.clear()

    async def restore_session(self, token: str) -> Optional[UserResponse]:
        """إعادة الجلسة من رمز محفوظ - رمز منتهي يمسح الجلسة"""
        self.session.token = token
        try:
            user = UserResponse.model_validate(await self._json("GET", "/auth/me"))
        except BackendError as exc:
            if exc.status_code == 401:
                self.session.clear()
                return None
            raise
        self.session.populate(token, user)
        return user

    def _start_session(self, login: LoginResponse) -> UserResponse:
        self.session.populate(login.access_token, login.user)
        return login.user

    # === عام ===

    async def list_schools(self, filters: Optional[SchoolFilters] = None) -> List[SchoolResponse]:
        data = await self._json("GET", "/public/schools", params=_query(filters))
        return [SchoolResponse.model_validate(s) for s in data["items"]]

    async def get_school(self, school_id: UUID) -> SchoolDetailResponse:
        return SchoolDetailResponse.model_validate(await self._json("GET", f"/public/schools/{school_id}"))

    async def list_public_needs(
        self, filters: Optional[NeedFilters] = None, sort: SortKey = SortKey.NEWEST
    ) -> List[NeedWithSchoolResponse]:
        data = await self._json("GET", "/public/needs", params=_query(filters, sort=sort))
        return [NeedWithSchoolResponse.model_validate(n) for n in data["items"]]

    async def get_page(self, slug: str) -> CustomPageResponse:
        return CustomPageResponse.model_validate(await self._json("GET", f"/public/pages/{slug}"))

    async def options(self, group: str, lang: Optional[str] = None) -> List[dict]:
        """group: categories, priorities, governorates, education-levels"""
        return await self._json("GET", f"/public/{group}", params=_query(None, lang=lang))

    # === مدير المدرسة ===

    async def register_school(self, data: SchoolCreate) -> SchoolResponse:
        return SchoolResponse.model_validate(await self._json("POST", "/school", json=_payload(data)))

    async def get_my_school(self) -> SchoolResponse:
        return SchoolResponse.model_validate(await self._json("GET", "/school"))

    async def update_my_school(self, data: SchoolProfileUpdate) -> SchoolResponse:
        return SchoolResponse.model_validate(await self._json("PATCH", "/school", json=_payload(data)))

    async def list_my_needs(
        self, filters: Optional[NeedFilters] = None, sort: SortKey = SortKey.NEWEST
    ) -> List[NeedResponse]:
        data = await self._json("GET", "/school/needs", params=_query(filters, sort=sort))
        return [NeedResponse.model_validate(n) for n in data]

    async def create_need(self, data: NeedCreate) -> NeedResponse:
        return NeedResponse.model_validate(await self._json("POST", "/school/needs", json=_payload(data)))

    async def update_need(self, need_id: UUID, data: NeedUpdate) -> NeedResponse:
        return NeedResponse.model_validate(
            await self._json("PATCH", f"/school/needs/{need_id}", json=_payload(data))
        )

    async def delete_need(self, need_id: UUID) -> None:
        await self._request("DELETE", f"/school/needs/{need_id}")

    async def my_stats(self) -> NeedStats:
        return NeedStats.model_validate(await self._json("GET", "/school/stats"))

    # === الإشراف ===

    async def admin_list_needs(
        self, filters: Optional[NeedFilters] = None, sort: SortKey = SortKey.NEWEST
    ) -> List[NeedWithSchoolResponse]:
        data = await self._json("GET", "/admin/needs", params=_query(filters, sort=sort))
        return [NeedWithSchoolResponse.model_validate(n) for n in data["items"]]

    async def admin_update_need(self, need_id: UUID, data: NeedAdminUpdate) -> NeedWithSchoolResponse:
        return NeedWithSchoolResponse.model_validate(
            await self._json("PATCH", f"/admin/needs/{need_id}", json=_payload(data))
        )

    async def admin_delete_need(self, need_id: UUID) -> None:
        await self._request("DELETE", f"/admin/needs/{need_id}")

    async def bulk_update_status(self, ids: Sequence[UUID], status: NeedStatus) -> BulkResult:
        data = await self._json("POST", "/admin/needs/bulk-status",
                                json={"ids": [str(i) for i in ids], "status": status.value})
        return BulkResult.model_validate(data)

    async def bulk_delete(self, ids: Sequence[UUID]) -> BulkResult:
        data = await self._json("POST", "/admin/needs/bulk-delete", json={"ids": [str(i) for i in ids]})
        return BulkResult.model_validate(data)

    async def export_needs(
        self,
        scope: ExportScope = ExportScope.ALL,
        filters: Optional[NeedFilters] = None,
        ids: Optional[Sequence[UUID]] = None,
    ) -> bytes:
        params = _query(filters if scope == ExportScope.FILTERED else None, scope=scope)
        if ids:
            params["ids"] = [str(i) for i in ids]
        return (await self._request("GET", "/admin/needs/export", params=params)).content

    async def admin_list_schools(self, filters: Optional[SchoolFilters] = None) -> List[SchoolAdminResponse]:
        data = await self._json("GET", "/admin/schools", params=_query(filters))
        return [SchoolAdminResponse.model_validate(s) for s in data["items"]]

    async def pending_schools(self) -> List[SchoolResponse]:
        data = await self._json("GET", "/admin/schools/pending")
        return [SchoolResponse.model_validate(s) for s in data["items"]]

    async def admin_update_school(self, school_id: UUID, data: SchoolAdminUpdate) -> SchoolResponse:
        return SchoolResponse.model_validate(
            await self._json("PATCH", f"/admin/schools/{school_id}", json=_payload(data))
        )

    async def approve_school(self, school_id: UUID) -> SchoolResponse:
        return SchoolResponse.model_validate(await self._json("POST", f"/admin/schools/{school_id}/approve"))

    async def reject_school(self, school_id: UUID) -> SchoolResponse:
        return SchoolResponse.model_validate(await self._json("POST", f"/admin/schools/{school_id}/reject"))

    async def overview(self) -> OverviewStats:
        return OverviewStats.model_validate(await self._json("GET", "/admin/stats/overview"))

    async def analytics(self) -> AnalyticsResponse:
        return AnalyticsResponse.model_validate(await self._json("GET", "/admin/stats/analytics"))

    async def audit_logs(
        self,
        action: Optional[str] = None,
        entity_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[AuditLogResponse]:
        data = await self._json("GET", "/admin/audit-logs",
                                params=_query(None, action=action, entity_type=entity_type, search=search))
        return [AuditLogResponse.model_validate(entry) for entry in data]

    async def list_pages(self) -> List[CustomPageResponse]:
        return [CustomPageResponse.model_validate(p) for p in await self._json("GET", "/admin/pages")]

    async def create_page(self, data: CustomPageCreate) -> CustomPageResponse:
        return CustomPageResponse.model_validate(await self._json("POST", "/admin/pages", json=_payload(data)))

    async def update_page(self, page_id: UUID, data: CustomPageUpdate) -> CustomPageResponse:
        return CustomPageResponse.model_validate(
            await self._json("PATCH", f"/admin/pages/{page_id}", json=_payload(data))
        )

    async def delete_page(self, page_id: UUID) -> None:
        await self._request("DELETE", f"/admin/pages/{page_id}")

    # === الإشعارات ===

    async def notifications(self, page: int = 0) -> PaginatedNotifications:
        return PaginatedNotifications.model_validate(
            await self._json("GET", "/notifications", params={"page": page})
        )

    async def unread_count(self) -> int:
        return (await self._json("GET", "/notifications/unread-count"))["unread"]

    async def mark_read(self, notification_id: UUID) -> NotificationResponse:
        return NotificationResponse.model_validate(
            await self._json("POST", f"/notifications/{notification_id}/read")
        )

    async def mark_all_read(self) -> None:
        await self._request("POST", "/notifications/read-all")

    # === الملفات ===

    async def upload_image(self, filename: str, data: Union[bytes, Any], content_type: str = "image/jpeg") -> dict:
        files = {"file": (filename, data, content_type)}
        return await self._json("POST", "/uploads/images", files=files)
