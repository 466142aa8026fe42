from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.core.constants import AuditAction
from schoolneeds.core.exceptions import NotFoundError, DuplicateError
from schoolneeds.models.custom_page import CustomPage
from schoolneeds.models.user import Profile
from schoolneeds.schemas.custom_page import CustomPageCreate, CustomPageUpdate, CustomPageResponse
from schoolneeds.services.audit_service import AuditService, snapshot


class CustomPageService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def list_pages(self) -> List[CustomPage]:
        result = await self.db.execute(select(CustomPage).order_by(CustomPage.created_at.desc()))
        return list(result.scalars().all())

    async def get_page(self, page_id: UUID) -> CustomPage:
        page = await self.db.get(CustomPage, page_id)
        if not page:
            raise NotFoundError("الصفحة", str(page_id))
        return page

    async def get_published_by_slug(self, slug: str) -> CustomPage:
        result = await self.db.execute(
            select(CustomPage).where(
                CustomPage.slug == slug.strip().lower(),
                CustomPage.published.is_(True),
            )
        )
        page = result.scalar_one_or_none()
        if not page:
            raise NotFoundError("الصفحة", slug)
        return page

    async def _ensure_unique_slug(self, slug: str, exclude_id: UUID = None) -> None:
        query = select(CustomPage.id).where(CustomPage.slug == slug)
        if exclude_id:
            query = query.where(CustomPage.id != exclude_id)
        if (await self.db.execute(query)).first():
            raise DuplicateError("الرابط المختصر مستخدم لصفحة أخرى", details={"slug": slug})

    async def create_page(self, data: CustomPageCreate, admin: Profile) -> CustomPage:
        await self._ensure_unique_slug(data.slug)
        page = CustomPage(created_by=admin.id, **data.model_dump())
        self.db.add(page)
        await self.db.flush()

        await self.audit.log(admin.id, AuditAction.CREATED, "custom_page", page.id,
                             new_values=snapshot(page, CustomPageResponse))
        return page

    async def update_page(self, page_id: UUID, data: CustomPageUpdate, admin: Profile) -> CustomPage:
        page = await self.get_page(page_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("slug") and changes["slug"] != page.slug:
            await self._ensure_unique_slug(changes["slug"], exclude_id=page.id)

        old = snapshot(page, CustomPageResponse)
        for key, value in changes.items():
            if value is not None:
                setattr(page, key, value)
        await self.db.flush()

        await self.audit.log(admin.id, AuditAction.UPDATED, "custom_page", page.id,
                             old_values=old, new_values=snapshot(page, CustomPageResponse))
        return page

    async def delete_page(self, page_id: UUID, admin: Profile) -> None:
        page = await self.get_page(page_id)
        old = snapshot(page, CustomPageResponse)
        await self.db.delete(page)
        await self.db.flush()
        await self.audit.log(admin.id, AuditAction.DELETED, "custom_page", page_id, old_values=old)
