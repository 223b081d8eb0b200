"""Resource service - a user's resource library."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.resource import Resource

logger = logging.getLogger(__name__)


class ResourceService:
    """Service for resources owned by a single user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(
        self,
        user_id: UUID,
        subject: str | None = None,
        limit: int | None = None,
    ) -> list[Resource]:
        """List a user's resources, newest first, optionally for one subject."""
        query = select(Resource).where(Resource.user_id == user_id)
        if subject:
            query = query.where(Resource.subject == subject)
        query = query.order_by(Resource.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def recent(self, user_id: UUID, limit: int = 5) -> list[Resource]:
        """Most recently updated resources."""
        result = await self.db.execute(
            select(Resource)
            .where(Resource.user_id == user_id)
            .order_by(Resource.updated_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Resource.id)).where(Resource.user_id == user_id)
        )
        return result.scalar() or 0

    async def create(
        self,
        user_id: UUID,
        title: str,
        type: str,
        content: str,
        subject: str,
        tags: list[str],
    ) -> Resource:
        """Store a resource. Fields must already be sanitized."""
        resource = Resource(
            user_id=user_id,
            title=title,
            type=type,
            content=content,
            subject=subject,
            tags=tags,
        )
        self.db.add(resource)
        await self.db.flush()
        await self.db.refresh(resource)
        return resource

    async def delete(self, user_id: UUID, resource_id: UUID) -> bool:
        """Delete a resource; False if it does not exist or belongs to someone else."""
        resource = await self._get_owned(user_id, resource_id)
        if not resource:
            return False

        await self.db.delete(resource)
        await self.db.flush()
        return True

    async def _get_owned(self, user_id: UUID, resource_id: UUID) -> Resource | None:
        result = await self.db.execute(
            select(Resource).where(Resource.id == resource_id, Resource.user_id == user_id)
        )
        return result.scalar_one_or_none()
