"""Mini app repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from minicast.db.models.app import AppRow
from minicast.repositories.base import BaseRepository


class AppRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, AppRow)

    async def get(self, app_id: str) -> AppRow | None:
        return await self.get_by_field("app_id", app_id)

    async def get_by_url(self, url: str) -> AppRow | None:
        return await self.get_by_field("url", url)

    async def list_by_developer(self, developer_id: str) -> list[AppRow]:
        return await self.list_by_field("developer_id", developer_id)

    async def list_by_statuses(self, statuses: list[str]) -> list[AppRow]:
        """List apps matching any of the given statuses, oldest first."""
        stmt = (
            select(AppRow)
            .where(AppRow.status.in_(statuses))
            .order_by(AppRow.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(AppRow))
        return result.scalar_one()
