"""Points ledger repository."""

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from minicast.db.models.points import PointsTransactionRow, UserPointsRow
from minicast.repositories.base import BaseRepository


class UserPointsRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, UserPointsRow)

    async def get(self, identity: str) -> UserPointsRow | None:
        return await self.get_by_field("identity", identity)

    async def increment(self, identity: str, amount: int) -> None:
        """Add ``amount`` to an identity's total, creating the balance row if needed."""
        if await self._add(identity, amount):
            return
        if await self.create_unique(identity=identity, total_points=amount) is None:
            # Balance row was created concurrently
            await self._add(identity, amount)

    async def _add(self, identity: str, amount: int) -> bool:
        stmt = (
            update(UserPointsRow)
            .where(UserPointsRow.identity == identity)
            .values(total_points=UserPointsRow.total_points + amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1


class PointsTransactionRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, PointsTransactionRow)

    async def list_for_identity(self, identity: str) -> list[PointsTransactionRow]:
        return await self.list_by_field("identity", identity)

    async def list_by_reference(self, reference_id: str) -> list[PointsTransactionRow]:
        return await self.list_by_field("reference_id", reference_id)
