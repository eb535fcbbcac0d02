"""Developer repository."""

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from minicast.db.models.developer import DeveloperRow
from minicast.repositories.base import BaseRepository
from minicast.services.id_generator import generate_id


class DeveloperRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, DeveloperRow)

    async def get(self, developer_id: str) -> DeveloperRow | None:
        return await self.get_by_field("developer_id", developer_id)

    async def get_by_identity(self, identity: str) -> DeveloperRow | None:
        return await self.get_by_field("identity", identity)

    async def get_or_create(self, identity: str, **defaults) -> DeveloperRow:
        """Return the developer for an identity, creating it lazily.

        Two first requests from the same identity race on the unique
        ``identity`` column; the loser re-reads the winner's row.
        """
        developer = await self.get_by_identity(identity)
        if developer:
            return developer
        developer = await self.create_unique(
            developer_id=generate_id("dev_"),
            identity=identity,
            verification_status="unverified",
            wallet_proven=False,
            domain_proven=False,
            verified=False,
            **defaults,
        )
        if developer is None:
            developer = await self.get_by_identity(identity)
        return developer

    async def consume_challenge(self, developer: DeveloperRow, token: str, **values) -> bool:
        """Clear the pending challenge only if it still holds ``token``.

        The WHERE clause makes read-and-consume a single statement, so a
        challenge restarted concurrently is never consumed by a stale
        confirm. Returns False when nothing matched.
        """
        stmt = (
            update(DeveloperRow)
            .where(
                DeveloperRow.developer_id == developer.developer_id,
                DeveloperRow.challenge_token == token,
            )
            .values(
                challenge_domain=None,
                challenge_token=None,
                challenge_issued_at=None,
                **values,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.refresh(developer)
        return result.rowcount == 1
