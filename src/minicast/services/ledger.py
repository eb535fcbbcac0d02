"""Points ledger sink.

Awards are best effort: they run after the submission transaction has
committed, in their own session, and a failure is logged without ever
reaching the submitter.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from minicast.repositories.points_repo import PointsTransactionRepository, UserPointsRepository
from minicast.services.id_generator import generate_id

logger = logging.getLogger(__name__)

SUBMISSION_REASON = "submit"


@dataclass(frozen=True)
class PointsAward:
    identity: str
    amount: int
    reason: str
    reference_id: str | None = None
    description: str | None = None


async def award_points(
    session: AsyncSession,
    identity: str,
    amount: int,
    reason: str,
    reference_id: str | None = None,
    description: str | None = None,
) -> str:
    """Record a points transaction and bump the identity's balance."""
    transaction_id = generate_id("pts_")
    await PointsTransactionRepository(session).create(
        transaction_id=transaction_id,
        identity=identity,
        points=amount,
        reason=reason,
        description=description,
        reference_id=reference_id,
    )
    await UserPointsRepository(session).increment(identity, amount)
    return transaction_id


async def deliver_award(session_factory: async_sessionmaker, award: PointsAward) -> bool:
    """Post-commit task: apply one award, logging instead of raising on failure."""
    try:
        async with session_factory() as session:
            await award_points(
                session,
                award.identity,
                award.amount,
                award.reason,
                reference_id=award.reference_id,
                description=award.description,
            )
            await session.commit()
    except Exception as exc:
        logger.error(
            "ledger_award_failed",
            extra={
                "identity": award.identity,
                "amount": award.amount,
                "reference_id": award.reference_id,
                "error": str(exc),
            },
        )
        return False
    logger.info(
        "ledger_award_applied",
        extra={"identity": award.identity, "amount": award.amount, "reference_id": award.reference_id},
    )
    return True
