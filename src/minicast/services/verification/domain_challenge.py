"""Domain ownership challenge: publish a server-issued token, then confirm it."""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from urllib.parse import urlsplit

from sqlalchemy.ext.asyncio import AsyncSession

from minicast.config import settings
from minicast.db.base import utcnow
from minicast.db.models.developer import DeveloperRow
from minicast.errors.exceptions import (
    ChallengeExpiredError,
    ChallengeNotFoundError,
    ContentMismatchError,
    FetchFailedError,
    RemoteUnavailable,
    ValidationError,
)
from minicast.repositories.developer_repo import DeveloperRepository
from minicast.services.verification.manifest_fetcher import ManifestFetcher
from minicast.services.verification.state_machine import (
    VerificationFacts,
    prove_domain,
    status_values,
)

logger = logging.getLogger(__name__)

CHALLENGE_PATH = "/.well-known/miniapp-verification.txt"


@dataclass(frozen=True)
class ChallengeInstructions:
    domain: str
    token: str
    file_path: str
    file_url: str
    file_content: str
    issued_at: datetime
    expires_at: datetime


def challenge_origin(domain: str) -> str:
    """Validate a claimed domain and reduce it to its origin."""
    if not domain or not isinstance(domain, str):
        raise ValidationError("Domain is required")
    parts = urlsplit(domain.strip())
    if parts.scheme not in ("http", "https"):
        raise ValidationError("Domain must use http:// or https://")
    if not parts.hostname:
        raise ValidationError("Invalid domain format")
    return f"{parts.scheme}://{parts.netloc}".lower()


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class DomainChallengeService:
    def __init__(self, session: AsyncSession, fetcher: ManifestFetcher, ttl_minutes: int | None = None):
        self.session = session
        self.fetcher = fetcher
        self.repo = DeveloperRepository(session)
        self.ttl = timedelta(minutes=ttl_minutes or settings.challenge_ttl_minutes)

    async def start(self, developer: DeveloperRow, domain: str) -> ChallengeInstructions:
        """Issue a fresh token, replacing any challenge already pending."""
        origin = challenge_origin(domain)
        token = secrets.token_hex(16)
        issued_at = utcnow()

        await self.repo.update(
            developer,
            challenge_domain=origin,
            challenge_token=token,
            challenge_issued_at=issued_at,
        )
        logger.info(
            "domain_challenge_started",
            extra={"developer_id": developer.developer_id, "domain": origin},
        )
        return ChallengeInstructions(
            domain=origin,
            token=token,
            file_path=CHALLENGE_PATH,
            file_url=f"{origin}{CHALLENGE_PATH}",
            file_content=token,
            issued_at=issued_at,
            expires_at=issued_at + self.ttl,
        )

    async def confirm(self, developer: DeveloperRow) -> DeveloperRow:
        """Check the published token and record the domain fact.

        The challenge is single use: success consumes it, expiry
        discards it, a mismatch or fetch failure leaves it pending so the
        developer can publish the file and retry.
        """
        token = developer.challenge_token
        origin = developer.challenge_domain
        if not token or not origin:
            raise ChallengeNotFoundError()

        issued_at = developer.challenge_issued_at
        if issued_at and _aware(issued_at) + self.ttl < utcnow():
            await self.repo.consume_challenge(developer, token)
            await self.session.commit()
            raise ChallengeExpiredError()

        file_url = f"{origin}{CHALLENGE_PATH}"
        try:
            content = await self.fetcher.fetch_text(file_url)
        except RemoteUnavailable as exc:
            raise FetchFailedError(
                f"Could not fetch verification file at {file_url}",
                details={"reason": str(exc)},
            ) from exc

        if content.strip() != token:
            raise ContentMismatchError()

        values = status_values(developer, prove_domain(VerificationFacts.from_row(developer)))
        consumed = await self.repo.consume_challenge(
            developer, token, verified_domain=origin, **values
        )
        if not consumed:
            raise ChallengeNotFoundError("Domain challenge was restarted; publish and confirm the new token")

        logger.info(
            "domain_challenge_confirmed",
            extra={
                "developer_id": developer.developer_id,
                "domain": origin,
                "verification_status": developer.verification_status,
            },
        )
        return developer
