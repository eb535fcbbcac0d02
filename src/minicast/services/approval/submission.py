"""App submission: fetch manifest, decide status, upsert the listing by URL."""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from minicast.config import settings
from minicast.db.models.app import AppRow
from minicast.db.models.developer import DeveloperRow
from minicast.errors.exceptions import ConflictError, ValidationError
from minicast.models.enums import AppStatus
from minicast.models.manifest import Manifest
from minicast.models.submission import SubmissionRequest
from minicast.repositories.app_repo import AppRepository
from minicast.repositories.developer_repo import DeveloperRepository
from minicast.services.approval.decision_engine import (
    Decision,
    DecisionInputs,
    decide_status,
    resolve_resubmission,
)
from minicast.services.id_generator import generate_id
from minicast.services.identity import normalize_identity
from minicast.services.ledger import SUBMISSION_REASON, PointsAward
from minicast.services.verification.manifest_fetcher import ManifestFetcher
from minicast.services.verification.ownership import is_owner, snapshot_manifest
from minicast.services.verification.state_machine import has_admin_access
from minicast.services.verification.wallet import prove_wallet_control

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "description", "category")


@dataclass
class SubmissionOutcome:
    app: AppRow
    developer: DeveloperRow
    decision: Decision
    created: bool
    ownership_proven: bool
    award: PointsAward | None = None

    @property
    def message(self) -> str:
        if not self.created:
            return "App updated successfully!"
        if self.decision.status == AppStatus.APPROVED:
            return "App submitted and approved!"
        return "App submitted for review. An admin will review it shortly."


def _pick(value, fallback):
    """Non-empty submitted value wins over the fallback."""
    if isinstance(value, (list, tuple)):
        return list(value) if value else fallback
    return value if value else fallback


class SubmissionService:
    def __init__(
        self,
        session: AsyncSession,
        fetcher: ManifestFetcher,
        default_owner: str | None = None,
        submission_points: int | None = None,
    ):
        self.session = session
        self.fetcher = fetcher
        self.default_owner = (default_owner or settings.default_owner_address).strip().lower()
        self.submission_points = (
            settings.submission_points if submission_points is None else submission_points
        )
        self.developers = DeveloperRepository(session)
        self.apps = AppRepository(session)

    async def submit(self, identity: str | None, request: SubmissionRequest) -> SubmissionOutcome:
        """Create or update the listing for ``request.url``.

        Network failures never abort a submission; they only leave the
        ownership fact unproven. The caller commits, then delivers
        ``outcome.award`` after the commit.
        """
        identity = normalize_identity(identity)
        developer = await self.developers.get_or_create(identity)

        if request.signature:
            prove_wallet_control(developer, request.signature, request.signature_domain)
            await self.session.flush()

        manifest = await self.fetcher.fetch(request.url)
        ownership_proven = is_owner(identity, manifest, self.default_owner)

        existing = await self.apps.get_by_url(request.url)
        if existing is None:
            created = await self._create(developer, request, manifest, ownership_proven)
            if created is not None:
                return created
            # Lost the insert race to a concurrent first submission
            existing = await self.apps.get_by_url(request.url)
            if existing is None:
                raise ConflictError("A concurrent submission for this URL is in progress; retry")

        return await self._update(existing, developer, request, manifest, ownership_proven)

    def _fill_from_manifest(self, request: SubmissionRequest, manifest: Manifest | None) -> dict:
        m = manifest or Manifest()
        return {
            "name": request.name or (m.name or "")[:100],
            "description": request.description or (m.description or "")[:500],
            "category": request.category or (m.category or ""),
            "icon_url": request.icon_url or m.icon,
            "header_image_url": request.header_image_url or m.og_image,
            "screenshots": request.screenshots or m.screenshots,
        }

    async def _create(
        self,
        developer: DeveloperRow,
        request: SubmissionRequest,
        manifest: Manifest | None,
        ownership_proven: bool,
    ) -> SubmissionOutcome | None:
        filled = self._fill_from_manifest(request, manifest)
        missing = [field for field in REQUIRED_FIELDS if not filled[field]]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing": missing},
            )

        decision = decide_status(
            developer,
            DecisionInputs(
                ownership_proven=ownership_proven,
                contract_address=request.contract_address,
                review_message=request.review_message,
            ),
        )
        app = await self.apps.create_unique(
            app_id=generate_id("app_"),
            url=request.url,
            developer_id=developer.developer_id,
            name=filled["name"],
            description=filled["description"],
            category=filled["category"],
            icon_url=filled["icon_url"] or None,
            header_image_url=filled["header_image_url"] or None,
            base_mini_app_url=request.base_mini_app_url or None,
            farcaster_url=request.farcaster_url or None,
            tags=request.tags,
            developer_tags=request.developer_tags,
            screenshots=filled["screenshots"] or [],
            review_message=request.review_message or None,
            notes_to_admin=request.notes_to_admin or None,
            support_email=request.support_email or None,
            twitter_url=request.twitter_url or None,
            status=decision.status.value,
            verified=has_admin_access(developer),
            contract_address=request.contract_address or None,
            contract_verified=False,
            manifest_snapshot=snapshot_manifest(manifest, self.default_owner),
        )
        if app is None:
            return None

        logger.info(
            "app_submitted",
            extra={
                "app_id": app.app_id,
                "developer_id": developer.developer_id,
                "status": app.status,
                "rule": decision.rule,
            },
        )
        award = None
        if self.submission_points > 0:
            award = PointsAward(
                identity=developer.identity,
                amount=self.submission_points,
                reason=SUBMISSION_REASON,
                reference_id=app.app_id,
                description=f'Earned {self.submission_points} points for listing "{app.name}"',
            )
        return SubmissionOutcome(
            app=app,
            developer=developer,
            decision=decision,
            created=True,
            ownership_proven=ownership_proven,
            award=award,
        )

    async def _update(
        self,
        app: AppRow,
        developer: DeveloperRow,
        request: SubmissionRequest,
        manifest: Manifest | None,
        ownership_proven: bool,
    ) -> SubmissionOutcome:
        if app.developer_id != developer.developer_id:
            raise ConflictError(
                "This URL is already registered by another developer. "
                "If this is your app, please contact support.",
                details={"existing_app_id": app.app_id},
            )

        filled = self._fill_from_manifest(request, manifest)
        contract_address = request.contract_address or app.contract_address
        review_message = request.review_message or app.review_message

        decision = resolve_resubmission(
            app.status,
            decide_status(
                developer,
                DecisionInputs(
                    ownership_proven=ownership_proven,
                    contract_address=contract_address,
                    review_message=review_message,
                ),
            ),
        )
        previous_status = app.status

        await self.apps.update(
            app,
            name=_pick(filled["name"], app.name),
            description=_pick(filled["description"], app.description),
            category=_pick(filled["category"], app.category),
            icon_url=_pick(filled["icon_url"], app.icon_url),
            header_image_url=_pick(filled["header_image_url"], app.header_image_url),
            base_mini_app_url=_pick(request.base_mini_app_url, app.base_mini_app_url),
            farcaster_url=_pick(request.farcaster_url, app.farcaster_url),
            tags=_pick(request.tags, app.tags or []),
            developer_tags=_pick(request.developer_tags, app.developer_tags or []),
            screenshots=_pick(filled["screenshots"], app.screenshots or []),
            review_message=review_message,
            notes_to_admin=_pick(request.notes_to_admin, app.notes_to_admin),
            support_email=_pick(request.support_email, app.support_email),
            twitter_url=_pick(request.twitter_url, app.twitter_url),
            contract_address=contract_address,
            status=decision.status.value,
            verified=bool(app.verified) or has_admin_access(developer),
            manifest_snapshot=(
                snapshot_manifest(manifest, self.default_owner) if manifest else app.manifest_snapshot
            ),
        )
        logger.info(
            "app_updated",
            extra={
                "app_id": app.app_id,
                "developer_id": developer.developer_id,
                "previous_status": previous_status,
                "status": app.status,
                "rule": decision.rule,
            },
        )
        return SubmissionOutcome(
            app=app,
            developer=developer,
            decision=decision,
            created=False,
            ownership_proven=ownership_proven,
        )
