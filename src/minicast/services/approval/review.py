"""Review actions on listings and developers: moderator decisions and owner re-review requests."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from minicast.db.base import utcnow
from minicast.db.models.app import AppRow
from minicast.db.models.developer import DeveloperRow
from minicast.errors.exceptions import AuthorizationError, NotFoundError, ValidationError
from minicast.models.enums import REVIEW_QUEUE_STATUSES, AdminRole, AppStatus
from minicast.repositories.app_repo import AppRepository
from minicast.repositories.developer_repo import DeveloperRepository
from minicast.services.identity import normalize_identity
from minicast.services.verification.state_machine import (
    grant_verification,
    has_admin_access,
    revoke_grant,
)

logger = logging.getLogger(__name__)


def require_moderator(actor: DeveloperRow | None) -> DeveloperRow:
    if actor is None or not has_admin_access(actor):
        raise AuthorizationError()
    return actor


def require_admin(actor: DeveloperRow | None) -> DeveloperRow:
    if actor is None or actor.admin_role != AdminRole.ADMIN:
        raise AuthorizationError("Admin role required")
    return actor


class ReviewService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.apps = AppRepository(session)
        self.developers = DeveloperRepository(session)

    async def _get_app(self, app_id: str) -> AppRow:
        app = await self.apps.get(app_id)
        if not app:
            raise NotFoundError("App", app_id)
        return app

    async def list_review_queue(self, actor: DeveloperRow | None) -> list[AppRow]:
        require_moderator(actor)
        return await self.apps.list_by_statuses([s.value for s in REVIEW_QUEUE_STATUSES])

    async def approve_contract(self, app_id: str, actor: DeveloperRow | None) -> AppRow:
        """Mark the app's contract as reviewed.

        This is the only path from ``pending_contract`` to ``approved``
        outside the automatic decision table.
        """
        require_moderator(actor)
        app = await self._get_app(app_id)
        if not app.contract_address:
            raise ValidationError("App has no contract address to approve")

        values = {"contract_verified": True, "verified": True}
        if app.status == AppStatus.PENDING_CONTRACT:
            values["status"] = AppStatus.APPROVED.value
        await self.apps.update(app, **values)
        logger.info(
            "contract_approved",
            extra={"app_id": app.app_id, "actor": actor.identity, "status": app.status},
        )
        return app

    async def set_status(self, app_id: str, status: AppStatus, actor: DeveloperRow | None) -> AppRow:
        require_moderator(actor)
        app = await self._get_app(app_id)
        if status == AppStatus.PENDING_CONTRACT and not app.contract_address:
            raise ValidationError("pending_contract requires a contract address")
        if (
            status == AppStatus.APPROVED
            and app.status == AppStatus.PENDING_CONTRACT
            and not app.contract_verified
        ):
            raise ValidationError(
                "App is awaiting contract review; approve it via approve-contract",
                details={"app_id": app.app_id, "status": app.status},
            )

        previous = app.status
        values = {"status": status.value}
        if status == AppStatus.APPROVED:
            values["verified"] = True
        elif status == AppStatus.REJECTED:
            values["verified"] = False
        await self.apps.update(app, **values)
        logger.info(
            "app_status_set",
            extra={"app_id": app.app_id, "actor": actor.identity, "from": previous, "to": app.status},
        )
        return app

    async def request_modification(
        self,
        app_id: str,
        developer: DeveloperRow,
        message: str,
        changes: str | None = None,
    ) -> AppRow:
        """Owner asks moderators to re-review a listing.

        The app goes back to ``pending_review`` and the request is appended,
        timestamped, to ``notes_to_admin``.
        """
        app = await self._get_app(app_id)
        if app.developer_id != developer.developer_id:
            raise AuthorizationError("You can only request modifications for your own apps")

        entry = f"[MODIFICATION REQUEST - {utcnow().isoformat()}]\nMessage: {message}"
        if changes:
            entry += f"\nChanges: {changes}"
        notes = "\n\n".join(part for part in (app.notes_to_admin, entry) if part)

        previous = app.status
        await self.apps.update(app, status=AppStatus.PENDING_REVIEW.value, notes_to_admin=notes)
        logger.info(
            "modification_requested",
            extra={"app_id": app.app_id, "developer_id": developer.developer_id, "from": previous},
        )
        return app

    async def grant_developer_verification(self, identity: str, actor: DeveloperRow | None) -> DeveloperRow:
        require_moderator(actor)
        developer = await self.developers.get_or_create(normalize_identity(identity))
        grant_verification(developer, granted_by=actor.identity)
        await self.session.flush()
        logger.info(
            "verification_granted",
            extra={"developer_id": developer.developer_id, "granted_by": actor.identity},
        )
        return developer

    async def revoke_developer_grant(self, identity: str, actor: DeveloperRow | None) -> DeveloperRow:
        require_admin(actor)
        developer = await self.developers.get_by_identity(normalize_identity(identity))
        if not developer:
            raise NotFoundError("Developer", identity)
        revoke_grant(developer)
        await self.session.flush()
        logger.info(
            "verification_grant_revoked",
            extra={"developer_id": developer.developer_id, "revoked_by": actor.identity},
        )
        return developer

    async def set_admin_role(
        self, identity: str, role: AdminRole | None, actor: DeveloperRow | None
    ) -> DeveloperRow:
        require_admin(actor)
        developer = await self.developers.get_or_create(normalize_identity(identity))
        await self.developers.update(developer, admin_role=role.value if role else None)
        logger.info(
            "admin_role_set",
            extra={"developer_id": developer.developer_id, "role": developer.admin_role, "actor": actor.identity},
        )
        return developer
