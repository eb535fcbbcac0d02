"""Moderator/admin review routes."""

from fastapi import APIRouter

from minicast.dependencies import Actor, DBSession
from minicast.models.developer import (
    AppStatusUpdate,
    AppView,
    DeveloperView,
    IdentityRequest,
    RoleAssignment,
)
from minicast.services.approval.review import ReviewService

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/apps/pending")
async def list_pending_apps(db: DBSession, actor: Actor) -> list[dict]:
    apps = await ReviewService(db).list_review_queue(actor)
    return [AppView.model_validate(a).model_dump(mode="json") for a in apps]


@router.post("/apps/{app_id}/approve-contract")
async def approve_contract(app_id: str, db: DBSession, actor: Actor) -> dict:
    app = await ReviewService(db).approve_contract(app_id, actor)
    await db.commit()
    return AppView.model_validate(app).model_dump(mode="json")


@router.post("/apps/{app_id}/status")
async def set_app_status(app_id: str, body: AppStatusUpdate, db: DBSession, actor: Actor) -> dict:
    app = await ReviewService(db).set_status(app_id, body.status, actor)
    await db.commit()
    return AppView.model_validate(app).model_dump(mode="json")


@router.post("/developers/grant-verification")
async def grant_verification(body: IdentityRequest, db: DBSession, actor: Actor) -> dict:
    developer = await ReviewService(db).grant_developer_verification(body.identity, actor)
    await db.commit()
    return DeveloperView.model_validate(developer).model_dump(mode="json")


@router.post("/developers/revoke-grant")
async def revoke_grant(body: IdentityRequest, db: DBSession, actor: Actor) -> dict:
    developer = await ReviewService(db).revoke_developer_grant(body.identity, actor)
    await db.commit()
    return DeveloperView.model_validate(developer).model_dump(mode="json")


@router.post("/developers/role")
async def set_role(body: RoleAssignment, db: DBSession, actor: Actor) -> dict:
    developer = await ReviewService(db).set_admin_role(body.identity, body.role, actor)
    await db.commit()
    return DeveloperView.model_validate(developer).model_dump(mode="json")
