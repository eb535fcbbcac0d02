"""App submission routes."""

import logging

from fastapi import APIRouter, BackgroundTasks
from fastapi.responses import JSONResponse

from minicast.dependencies import CurrentIdentity, DBSession, Fetcher, SessionFactory
from minicast.errors.exceptions import NotFoundError
from minicast.models.developer import AppView
from minicast.models.submission import SubmissionRequest, SubmissionResponse
from minicast.repositories.app_repo import AppRepository
from minicast.services.approval.submission import SubmissionService
from minicast.services.ledger import deliver_award

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Apps"])


@router.post("/apps/submit", status_code=201)
async def submit_app(
    request: SubmissionRequest,
    db: DBSession,
    identity: CurrentIdentity,
    fetcher: Fetcher,
    session_factory: SessionFactory,
    background_tasks: BackgroundTasks,
) -> JSONResponse:
    service = SubmissionService(db, fetcher)
    outcome = await service.submit(identity, request)
    await db.commit()

    # Points are awarded only after the listing is durable
    if outcome.award is not None:
        background_tasks.add_task(deliver_award, session_factory, outcome.award)

    body = SubmissionResponse(
        app=AppView.model_validate(outcome.app).model_dump(mode="json"),
        status=outcome.app.status,
        created=outcome.created,
        updated=not outcome.created,
        ownership_proven=outcome.ownership_proven,
        decided_by=outcome.decision.rule,
        message=outcome.message,
    )
    return JSONResponse(
        status_code=201 if outcome.created else 200,
        content=body.model_dump(mode="json"),
        background=background_tasks,
    )


@router.get("/apps/{app_id}")
async def get_app(app_id: str, db: DBSession) -> dict:
    app = await AppRepository(db).get(app_id)
    if not app:
        raise NotFoundError("App", app_id)
    return AppView.model_validate(app).model_dump(mode="json")
