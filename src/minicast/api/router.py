"""Master API router mounted at /api/v1."""

from fastapi import APIRouter

from minicast.api.routes import admin, apps, developers, health

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(apps.router)
api_router.include_router(developers.router)
api_router.include_router(admin.router)
