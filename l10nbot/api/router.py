from fastapi import APIRouter

from l10nbot.api.routes import health, repositories, scan, translation

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(scan.router, prefix="/scan", tags=["scan"])
api_router.include_router(translation.router, prefix="/translate", tags=["translate"])
api_router.include_router(repositories.router, prefix="/repositories", tags=["repositories"])
