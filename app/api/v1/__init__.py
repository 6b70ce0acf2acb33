"""V1 API router aggregation."""

from fastapi import APIRouter

from app.api.v1.ashrams import router as ashrams_router
from app.api.v1.assets import router as assets_router
from app.api.v1.auth import router as auth_router
from app.api.v1.dashboard import router as dashboard_router
from app.api.v1.users import router as users_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(auth_router)
v1_router.include_router(users_router)
v1_router.include_router(ashrams_router)
v1_router.include_router(assets_router)
v1_router.include_router(dashboard_router)
