"""Top-level API router — aggregates all endpoint routers under /api."""

from fastapi import APIRouter

from app.presentation.api.endpoints.articles import router as articles_router
from app.presentation.api.endpoints.health import router as health_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(articles_router)
