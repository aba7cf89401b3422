"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter

from app.api.routes import auth, sweets

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(sweets.router, prefix="/sweets", tags=["sweets"])
