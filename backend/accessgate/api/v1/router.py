"""API v1 root router."""

from __future__ import annotations

from fastapi import APIRouter

from accessgate.api.v1.access import router as access_router


router = APIRouter()
router.include_router(access_router, prefix="/access", tags=["access"])
