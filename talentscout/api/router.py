from __future__ import annotations

from fastapi import APIRouter

from talentscout.api.routers import github

router = APIRouter(prefix="/api/v1")
router.include_router(github.router)
