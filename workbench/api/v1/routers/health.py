from fastapi import APIRouter

from workbench.core.limiter import limiter
from workbench.core.health import (
    live_payload,
    ready_payload,
    status_summary_payload,
)

router = APIRouter(tags=["health"])


@router.get("/health/live", summary="Service liveness check")
@limiter.exempt
async def health_live() -> dict:
    return await live_payload()


@router.get("/health/ready", summary="Service readiness check")
@limiter.exempt
async def health_ready() -> dict:
    return await ready_payload()


@router.get("/status/summary", tags=["status"], summary="Service status summary including catalog state")
@limiter.exempt
async def status_summary() -> dict:
    return await status_summary_payload()
