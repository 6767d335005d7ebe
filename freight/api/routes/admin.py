"""
Admin / observability endpoints
===============================

GET /api/v1/admin/stats  -- booking counts per status, total bids, queued feed events
GET /api/v1/admin/health -- simple health check
"""

from fastapi import APIRouter, Depends, Request

from freight.api.dependencies import get_container
from freight.api.middleware import limiter
from freight.api.schemas import HealthResponse
from freight.config import settings
from freight.wiring import Container
from freight.workers import bid_feed

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/stats",
    response_model=dict[str, int],
    summary="Engine counters",
)
@limiter.limit(settings.rate_limit)
async def stats(request: Request, container: Container = Depends(get_container)):
    out = container.registry.stats()
    out["pending_feed_bids"] = bid_feed.pending()
    return out


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
