"""
Bid feed ingestion
==================

POST /api/v1/bid-feed -- queue a batch of partner bids for the feed worker

Bids are validated for shape here and queued in request order; the worker
applies them later, so engine rejections (closed or unknown booking) are
only logged.  Use ``POST /bookings/{id}/bids`` for a synchronous answer.
"""

from fastapi import APIRouter, HTTPException, Request

from freight.api.middleware import limiter
from freight.api.schemas import BidFeedRequest, BidFeedResponse, ErrorResponse
from freight.config import settings
from freight.workers import bid_feed
from freight.workers.bid_feed import BidSubmission

router = APIRouter(prefix="/bid-feed", tags=["bid feed"])


@router.post(
    "",
    response_model=BidFeedResponse,
    status_code=202,
    summary="Queue bids for asynchronous intake",
    responses={503: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def ingest_bids(request: Request, body: BidFeedRequest):
    queued = 0
    try:
        for item in body.bids:
            bid_feed.enqueue_bid(BidSubmission(**item.model_dump()))
            queued += 1
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return BidFeedResponse(queued=queued, pending=bid_feed.pending())
