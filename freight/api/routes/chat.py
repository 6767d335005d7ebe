"""
Chat endpoints
==============

GET  /api/v1/bookings/{booking_id}/messages -- history, oldest first
POST /api/v1/bookings/{booking_id}/messages -- send (only after a bid is accepted)
"""

from fastapi import APIRouter, Depends, Request

from freight.api.dependencies import get_container
from freight.api.middleware import limiter
from freight.api.schemas import ChatMessageRequest, ChatMessageResponse, ErrorResponse
from freight.config import settings
from freight.wiring import Container

router = APIRouter(prefix="/bookings", tags=["chat"])


@router.get(
    "/{booking_id}/messages",
    response_model=list[ChatMessageResponse],
    summary="Chat history for a booking",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def list_messages(
    request: Request,
    booking_id: str,
    container: Container = Depends(get_container),
):
    messages = await container.chat.history(booking_id)
    return [ChatMessageResponse.model_validate(m) for m in messages]


@router.post(
    "/{booking_id}/messages",
    status_code=201,
    response_model=ChatMessageResponse,
    summary="Send a chat message",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def send_message(
    request: Request,
    booking_id: str,
    body: ChatMessageRequest,
    container: Container = Depends(get_container),
):
    message = await container.chat.send(booking_id, body.sender_role, body.text)
    return ChatMessageResponse.model_validate(message)
