"""
Swap endpoints - claim, decide, complete, review and chat.
Challenge: Every failure kind surfaces as its own status code and message.
Design: Thin controller; SwapService holds the state machine, DomainError
subclasses are rendered by the app-level handler.
"""

from typing import Literal

from fastapi import APIRouter, Query, status

from app.config import get_settings
from app.core.dependencies import CurrentUserId, SwapServiceDep
from app.db.models.swap import SwapStatus
from app.schemas.swap import (
    MessageCreate,
    MessageResponse,
    SwapCreate,
    SwapPage,
    SwapResponse,
    SwapReviewCreate,
    SwapStatusUpdate,
)

router = APIRouter()
settings = get_settings()


@router.get("/my-swaps", response_model=SwapPage)
async def my_swaps(
    svc: SwapServiceDep,
    user_id: CurrentUserId,
    role: Literal["requester", "provider", "all"] = "all",
    status_filter: SwapStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """Swaps the caller requested or provides, newest first."""
    return await svc.list_my_swaps(user_id, role=role, status=status_filter, page=page, limit=limit)


@router.get("/pending", response_model=list[SwapResponse])
async def pending_swaps(svc: SwapServiceDep, user_id: CurrentUserId):
    """Requests waiting for the caller's accept/reject decision."""
    return await svc.list_pending(user_id)


@router.post("", response_model=SwapResponse, status_code=status.HTTP_201_CREATED)
async def create_swap(svc: SwapServiceDep, user_id: CurrentUserId, data: SwapCreate):
    """Request a listing. 409 when someone else got it first."""
    return await svc.request_swap(user_id, data)


@router.get("/{swap_id}", response_model=SwapResponse)
async def get_swap(svc: SwapServiceDep, user_id: CurrentUserId, swap_id: int):
    return await svc.get_swap(swap_id, user_id)


@router.put("/{swap_id}/status", response_model=SwapResponse)
async def update_swap_status(
    svc: SwapServiceDep, user_id: CurrentUserId, swap_id: int, data: SwapStatusUpdate
):
    """Accept/reject (provider), complete (requester), cancel (either)."""
    return await svc.set_status(swap_id, user_id, data.status)


@router.put("/{swap_id}/review", response_model=SwapResponse)
async def review_swap(
    svc: SwapServiceDep, user_id: CurrentUserId, swap_id: int, data: SwapReviewCreate
):
    return await svc.submit_review(swap_id, user_id, data.review_for, data.rating, data.review)


@router.post(
    "/{swap_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED
)
async def add_message(
    svc: SwapServiceDep, user_id: CurrentUserId, swap_id: int, data: MessageCreate
):
    return await svc.add_message(swap_id, user_id, data.content)


@router.get("/{swap_id}/messages", response_model=list[MessageResponse])
async def list_messages(svc: SwapServiceDep, user_id: CurrentUserId, swap_id: int):
    return await svc.list_messages(swap_id, user_id)
