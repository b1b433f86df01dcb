"""
Notifications API Router - unread counters, read pointers, mute.

  GET /notifications/unread-counts
  GET /notifications/conversations/{conversation_id}/unread-count
  PUT /notifications/conversations/{conversation_id}/mark-read
  PUT /notifications/conversations/{conversation_id}/mute
"""

from typing import Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from chat_service.application.commands.notifications import (
    MarkReadCommand,
    MarkReadHandler,
    SetMuteCommand,
    SetMuteHandler,
)
from chat_service.application.dto import (
    MarkReadResultDTO,
    MuteStateDTO,
    UnreadCountDTO,
    UnreadCountsDTO,
)
from chat_service.application.queries.notifications import (
    GetUnreadCountHandler,
    GetUnreadCountQuery,
    GetUnreadCountsHandler,
    GetUnreadCountsQuery,
)
from chat_service.presentation.api.parsing import parse_conversation_id
from chat_service.presentation.dependencies.auth import AuthUser, get_current_user


class MarkReadRequest(BaseModel):
    up_to_sequence: Optional[int] = Field(default=None, ge=0)


class MuteRequest(BaseModel):
    is_muted: bool


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/unread-counts", response_model=UnreadCountsDTO)
@inject
async def get_unread_counts(
    handler: FromDishka[GetUnreadCountsHandler],
    user: AuthUser = Depends(get_current_user),
):
    counts = await handler.execute(GetUnreadCountsQuery(user_id=user.user_id))
    return UnreadCountsDTO(
        user_id=user.user_id.value,
        unread_counts={cid.value: n for cid, n in counts.counts.items()},
        total_unread=counts.total,
    )


@router.get(
    "/conversations/{conversation_id}/unread-count", response_model=UnreadCountDTO
)
@inject
async def get_unread_count(
    conversation_id: str,
    handler: FromDishka[GetUnreadCountHandler],
    user: AuthUser = Depends(get_current_user),
):
    count = await handler.execute(
        GetUnreadCountQuery(
            conversation_id=parse_conversation_id(conversation_id),
            user_id=user.user_id,
        )
    )
    return UnreadCountDTO(conversation_id=conversation_id, unread_count=count)


@router.put(
    "/conversations/{conversation_id}/mark-read", response_model=MarkReadResultDTO
)
@inject
async def mark_read(
    conversation_id: str,
    handler: FromDishka[MarkReadHandler],
    body: Optional[MarkReadRequest] = None,
    user: AuthUser = Depends(get_current_user),
):
    result = await handler.execute(
        MarkReadCommand(
            conversation_id=parse_conversation_id(conversation_id),
            user_id=user.user_id,
            up_to_sequence=body.up_to_sequence if body else None,
        )
    )
    return MarkReadResultDTO(
        conversation_id=conversation_id,
        up_to_sequence=result.up_to_sequence,
        advanced=result.advanced,
    )


@router.put("/conversations/{conversation_id}/mute", response_model=MuteStateDTO)
@inject
async def set_mute(
    conversation_id: str,
    body: MuteRequest,
    handler: FromDishka[SetMuteHandler],
    user: AuthUser = Depends(get_current_user),
):
    is_muted = await handler.execute(
        SetMuteCommand(
            conversation_id=parse_conversation_id(conversation_id),
            user_id=user.user_id,
            is_muted=body.is_muted,
        )
    )
    return MuteStateDTO(conversation_id=conversation_id, is_muted=is_muted)
