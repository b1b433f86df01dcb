"""
Conversations API Router.

Thin layer: request model → command/query → handler → DTO. Domain errors
propagate to the exception handlers registered in the app factory.

  POST /conversations/direct
  POST /conversations/group
  POST /conversations/business
  GET  /conversations
  GET  /conversations/{conversation_id}
  POST /conversations/{conversation_id}/participants
"""

from logging import getLogger
from typing import Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from chat_service.application.commands.conversations import (
    AddParticipantsCommand,
    AddParticipantsHandler,
    CreateBusinessConversationCommand,
    CreateBusinessConversationHandler,
    CreateDirectConversationCommand,
    CreateDirectConversationHandler,
    CreateGroupConversationCommand,
    CreateGroupConversationHandler,
)
from chat_service.application.dto import ConversationDTO, ConversationListDTO, ParticipantDTO
from chat_service.application.dto.mappers import (
    conversation_to_dto,
    participant_to_dto,
)
from chat_service.application.queries.conversations import (
    GetConversationHandler,
    GetConversationQuery,
    ListConversationsHandler,
    ListConversationsQuery,
)
from chat_service.presentation.api.parsing import (
    parse_business_id,
    parse_conversation_id,
    parse_user_id,
)
from chat_service.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class CreateDirectRequest(BaseModel):
    target_user_id: str


class CreateGroupRequest(BaseModel):
    participant_ids: list[str] = Field(default_factory=list)
    name: Optional[str] = None


class CreateBusinessRequest(BaseModel):
    business_id: str
    initial_message: Optional[str] = None
    name: Optional[str] = None


class AddParticipantsRequest(BaseModel):
    user_ids: list[str] = Field(min_length=1)


class AddParticipantsResponse(BaseModel):
    added: list[ParticipantDTO]


# ==================== ROUTER ====================

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("/direct", response_model=ConversationDTO, status_code=status.HTTP_201_CREATED)
@inject
async def create_direct_conversation(
    body: CreateDirectRequest,
    handler: FromDishka[CreateDirectConversationHandler],
    user: AuthUser = Depends(get_current_user),
):
    conversation = await handler.execute(
        CreateDirectConversationCommand(
            creator_id=user.user_id,
            target_user_id=parse_user_id(body.target_user_id, "target_user_id"),
        )
    )
    return conversation_to_dto(conversation)


@router.post("/group", response_model=ConversationDTO, status_code=status.HTTP_201_CREATED)
@inject
async def create_group_conversation(
    body: CreateGroupRequest,
    handler: FromDishka[CreateGroupConversationHandler],
    user: AuthUser = Depends(get_current_user),
):
    conversation = await handler.execute(
        CreateGroupConversationCommand(
            creator_id=user.user_id,
            participant_ids=tuple(
                parse_user_id(raw, "participant_ids") for raw in body.participant_ids
            ),
            name=body.name,
        )
    )
    return conversation_to_dto(conversation)


@router.post("/business", response_model=ConversationDTO, status_code=status.HTTP_201_CREATED)
@inject
async def create_business_conversation(
    body: CreateBusinessRequest,
    handler: FromDishka[CreateBusinessConversationHandler],
    user: AuthUser = Depends(get_current_user),
):
    result = await handler.execute(
        CreateBusinessConversationCommand(
            creator_id=user.user_id,
            business_id=parse_business_id(body.business_id),
            initial_message=body.initial_message,
            name=body.name,
        )
    )
    return conversation_to_dto(result.conversation, last_message=result.initial_message)


@router.get("", response_model=ConversationListDTO)
@inject
async def list_conversations(
    handler: FromDishka[ListConversationsHandler],
    user: AuthUser = Depends(get_current_user),
):
    result = await handler.execute(ListConversationsQuery(user_id=user.user_id))
    conversations = [
        conversation_to_dto(
            summary.conversation,
            summary.participants,
            result.profiles,
            unread_count=summary.unread_count,
            last_message=summary.last_message,
        )
        for summary in result.summaries
    ]
    return ConversationListDTO(conversations=conversations, total=len(conversations))


@router.get("/{conversation_id}", response_model=ConversationDTO)
@inject
async def get_conversation(
    conversation_id: str,
    handler: FromDishka[GetConversationHandler],
    user: AuthUser = Depends(get_current_user),
):
    result = await handler.execute(
        GetConversationQuery(
            conversation_id=parse_conversation_id(conversation_id),
            user_id=user.user_id,
        )
    )
    return conversation_to_dto(
        result.details.conversation,
        result.details.participants,
        result.profiles,
        unread_count=result.unread_count,
    )


@router.post("/{conversation_id}/participants", response_model=AddParticipantsResponse)
@inject
async def add_participants(
    conversation_id: str,
    body: AddParticipantsRequest,
    handler: FromDishka[AddParticipantsHandler],
    user: AuthUser = Depends(get_current_user),
):
    added = await handler.execute(
        AddParticipantsCommand(
            conversation_id=parse_conversation_id(conversation_id),
            requesting_user_id=user.user_id,
            user_ids=tuple(parse_user_id(raw, "user_ids") for raw in body.user_ids),
        )
    )
    return AddParticipantsResponse(added=[participant_to_dto(p) for p in added])
