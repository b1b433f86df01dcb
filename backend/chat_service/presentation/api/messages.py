"""
Messages API Router.

  GET  /conversations/{conversation_id}/messages?cursor=&limit=
  POST /conversations/{conversation_id}/messages
  GET  /messages/{message_id}
"""

from logging import getLogger
from typing import Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from chat_service.application.commands.messages import (
    SendMessageCommand,
    SendMessageHandler,
)
from chat_service.application.dto import MessageDTO, MessagePageDTO
from chat_service.application.dto.mappers import message_to_dto
from chat_service.application.queries.messages import (
    GetMessageHandler,
    GetMessagePageHandler,
    GetMessagePageQuery,
    GetMessageQuery,
)
from chat_service.domain.value_objects import MessageType
from chat_service.presentation.api.parsing import (
    parse_conversation_id,
    parse_cursor,
    parse_message_id,
)
from chat_service.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


class SendMessageRequest(BaseModel):
    content: str
    type: MessageType = MessageType.TEXT


router = APIRouter(tags=["messages"])


@router.get("/conversations/{conversation_id}/messages", response_model=MessagePageDTO)
@inject
async def get_messages(
    conversation_id: str,
    handler: FromDishka[GetMessagePageHandler],
    cursor: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    user: AuthUser = Depends(get_current_user),
):
    result = await handler.execute(
        GetMessagePageQuery(
            conversation_id=parse_conversation_id(conversation_id),
            user_id=user.user_id,
            cursor=parse_cursor(cursor),
            limit=limit,
        )
    )
    page = result.page
    return MessagePageDTO(
        messages=[
            message_to_dto(m, result.profiles, result.business_ids) for m in page.messages
        ],
        next_cursor=str(page.next_cursor) if page.next_cursor else None,
    )


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def send_message(
    conversation_id: str,
    body: SendMessageRequest,
    handler: FromDishka[SendMessageHandler],
    user: AuthUser = Depends(get_current_user),
):
    message = await handler.execute(
        SendMessageCommand(
            conversation_id=parse_conversation_id(conversation_id),
            sender_id=user.user_id,
            content=body.content,
            type=body.type,
        )
    )
    logger.debug(f"Message {message.id} sent to {conversation_id}")
    return message_to_dto(message)


@router.get("/messages/{message_id}", response_model=MessageDTO)
@inject
async def get_message(
    message_id: str,
    handler: FromDishka[GetMessageHandler],
    user: AuthUser = Depends(get_current_user),
):
    message = await handler.execute(
        GetMessageQuery(message_id=parse_message_id(message_id), user_id=user.user_id)
    )
    return message_to_dto(message)
