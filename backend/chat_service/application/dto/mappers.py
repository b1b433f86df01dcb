"""Entity → DTO mapping with profile enrichment."""

from typing import Iterable, Optional

from chat_service.application.common.profiles import profile_for
from chat_service.application.dto.conversation import ConversationDTO, ParticipantDTO
from chat_service.application.dto.message import MessageDTO
from chat_service.application.dto.profile import ProfileDTO
from chat_service.application.services.profile_cache import ProfileBatch
from chat_service.domain.entities.conversation import Conversation
from chat_service.domain.entities.message import Message
from chat_service.domain.entities.participant import Participant
from chat_service.domain.value_objects import ParticipantRole


def participant_to_dto(
    participant: Participant, profiles: Optional[ProfileBatch] = None
) -> ParticipantDTO:
    profile = None
    if profiles is not None:
        bucket = (
            profiles.businesses
            if participant.role is ParticipantRole.BUSINESS
            else profiles.users
        )
        profile = bucket.get(participant.user_id.value)
    return ParticipantDTO(
        user_id=participant.user_id.value,
        role=participant.role.value,
        joined_at=participant.joined_at,
        last_read_sequence=participant.last_read_sequence,
        is_muted=participant.is_muted,
        profile=ProfileDTO.from_profile(profile),
    )


def message_to_dto(
    message: Message,
    profiles: Optional[ProfileBatch] = None,
    business_ids: Iterable[str] = (),
) -> MessageDTO:
    sender = profile_for(message.sender_id, profiles, business_ids) if profiles else None
    return MessageDTO.from_entity(message, sender)


def conversation_to_dto(
    conversation: Conversation,
    participants: Iterable[Participant] = (),
    profiles: Optional[ProfileBatch] = None,
    unread_count: Optional[int] = None,
    last_message: Optional[Message] = None,
) -> ConversationDTO:
    participants = list(participants)
    business_ids = {
        p.user_id.value for p in participants if p.role is ParticipantRole.BUSINESS
    }
    business = None
    if conversation.business_id is not None and profiles is not None:
        business = profiles.businesses.get(conversation.business_id.value)
    return ConversationDTO(
        id=conversation.id.value,
        type=conversation.type.value,
        name=conversation.name,
        business_id=conversation.business_id.value if conversation.business_id else None,
        created_at=conversation.created_at,
        last_activity=conversation.last_activity,
        participants=[participant_to_dto(p, profiles) for p in participants],
        unread_count=unread_count,
        last_message=(
            message_to_dto(last_message, profiles, business_ids) if last_message else None
        ),
        business=ProfileDTO.from_profile(business),
    )
