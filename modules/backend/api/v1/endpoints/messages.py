"""
Messages API Endpoints.

Direct messages between verified members.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import DbSession, VerifiedUser
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.message import (
    ConversationResponse,
    MessageCreate,
    MessageResponse,
)
from modules.backend.schemas.user import UserSummary
from modules.backend.services.message import MessageService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[MessageResponse],
    status_code=201,
    summary="Send a message",
)
async def send_message(
    data: MessageCreate,
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[MessageResponse]:
    message = await MessageService(db).send(user, data.receiver_id, data.content)
    return ApiResponse(data=MessageResponse.model_validate(message))


@router.get(
    "/conversations",
    response_model=ApiResponse[list[ConversationResponse]],
    summary="Latest message per conversation partner",
)
async def list_conversations(
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[list[ConversationResponse]]:
    conversations = await MessageService(db).conversations(user.id)
    return ApiResponse(
        data=[
            ConversationResponse(
                partner=UserSummary.model_validate(c.partner),
                last_message=MessageResponse.model_validate(c.last_message),
                unread_count=c.unread_count,
            )
            for c in conversations
        ]
    )


@router.get(
    "/{user_id}",
    response_model=ApiResponse[list[MessageResponse]],
    summary="Conversation with a member",
    description="Oldest first. Marks your received messages as read.",
)
async def get_conversation(
    user_id: str,
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[list[MessageResponse]]:
    messages = await MessageService(db).conversation_with(user.id, user_id)
    return ApiResponse(data=[MessageResponse.model_validate(m) for m in messages])


@router.patch(
    "/{message_id}/read",
    response_model=ApiResponse[MessageResponse],
    summary="Mark a received message as read",
)
async def mark_message_read(
    message_id: str,
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[MessageResponse]:
    message = await MessageService(db).mark_read(user.id, message_id)
    return ApiResponse(data=MessageResponse.model_validate(message))
