"""
Friends API Endpoints.
"""

from typing import Literal

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.friend import (
    FriendRequestAnswer,
    FriendRequestCreate,
    FriendRequestResponse,
    FriendshipStatusResponse,
)
from modules.backend.schemas.user import MemberResponse, UserSummary
from modules.backend.services.friend import FriendService

router = APIRouter()


@router.post(
    "/request",
    response_model=ApiResponse[FriendRequestResponse],
    status_code=201,
    summary="Send a friend request",
)
async def send_request(
    data: FriendRequestCreate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[FriendRequestResponse]:
    request = await FriendService(db).send_request(user, data.to_user_id)
    return ApiResponse(data=FriendRequestResponse.model_validate(request))


@router.get(
    "/requests/{direction}",
    response_model=ApiResponse[list[FriendRequestResponse]],
    summary="List pending friend requests you sent or received",
)
async def list_requests(
    direction: Literal["sent", "received"],
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[FriendRequestResponse]]:
    service = FriendService(db)
    if direction == "sent":
        rows = await service.sent_requests(user.id)
    else:
        rows = await service.received_requests(user.id)
    return ApiResponse(
        data=[
            FriendRequestResponse.model_validate(request).model_copy(
                update={"user": UserSummary.model_validate(other) if other else None}
            )
            for request, other in rows
        ]
    )


@router.put(
    "/requests/{request_id}",
    response_model=ApiResponse[FriendRequestResponse],
    summary="Accept or reject a friend request",
)
async def answer_request(
    request_id: str,
    data: FriendRequestAnswer,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[FriendRequestResponse]:
    request = await FriendService(db).answer_request(user, request_id, data.status)
    return ApiResponse(data=FriendRequestResponse.model_validate(request))


@router.get(
    "",
    response_model=ApiResponse[list[MemberResponse]],
    summary="List your friends",
)
async def list_friends(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[MemberResponse]]:
    friends = await FriendService(db).friends(user.id)
    return ApiResponse(data=[MemberResponse.model_validate(f) for f in friends])


@router.get(
    "/status/{other_id}",
    response_model=ApiResponse[FriendshipStatusResponse],
    summary="Friendship status with another member",
)
async def friendship_status(
    other_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[FriendshipStatusResponse]:
    status = await FriendService(db).status_with(user.id, other_id)
    return ApiResponse(data=FriendshipStatusResponse(status=status))
