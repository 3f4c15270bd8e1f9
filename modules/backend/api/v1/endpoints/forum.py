"""
Forum API Endpoints.

Categories are admin-managed. Posting and replying require verified membership.
"""

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import (
    AdminUser,
    CurrentUser,
    DbSession,
    RequestId,
    VerifiedUser,
)
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.forum import (
    ForumCategoryCreate,
    ForumCategoryResponse,
    ForumPostCreate,
    ForumPostDetailResponse,
    ForumPostResponse,
    ForumReplyCreate,
    ForumReplyResponse,
)
from modules.backend.schemas.user import UserSummary
from modules.backend.services.forum import ForumService

router = APIRouter()


@router.get(
    "/categories",
    response_model=ApiResponse[list[ForumCategoryResponse]],
    summary="List forum categories",
)
async def list_categories(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[ForumCategoryResponse]]:
    categories = await ForumService(db).list_categories()
    return ApiResponse(data=[ForumCategoryResponse.model_validate(c) for c in categories])


@router.post(
    "/categories",
    response_model=ApiResponse[ForumCategoryResponse],
    status_code=201,
    summary="Create a forum category (admin)",
)
async def create_category(
    data: ForumCategoryCreate,
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[ForumCategoryResponse]:
    category = await ForumService(db).create_category(data)
    return ApiResponse(data=ForumCategoryResponse.model_validate(category))


@router.post(
    "/posts",
    response_model=ApiResponse[ForumPostResponse],
    status_code=201,
    summary="Create a forum post",
)
async def create_post(
    data: ForumPostCreate,
    user: VerifiedUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ForumPostResponse]:
    post = await ForumService(db).create_post(user, data)
    return ApiResponse(data=ForumPostResponse.model_validate(post))


@router.get(
    "/posts",
    response_model=ApiResponse[list[ForumPostResponse]],
    summary="List forum posts",
    description="Sticky posts first, then newest.",
)
async def list_posts(
    user: CurrentUser,
    db: DbSession,
    category_id: str | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
) -> ApiResponse[list[ForumPostResponse]]:
    rows = await ForumService(db).list_posts(category_id=category_id, limit=limit)
    return ApiResponse(
        data=[
            ForumPostResponse.model_validate(post).model_copy(
                update={"author": UserSummary.model_validate(author)}
            )
            for post, author in rows
        ]
    )


@router.get(
    "/posts/{post_id}",
    response_model=ApiResponse[ForumPostDetailResponse],
    summary="Get a post with its replies",
)
async def get_post(
    post_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ForumPostDetailResponse]:
    post, author, replies = await ForumService(db).view_post(post_id)
    detail = ForumPostDetailResponse.model_validate(post).model_copy(
        update={
            "author": UserSummary.model_validate(author),
            "replies": [
                ForumReplyResponse.model_validate(reply).model_copy(
                    update={"author": UserSummary.model_validate(replier)}
                )
                for reply, replier in replies
            ],
        }
    )
    return ApiResponse(data=detail)


@router.post(
    "/replies",
    response_model=ApiResponse[ForumReplyResponse],
    status_code=201,
    summary="Reply to a post",
)
async def create_reply(
    data: ForumReplyCreate,
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[ForumReplyResponse]:
    reply = await ForumService(db).reply(user, data)
    return ApiResponse(data=ForumReplyResponse.model_validate(reply))
