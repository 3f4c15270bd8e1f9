"""
Users API Endpoints.

Roles, verification requests, profile edits and the member directory.
"""

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, RequestId
from modules.backend.models.enums import UserRole
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.project import ProjectResponse
from modules.backend.schemas.script import ScriptResponse
from modules.backend.schemas.user import (
    MemberResponse,
    ProfileUpdate,
    RoleUpdate,
    UserResponse,
    VerificationRequest,
)
from modules.backend.services.user import UserService

router = APIRouter()


@router.put(
    "/role",
    response_model=ApiResponse[UserResponse],
    summary="Change your role",
    description="Setting the verified role requires admin access.",
)
async def update_role(
    data: RoleUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[UserResponse]:
    updated = await UserService(db).update_role(user, UserRole(data.role))
    return ApiResponse(data=UserResponse.model_validate(updated))


@router.put(
    "/verification",
    response_model=ApiResponse[UserResponse],
    summary="Request military-service verification",
)
async def request_verification(
    data: VerificationRequest,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[UserResponse]:
    updated = await UserService(db).request_verification(user, data)
    return ApiResponse(data=UserResponse.model_validate(updated))


@router.put(
    "/profile",
    response_model=ApiResponse[UserResponse],
    summary="Update your profile",
)
async def update_profile(
    data: ProfileUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[UserResponse]:
    updated = await UserService(db).update_profile(user, data)
    return ApiResponse(data=UserResponse.model_validate(updated))


@router.get(
    "/members",
    response_model=ApiResponse[list[MemberResponse]],
    summary="List verified members",
)
async def list_members(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    search: str | None = Query(default=None, max_length=100),
    limit: int | None = Query(default=None, ge=1, le=100),
) -> ApiResponse[list[MemberResponse]]:
    members = await UserService(db).list_members(search=search, limit=limit)
    return ApiResponse(data=[MemberResponse.model_validate(m) for m in members])


@router.get(
    "/{user_id}",
    response_model=ApiResponse[MemberResponse],
    summary="Get a member profile",
)
async def get_member(
    user_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[MemberResponse]:
    member = await UserService(db).get_user(user_id)
    return ApiResponse(data=MemberResponse.model_validate(member))


@router.get(
    "/{user_id}/projects",
    response_model=ApiResponse[list[ProjectResponse]],
    summary="List a member's projects",
)
async def member_projects(
    user_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[ProjectResponse]]:
    projects = await UserService(db).projects_of(user_id, viewer_id=user.id)
    return ApiResponse(data=[ProjectResponse.model_validate(p) for p in projects])


@router.get(
    "/{user_id}/scripts",
    response_model=ApiResponse[list[ScriptResponse]],
    summary="List a member's public scripts",
)
async def member_scripts(
    user_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[ScriptResponse]]:
    scripts = await UserService(db).public_scripts_of(user_id)
    return ApiResponse(data=[ScriptResponse.model_validate(s) for s in scripts])
