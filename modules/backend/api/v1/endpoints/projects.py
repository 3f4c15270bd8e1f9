"""
Projects API Endpoints.
"""

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, RequestId, VerifiedUser
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.project import (
    CollaboratorResponse,
    ProjectCreate,
    ProjectDetailResponse,
    ProjectJoin,
    ProjectResponse,
)
from modules.backend.schemas.user import UserSummary
from modules.backend.services.project import ProjectService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ProjectResponse],
    status_code=201,
    summary="Create a project",
)
async def create_project(
    data: ProjectCreate,
    user: VerifiedUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ProjectResponse]:
    project = await ProjectService(db).create_project(user, data)
    return ApiResponse(data=ProjectResponse.model_validate(project))


@router.get(
    "",
    response_model=ApiResponse[list[ProjectResponse]],
    summary="List public projects",
)
async def list_projects(
    user: VerifiedUser,
    db: DbSession,
    limit: int = Query(default=20, ge=1, le=100),
) -> ApiResponse[list[ProjectResponse]]:
    rows = await ProjectService(db).list_public(limit=limit)
    return ApiResponse(
        data=[
            ProjectResponse.model_validate(project).model_copy(
                update={"creator": UserSummary.model_validate(creator)}
            )
            for project, creator in rows
        ]
    )


@router.get(
    "/my",
    response_model=ApiResponse[list[ProjectResponse]],
    summary="Projects you created or collaborate on",
)
async def my_projects(
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[list[ProjectResponse]]:
    projects = await ProjectService(db).list_mine(user.id)
    return ApiResponse(data=[ProjectResponse.model_validate(p) for p in projects])


@router.get(
    "/{project_id}",
    response_model=ApiResponse[ProjectDetailResponse],
    summary="Get a project with its collaborators",
)
async def get_project(
    project_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ProjectDetailResponse]:
    project, creator, collaborators = await ProjectService(db).detail(user.id, project_id)
    detail = ProjectDetailResponse.model_validate(project).model_copy(
        update={
            "creator": UserSummary.model_validate(creator),
            "collaborators": [
                CollaboratorResponse.model_validate(collab).model_copy(
                    update={"user": UserSummary.model_validate(member)}
                )
                for collab, member in collaborators
            ],
        }
    )
    return ApiResponse(data=detail)


@router.post(
    "/{project_id}/join",
    response_model=ApiResponse[CollaboratorResponse],
    status_code=201,
    summary="Join a project as a collaborator",
)
async def join_project(
    project_id: str,
    data: ProjectJoin,
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[CollaboratorResponse]:
    collaborator = await ProjectService(db).join(user, project_id, data.role)
    return ApiResponse(data=CollaboratorResponse.model_validate(collaborator))
