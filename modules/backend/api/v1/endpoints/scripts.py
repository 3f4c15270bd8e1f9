"""
Scripts API Endpoints.

Screenplays owned by verified members.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import DbSession, RequestId, VerifiedUser
from modules.backend.schemas.base import ApiResponse, AckResponse
from modules.backend.schemas.script import ScriptCreate, ScriptResponse, ScriptUpdate
from modules.backend.services.script import ScriptService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ScriptResponse],
    status_code=201,
    summary="Create a script",
    description="Create a screenplay. AI-generated content can be saved this way.",
)
async def create_script(
    data: ScriptCreate,
    user: VerifiedUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ScriptResponse]:
    script = await ScriptService(db).create_script(user, data)
    return ApiResponse(data=ScriptResponse.model_validate(script))


@router.get(
    "",
    response_model=ApiResponse[list[ScriptResponse]],
    summary="List your scripts",
)
async def list_scripts(
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[list[ScriptResponse]]:
    scripts = await ScriptService(db).list_own(user.id)
    return ApiResponse(data=[ScriptResponse.model_validate(s) for s in scripts])


@router.get(
    "/{script_id}",
    response_model=ApiResponse[ScriptResponse],
    summary="Get a script",
    description="Visible to the author, or to anyone when public.",
)
async def get_script(
    script_id: str,
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[ScriptResponse]:
    script = await ScriptService(db).get_script(user.id, script_id)
    return ApiResponse(data=ScriptResponse.model_validate(script))


@router.put(
    "/{script_id}",
    response_model=ApiResponse[ScriptResponse],
    summary="Update a script",
)
async def update_script(
    script_id: str,
    data: ScriptUpdate,
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[ScriptResponse]:
    script = await ScriptService(db).update_script(user.id, script_id, data)
    return ApiResponse(data=ScriptResponse.model_validate(script))


@router.delete(
    "/{script_id}",
    response_model=ApiResponse[AckResponse],
    summary="Delete a script",
)
async def delete_script(
    script_id: str,
    user: VerifiedUser,
    db: DbSession,
) -> ApiResponse[AckResponse]:
    await ScriptService(db).delete_script(user.id, script_id)
    return ApiResponse(data=AckResponse(message="Script deleted"))
