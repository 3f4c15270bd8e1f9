"""
AI Tools API Endpoints.

Each call costs credits. Insufficient balance returns 402 with the
required and available amounts.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession, RequestId
from modules.backend.schemas.ai import (
    AiResult,
    AnalyzeScriptRequest,
    EnhanceScriptRequest,
    GenerateScriptRequest,
)
from modules.backend.schemas.base import ApiResponse
from modules.backend.services.ai import AiService

router = APIRouter()


@router.post(
    "/generate-script",
    response_model=ApiResponse[AiResult],
    summary="Generate a screenplay",
)
async def generate_script(
    data: GenerateScriptRequest,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AiResult]:
    result = await AiService(db, correlation_id=request_id).generate_script(user, data)
    return ApiResponse(data=result)


@router.post(
    "/enhance-script",
    response_model=ApiResponse[AiResult],
    summary="Improve an existing script",
)
async def enhance_script(
    data: EnhanceScriptRequest,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AiResult]:
    result = await AiService(db, correlation_id=request_id).enhance_script(user, data)
    return ApiResponse(data=result)


@router.post(
    "/analyze-script",
    response_model=ApiResponse[AiResult],
    summary="Get festival-readiness feedback on a script",
)
async def analyze_script(
    data: AnalyzeScriptRequest,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AiResult]:
    result = await AiService(db, correlation_id=request_id).analyze_script(user, data)
    return ApiResponse(data=result)
