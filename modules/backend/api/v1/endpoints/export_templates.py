"""
Export Templates API Endpoints.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.schemas.base import AckResponse, ApiResponse
from modules.backend.schemas.export_template import (
    ExportTemplateCreate,
    ExportTemplateResponse,
    ExportTemplateUpdate,
)
from modules.backend.services.export_template import ExportTemplateService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[ExportTemplateResponse]],
    summary="List shared templates and your own",
)
async def list_templates(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[ExportTemplateResponse]]:
    templates = await ExportTemplateService(db).list_templates(user.id)
    return ApiResponse(data=[ExportTemplateResponse.model_validate(t) for t in templates])


@router.post(
    "",
    response_model=ApiResponse[ExportTemplateResponse],
    status_code=201,
    summary="Create an export template",
)
async def create_template(
    data: ExportTemplateCreate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ExportTemplateResponse]:
    template = await ExportTemplateService(db).create_template(user, data)
    return ApiResponse(data=ExportTemplateResponse.model_validate(template))


@router.get(
    "/{template_id}",
    response_model=ApiResponse[ExportTemplateResponse],
    summary="Get an export template",
)
async def get_template(
    template_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ExportTemplateResponse]:
    template = await ExportTemplateService(db).get_template(user.id, template_id)
    return ApiResponse(data=ExportTemplateResponse.model_validate(template))


@router.put(
    "/{template_id}",
    response_model=ApiResponse[ExportTemplateResponse],
    summary="Update your export template",
)
async def update_template(
    template_id: str,
    data: ExportTemplateUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ExportTemplateResponse]:
    template = await ExportTemplateService(db).update_template(user.id, template_id, data)
    return ApiResponse(data=ExportTemplateResponse.model_validate(template))


@router.delete(
    "/{template_id}",
    response_model=ApiResponse[AckResponse],
    summary="Delete your export template",
)
async def delete_template(
    template_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[AckResponse]:
    await ExportTemplateService(db).delete_template(user.id, template_id)
    return ApiResponse(data=AckResponse(message="Template deleted"))
