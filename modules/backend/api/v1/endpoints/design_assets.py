"""
Design Assets API Endpoints.

AI-generated posters and artwork. The public gallery and the download
counter are open to anonymous visitors.
"""

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, RequestId
from modules.backend.schemas.base import ApiResponse, AckResponse
from modules.backend.schemas.design_asset import (
    DesignAssetGenerate,
    DesignAssetResponse,
    DesignAssetUpdate,
)
from modules.backend.services.design_asset import DesignAssetService

router = APIRouter()


@router.post(
    "/generate",
    response_model=ApiResponse[DesignAssetResponse],
    status_code=201,
    summary="Generate an image asset",
    description="Generates the image with the AI provider. Provider failures return 502.",
)
async def generate_asset(
    data: DesignAssetGenerate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DesignAssetResponse]:
    asset = await DesignAssetService(db).generate(user, data)
    return ApiResponse(data=DesignAssetResponse.model_validate(asset))


@router.get(
    "",
    response_model=ApiResponse[list[DesignAssetResponse]],
    summary="List your design assets",
)
async def list_assets(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[DesignAssetResponse]]:
    assets = await DesignAssetService(db).list_own(user.id)
    return ApiResponse(data=[DesignAssetResponse.model_validate(a) for a in assets])


@router.get(
    "/public",
    response_model=ApiResponse[list[DesignAssetResponse]],
    summary="Public design asset gallery",
)
async def list_public_assets(
    db: DbSession,
    limit: int = Query(default=50, ge=1, le=100),
) -> ApiResponse[list[DesignAssetResponse]]:
    assets = await DesignAssetService(db).list_public(limit=limit)
    return ApiResponse(data=[DesignAssetResponse.model_validate(a) for a in assets])


@router.get(
    "/{asset_id}",
    response_model=ApiResponse[DesignAssetResponse],
    summary="Get a design asset",
)
async def get_asset(
    asset_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[DesignAssetResponse]:
    asset = await DesignAssetService(db).get_asset(user.id, asset_id)
    return ApiResponse(data=DesignAssetResponse.model_validate(asset))


@router.put(
    "/{asset_id}",
    response_model=ApiResponse[DesignAssetResponse],
    summary="Update a design asset",
)
async def update_asset(
    asset_id: str,
    data: DesignAssetUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[DesignAssetResponse]:
    asset = await DesignAssetService(db).update_asset(user.id, asset_id, data)
    return ApiResponse(data=DesignAssetResponse.model_validate(asset))


@router.delete(
    "/{asset_id}",
    response_model=ApiResponse[AckResponse],
    summary="Delete a design asset",
)
async def delete_asset(
    asset_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[AckResponse]:
    await DesignAssetService(db).delete_asset(user.id, asset_id)
    return ApiResponse(data=AckResponse(message="Design asset deleted"))


@router.post(
    "/{asset_id}/download",
    response_model=ApiResponse[DesignAssetResponse],
    summary="Count a download",
)
async def record_download(
    asset_id: str,
    db: DbSession,
) -> ApiResponse[DesignAssetResponse]:
    asset = await DesignAssetService(db).record_download(asset_id)
    return ApiResponse(data=DesignAssetResponse.model_validate(asset))
