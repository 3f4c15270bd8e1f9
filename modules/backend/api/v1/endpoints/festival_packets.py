"""
Festival Packets API Endpoints.

Private packets of festival materials, and their export for download.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.schemas.base import AckResponse, ApiResponse
from modules.backend.schemas.festival import (
    FestivalPacketCreate,
    FestivalPacketResponse,
    FestivalPacketUpdate,
    PacketExportRequest,
    PacketExportResponse,
)
from modules.backend.services.festival import FestivalPacketService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[FestivalPacketResponse],
    status_code=201,
    summary="Start a festival packet",
)
async def create_packet(
    data: FestivalPacketCreate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[FestivalPacketResponse]:
    packet = await FestivalPacketService(db).create_packet(user, data)
    return ApiResponse(data=FestivalPacketResponse.model_validate(packet))


@router.get(
    "",
    response_model=ApiResponse[list[FestivalPacketResponse]],
    summary="List your festival packets",
)
async def list_packets(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[FestivalPacketResponse]]:
    packets = await FestivalPacketService(db).list_own(user.id)
    return ApiResponse(data=[FestivalPacketResponse.model_validate(p) for p in packets])


@router.get(
    "/{packet_id}",
    response_model=ApiResponse[FestivalPacketResponse],
    summary="Get a festival packet",
)
async def get_packet(
    packet_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[FestivalPacketResponse]:
    packet = await FestivalPacketService(db).get_packet(user.id, packet_id)
    return ApiResponse(data=FestivalPacketResponse.model_validate(packet))


@router.put(
    "/{packet_id}",
    response_model=ApiResponse[FestivalPacketResponse],
    summary="Update a festival packet",
)
async def update_packet(
    packet_id: str,
    data: FestivalPacketUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[FestivalPacketResponse]:
    packet = await FestivalPacketService(db).update_packet(user.id, packet_id, data)
    return ApiResponse(data=FestivalPacketResponse.model_validate(packet))


@router.delete(
    "/{packet_id}",
    response_model=ApiResponse[AckResponse],
    summary="Delete a festival packet",
)
async def delete_packet(
    packet_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[AckResponse]:
    await FestivalPacketService(db).delete_packet(user.id, packet_id)
    return ApiResponse(data=AckResponse(message="Packet deleted"))


@router.post(
    "/{packet_id}/export",
    response_model=ApiResponse[PacketExportResponse],
    summary="Package a festival packet for download",
)
async def export_packet(
    packet_id: str,
    user: CurrentUser,
    db: DbSession,
    data: PacketExportRequest | None = None,
) -> ApiResponse[PacketExportResponse]:
    template_id = data.template_id if data else None
    export = await FestivalPacketService(db).export_packet(user.id, packet_id, template_id)
    return ApiResponse(data=export)
