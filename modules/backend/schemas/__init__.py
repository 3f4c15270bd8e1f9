# Response envelopes shared by every endpoint; resource schemas live in sibling modules.
from modules.backend.schemas.base import (
    AckResponse,
    ApiResponse,
    ErrorDetail,
    ErrorResponse,
    PaginatedResponse,
    ResponseMetadata,
)

__all__ = [
    "AckResponse",
    "ApiResponse",
    "ErrorDetail",
    "ErrorResponse",
    "PaginatedResponse",
    "ResponseMetadata",
]
