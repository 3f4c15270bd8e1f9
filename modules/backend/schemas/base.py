"""
Response Envelopes.

Every endpoint answers with `{success, data, error, metadata}`. Admin
listings add a `pagination` block; failures carry an ErrorDetail whose
`details` hold structured context such as the required and available
credits on a 402.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Machine-readable code (e.g. CREDITS_INSUFFICIENT) plus a human message."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class PaginationInfo(BaseModel):
    total: int | None = None
    limit: int
    offset: int = 0
    has_more: bool = False


class PaginatedResponse(BaseModel, Generic[DataT]):
    """Offset-paged list, used by the admin member and ledger views."""

    success: bool = True
    data: list[DataT]
    error: None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
    pagination: PaginationInfo


class AckResponse(BaseModel):
    """Returned by deletes and other calls with no resource to echo back."""

    message: str


def reject_null(value: Any) -> Any:
    """
    Before-validator for partial updates.

    Omitting a field leaves it unchanged; sending an explicit null for a
    column that cannot be empty is a validation error.
    """
    if value is None:
        raise ValueError("Field cannot be null")
    return value
