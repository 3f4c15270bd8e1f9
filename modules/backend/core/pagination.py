"""
Offset Pagination.

Admin views over members and the credit ledger page with `limit` and
`offset`. Member-facing feeds take a bare `limit` instead.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Query
from pydantic import BaseModel

from modules.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass
class PaginationParams:
    limit: int
    offset: int


def get_pagination_params(
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Rows to skip"),
) -> PaginationParams:
    """FastAPI dependency: `pagination: PaginationParams = Depends(get_pagination_params)`."""
    return PaginationParams(limit=limit, offset=offset)


def create_paginated_response(
    items: list[Any],
    item_schema: type[BaseModel],
    total: int | None = None,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
    request_id: str | None = None,
) -> dict[str, Any]:
    """
    Serialize one page of ORM rows (or dicts) into the paginated envelope.

    `has_more` is only known when the caller supplies `total`. Fields not on
    `item_schema` are dropped, so password hashes never leak from a User row.
    """
    page = [item_schema.model_validate(item).model_dump(mode="json") for item in items]
    has_more = total is not None and offset + len(page) < total

    return PaginatedResponse(
        data=page,
        pagination=PaginationInfo(total=total, limit=limit, offset=offset, has_more=has_more),
        metadata=ResponseMetadata(request_id=request_id),
    ).model_dump(mode="json")
