"""
Integration Tests for Pagination.

Exercised through the admin member listing, the paginated endpoint.
"""

import pytest
from httpx import AsyncClient

USERS = "/api/v1/admin/users"


@pytest.fixture
def members(create_user):
    async def _create(count: int) -> None:
        for i in range(count):
            await create_user(f"member{i}@example.com")

    return _create


class TestPaginatedListEndpoint:
    """Tests for the paginated envelope."""

    async def test_returns_paginated_response_structure(self, client: AsyncClient, admin_headers):
        response = await client.get(USERS, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert {"data", "pagination", "metadata"} <= set(data)
        assert {"total", "limit", "offset", "has_more"} <= set(data["pagination"])

    async def test_returns_correct_total_count(self, client: AsyncClient, admin_headers, members):
        await members(4)

        response = await client.get(USERS, headers=admin_headers)

        # Four members plus the admin
        assert response.json()["pagination"]["total"] == 5

    async def test_respects_limit_parameter(self, client: AsyncClient, admin_headers, members):
        await members(9)

        response = await client.get(f"{USERS}?limit=3", headers=admin_headers)

        data = response.json()
        assert len(data["data"]) == 3
        assert data["pagination"]["limit"] == 3
        assert data["pagination"]["total"] == 10
        assert data["pagination"]["has_more"] is True

    async def test_respects_offset_parameter(self, client: AsyncClient, admin_headers, members):
        await members(4)

        response = await client.get(f"{USERS}?limit=2&offset=2", headers=admin_headers)

        data = response.json()
        assert len(data["data"]) == 2
        assert data["pagination"]["offset"] == 2
        assert data["pagination"]["has_more"] is True

    async def test_has_more_false_at_end(self, client: AsyncClient, admin_headers, members):
        await members(2)

        response = await client.get(f"{USERS}?limit=10", headers=admin_headers)

        assert response.json()["pagination"]["has_more"] is False

    async def test_default_limit(self, client: AsyncClient, admin_headers, members):
        """Should use default limit of 20."""
        await members(24)

        response = await client.get(USERS, headers=admin_headers)

        data = response.json()
        assert len(data["data"]) == 20
        assert data["pagination"]["limit"] == 20

    @pytest.mark.parametrize("query", ["limit=150", "limit=0", "offset=-1"])
    async def test_rejects_out_of_range_parameters(
        self, client: AsyncClient, admin_headers, query,
    ):
        response = await client.get(f"{USERS}?{query}", headers=admin_headers)

        assert response.status_code == 422


class TestPaginationMetadata:
    """Tests for pagination metadata in responses."""

    async def test_includes_request_id_and_timestamp(self, client: AsyncClient, admin_headers):
        custom_id = "pagination-test-id"

        response = await client.get(
            USERS, headers={**admin_headers, "X-Request-ID": custom_id},
        )

        metadata = response.json()["metadata"]
        assert metadata["request_id"] == custom_id
        assert "timestamp" in metadata
