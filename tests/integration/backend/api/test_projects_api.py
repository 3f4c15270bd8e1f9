"""
Integration tests for the projects endpoints.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from modules.backend.models.enums import UserRole
from modules.backend.models.notification import Notification

BASE = "/api/v1/projects"


@pytest.fixture
async def crew_member(create_user):
    return await create_user(first_name="Cam", last_name="Operator", role=UserRole.VERIFIED)


async def _create(client: AsyncClient, headers: dict, **overrides) -> dict:
    payload = {
        "title": "Homefront",
        "description": "A documentary about coming home.",
        "type": "documentary",
        "seeking_roles": ["editor", "composer"],
        **overrides,
    }
    response = await client.post(BASE, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateProject:
    async def test_defaults(self, client: AsyncClient, api, verified_user, verified_headers):
        project = await _create(client, verified_headers)

        assert project["creator_id"] == verified_user.id
        assert project["status"] == "pre_production"
        assert project["is_public"] is True
        assert project["seeking_roles"] == ["editor", "composer"]

    async def test_unknown_type_is_rejected(self, client: AsyncClient, api, verified_headers):
        response = await client.post(
            BASE, json={"title": "Bad", "type": "musical"}, headers=verified_headers,
        )

        api.assert_validation_error(response, field="type")

    async def test_requires_verified_member(self, client: AsyncClient, api, public_headers):
        response = await client.post(
            BASE, json={"title": "Nope", "type": "feature"}, headers=public_headers,
        )

        api.assert_error(response, 403, "AUTHZ_FORBIDDEN")


class TestListProjects:
    async def test_public_listing_embeds_creator(
        self, client: AsyncClient, api, verified_headers,
    ):
        await _create(client, verified_headers, title="Open Set")
        await _create(client, verified_headers, title="Closed Set", is_public=False)

        response = await client.get(BASE, headers=verified_headers)

        data = api.assert_success(response)["data"]
        assert [p["title"] for p in data] == ["Open Set"]
        assert data[0]["creator"]["first_name"] == "Vera"

    async def test_my_projects_include_collaborations(
        self, client: AsyncClient, api, verified_headers, crew_member, headers_for,
    ):
        crew_headers = headers_for(crew_member)
        project = await _create(client, verified_headers)
        await client.post(f"{BASE}/{project['id']}/join", json={"role": "editor"}, headers=crew_headers)

        response = await client.get(f"{BASE}/my", headers=crew_headers)

        assert [p["id"] for p in api.assert_success(response)["data"]] == [project["id"]]


class TestProjectDetail:
    async def test_private_project_hidden_from_outsiders(
        self, client: AsyncClient, api, verified_headers, public_headers,
    ):
        project = await _create(client, verified_headers, is_public=False)

        response = await client.get(f"{BASE}/{project['id']}", headers=public_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")

    async def test_detail_lists_collaborators(
        self, client: AsyncClient, api, verified_headers, crew_member, headers_for,
    ):
        crew_id = crew_member.id
        project = await _create(client, verified_headers)
        await client.post(
            f"{BASE}/{project['id']}/join", json={"role": "editor"}, headers=headers_for(crew_member),
        )

        response = await client.get(f"{BASE}/{project['id']}", headers=verified_headers)

        data = api.assert_success(response)["data"]
        assert data["creator"]["first_name"] == "Vera"
        assert len(data["collaborators"]) == 1
        assert data["collaborators"][0]["user"]["id"] == crew_id
        assert data["collaborators"][0]["permissions"] == "read"


class TestJoinProject:
    async def test_join_notifies_creator(
        self, client: AsyncClient, api, db_session, verified_user, verified_headers,
        crew_member, headers_for,
    ):
        creator_id = verified_user.id
        project = await _create(client, verified_headers)

        response = await client.post(
            f"{BASE}/{project['id']}/join", json={"role": "editor"}, headers=headers_for(crew_member),
        )

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["role"] == "editor"

        result = await db_session.execute(
            select(Notification).where(Notification.user_id == creator_id)
        )
        notification = result.scalar_one()
        assert notification.type == "project_invite"
        assert notification.message == "Cam Operator joined Homefront as editor."

    async def test_creator_cannot_join(self, client: AsyncClient, api, verified_headers):
        project = await _create(client, verified_headers)

        response = await client.post(f"{BASE}/{project['id']}/join", json={}, headers=verified_headers)

        api.assert_error(response, 409, "RES_CONFLICT")

    async def test_cannot_join_twice(
        self, client: AsyncClient, api, verified_headers, crew_member, headers_for,
    ):
        crew_headers = headers_for(crew_member)
        project = await _create(client, verified_headers)
        await client.post(f"{BASE}/{project['id']}/join", json={}, headers=crew_headers)

        response = await client.post(f"{BASE}/{project['id']}/join", json={}, headers=crew_headers)

        api.assert_error(response, 409, "RES_CONFLICT")
