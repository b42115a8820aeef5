"""Tests for thread and message endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from teamthreads.api.dependencies import get_settings
from teamthreads.db.models import TeamRole

pytestmark = pytest.mark.integration


@pytest.fixture
async def team_setup(seed, client: AsyncClient, auth_headers):
    """Owner and member of one team, both with the team selected."""
    owner = await seed.user(name="Olivia")
    member = await seed.user(name="Mo")
    outsider = await seed.user(name="Otto")
    team = await seed.team(owner)
    await seed.member(team, member, TeamRole.MEMBER)
    for user in (owner, member):
        await client.put("/v1/me/team", json={"team_id": str(team.id)}, headers=auth_headers(user))
    return {"owner": owner, "member": member, "outsider": outsider, "team": team}


async def _create_thread(client: AsyncClient, headers, title: str = "General") -> str:
    response = await client.post("/v1/threads", json={"title": title}, headers=headers)
    assert response.status_code == 201
    return response.json()["thread_id"]


async def _post(client: AsyncClient, thread_id: str, headers, content: str, reply_to=None) -> str:
    payload = {"content": content}
    if reply_to is not None:
        payload["reply_to_id"] = reply_to
    response = await client.post(f"/v1/threads/{thread_id}/messages", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()["message_id"]


class TestThreadLifecycle:
    """Create, post, list, edit, delete through the HTTP surface."""

    async def test_create_post_and_list(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        owner_headers = auth_headers(team_setup["owner"])
        member_headers = auth_headers(team_setup["member"])
        thread_id = await _create_thread(client, owner_headers)

        parent = await _post(client, thread_id, owner_headers, "hello team")
        await _post(client, thread_id, member_headers, "hi!", reply_to=parent)

        response = await client.get(
            f"/v1/threads/{thread_id}/messages", params={"num_items": 10}, headers=member_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_done"] is True
        assert len(body["page"]) == 1
        top = body["page"][0]
        assert top["content"] == "hello team"
        assert top["author_name"] == "Olivia"
        assert top["message_type"] == "text"
        assert [r["content"] for r in top["replies"]] == ["hi!"]
        assert top["replies"][0]["author_name"] == "Mo"

    async def test_cursor_continues_across_requests(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        headers = auth_headers(team_setup["owner"])
        thread_id = await _create_thread(client, headers)
        for i in range(3):
            await _post(client, thread_id, headers, f"m{i}")

        first = (
            await client.get(
                f"/v1/threads/{thread_id}/messages", params={"num_items": 2}, headers=headers
            )
        ).json()
        second = (
            await client.get(
                f"/v1/threads/{thread_id}/messages",
                params={"num_items": 2, "cursor": first["continue_cursor"]},
                headers=headers,
            )
        ).json()

        first_ids = {m["id"] for m in first["page"]}
        second_ids = {m["id"] for m in second["page"]}
        assert first["is_done"] is False
        assert second["is_done"] is True
        assert len(first_ids | second_ids) == 3
        assert not first_ids & second_ids

    async def test_edit_and_delete(self, client: AsyncClient, team_setup, auth_headers) -> None:

        headers = auth_headers(team_setup["member"])
        thread_id = await _create_thread(client, auth_headers(team_setup["owner"]))
        message_id = await _post(client, thread_id, headers, "typo")

        edited = await client.patch(
            f"/v1/messages/{message_id}", json={"content": "fixed"}, headers=headers
        )
        deleted = await client.delete(f"/v1/messages/{message_id}", headers=headers)

        assert edited.status_code == 200
        assert deleted.status_code == 200
        assert deleted.json() == {"deleted": 1}

    async def test_mark_read_and_archive(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        headers = auth_headers(team_setup["owner"])
        thread_id = await _create_thread(client, headers)

        read = await client.post(f"/v1/threads/{thread_id}/read", headers=headers)
        archived = await client.post(f"/v1/threads/{thread_id}/archive", headers=headers)
        blocked = await client.post(
            f"/v1/threads/{thread_id}/messages", json={"content": "late"}, headers=headers
        )

        assert read.status_code == 200
        assert archived.status_code == 200
        assert blocked.status_code == 409
        assert blocked.json()["error"] == "thread_archived"

    async def test_add_participant(self, client: AsyncClient, team_setup, auth_headers) -> None:

        headers = auth_headers(team_setup["owner"])
        thread_id = await _create_thread(client, headers)
        outsider_id = str(team_setup["outsider"].id)

        added = await client.post(
            f"/v1/threads/{thread_id}/participants", json={"user_id": outsider_id}, headers=headers
        )
        duplicate = await client.post(
            f"/v1/threads/{thread_id}/participants", json={"user_id": outsider_id}, headers=headers
        )

        assert added.status_code == 201
        assert duplicate.status_code == 409
        assert duplicate.json()["error"] == "participant_exists"


class TestThreadErrors:
    """Error mapping on thread and message endpoints."""

    async def test_create_without_team_is_403(
        self, client: AsyncClient, seed, auth_headers
    ) -> None:
        user = await seed.user()
        response = await client.post(
            "/v1/threads", json={"title": "x"}, headers=auth_headers(user)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "no_team_selected"

    async def test_outsider_cannot_list(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        thread_id = await _create_thread(client, auth_headers(team_setup["owner"]))

        response = await client.get(
            f"/v1/threads/{thread_id}/messages", headers=auth_headers(team_setup["outsider"])
        )

        assert response.status_code == 403
        assert response.json()["error"] == "not_a_participant"

    async def test_anonymous_cannot_list(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        thread_id = await _create_thread(client, auth_headers(team_setup["owner"]))
        response = await client.get(f"/v1/threads/{thread_id}/messages")
        assert response.status_code == 401

    async def test_bad_cursor_is_400(self, client: AsyncClient, team_setup, auth_headers) -> None:

        headers = auth_headers(team_setup["owner"])
        thread_id = await _create_thread(client, headers)

        response = await client.get(
            f"/v1/threads/{thread_id}/messages", params={"cursor": "%%%"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_cursor"

    async def test_page_size_bounds_validated(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        headers = auth_headers(team_setup["owner"])
        thread_id = await _create_thread(client, headers)

        response = await client.get(
            f"/v1/threads/{thread_id}/messages", params={"num_items": 0}, headers=headers
        )

        assert response.status_code == 422

    async def test_member_cannot_delete_owner_message(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        owner_headers = auth_headers(team_setup["owner"])
        thread_id = await _create_thread(client, owner_headers)
        message_id = await _post(client, thread_id, owner_headers, "mine")

        response = await client.delete(
            f"/v1/messages/{message_id}", headers=auth_headers(team_setup["member"])
        )

        assert response.status_code == 403
        assert response.json()["error"] == "not_authorized"

    async def test_edit_unknown_message_is_404(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        response = await client.patch(
            f"/v1/messages/{uuid4()}",
            json={"content": "x"},
            headers=auth_headers(team_setup["owner"]),
        )
        assert response.status_code == 404
        assert response.json()["error"] == "message_not_found"


class TestListThreads:
    """GET /v1/threads lists the current team's open threads."""

    async def test_unread_count_drops_after_read(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        owner_headers = auth_headers(team_setup["owner"])
        member_headers = auth_headers(team_setup["member"])
        thread_id = await _create_thread(client, owner_headers, "Standup")
        await _post(client, thread_id, owner_headers, "one")
        await _post(client, thread_id, owner_headers, "two")

        before = (await client.get("/v1/threads", headers=member_headers)).json()
        await client.post(f"/v1/threads/{thread_id}/read", headers=member_headers)
        after = (await client.get("/v1/threads", headers=member_headers)).json()

        assert [t["title"] for t in before["page"]] == ["Standup"]
        assert before["page"][0]["message_count"] == 2
        assert before["page"][0]["unread_count"] == 2
        assert after["page"][0]["message_count"] == 2
        assert after["page"][0]["unread_count"] == 0

    async def test_archived_threads_hidden(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        headers = auth_headers(team_setup["owner"])
        kept = await _create_thread(client, headers, "Kept")
        gone = await _create_thread(client, headers, "Gone")
        await client.post(f"/v1/threads/{gone}/archive", headers=headers)

        body = (await client.get("/v1/threads", headers=headers)).json()

        assert [t["id"] for t in body["page"]] == [kept]
        assert body["is_done"] is True

    async def test_anonymous_gets_empty_page(self, client: AsyncClient) -> None:
        response = await client.get("/v1/threads")

        assert response.status_code == 200
        assert response.json() == {"page": [], "is_done": True, "continue_cursor": ""}

    async def test_no_team_selected_gets_empty_page(
        self, client: AsyncClient, team_setup, auth_headers
    ) -> None:
        response = await client.get("/v1/threads", headers=auth_headers(team_setup["outsider"]))

        assert response.status_code == 200
        assert response.json()["page"] == []


class TestConfiguredPageSize:
    """Page size defaults and limits come from settings."""

    @pytest.fixture
    def small_pages(self, app, test_settings):
        settings = test_settings.model_copy(update={"default_page_size": 2, "max_page_size": 3})
        app.dependency_overrides[get_settings] = lambda: settings
        return settings

    async def test_default_and_cap_applied_to_messages(
        self, client: AsyncClient, team_setup, auth_headers, small_pages
    ) -> None:
        headers = auth_headers(team_setup["owner"])
        thread_id = await _create_thread(client, headers)
        for i in range(6):
            await _post(client, thread_id, headers, f"m{i}")

        default = await client.get(f"/v1/threads/{thread_id}/messages", headers=headers)
        capped = await client.get(
            f"/v1/threads/{thread_id}/messages", params={"num_items": 50}, headers=headers
        )

        assert default.status_code == 200
        assert len(default.json()["page"]) == 2
        assert capped.status_code == 200
        assert len(capped.json()["page"]) == 3
        assert capped.json()["is_done"] is False

    async def test_cap_applied_to_thread_list(
        self, client: AsyncClient, team_setup, auth_headers, small_pages
    ) -> None:
        headers = auth_headers(team_setup["owner"])
        for i in range(4):
            await _create_thread(client, headers, f"T{i}")

        body = (
            await client.get("/v1/threads", params={"num_items": 10}, headers=headers)
        ).json()

        assert len(body["page"]) == 3
        assert body["is_done"] is False
