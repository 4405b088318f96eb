"""
API tests for the chat member controller.

This module contains API endpoint tests for users scoped to a chat: listing,
single and bulk upserts, lookup and removal.
"""

import pytest
from fastapi import status
from httpx import AsyncClient


class TestUserController:
    """Test cases for /api/chats/{chat_id}/users endpoints."""

    @pytest.mark.asyncio
    async def test_list_users(self, client: AsyncClient, populated_chat):
        response = await client.get(f"/api/chats/{populated_chat.id}/users/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [u["id"] for u in data] == [10, 11, 12]
        assert data[0] == {
            "id": 10,
            "chat_id": populated_chat.id,
            "username": "alice",
            "name": "Alice",
        }

    @pytest.mark.asyncio
    async def test_list_users_chat_not_found(self, client: AsyncClient):
        response = await client.get("/api/chats/99/users/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error_code"] == "CHAT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_get_user(self, client: AsyncClient, test_user):
        response = await client.get(f"/api/chats/{test_user.chat_id}/users/{test_user.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["username"] == "alice"

    @pytest.mark.asyncio
    async def test_get_user_not_found(self, client: AsyncClient, test_chat):
        response = await client.get(f"/api/chats/{test_chat.id}/users/999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        body = response.json()
        assert body["error_code"] == "USER_NOT_FOUND"
        assert body["details"] == {"chat_id": test_chat.id, "user_id": 999}

    @pytest.mark.asyncio
    async def test_upsert_user_creates(self, client: AsyncClient, test_chat):
        response = await client.put(
            f"/api/chats/{test_chat.id}/users/20", json={"username": "dave", "name": "Dave"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "id": 20,
            "chat_id": test_chat.id,
            "username": "dave",
            "name": "Dave",
        }

    @pytest.mark.asyncio
    async def test_upsert_user_updates(self, client: AsyncClient, test_user):
        response = await client.put(
            f"/api/chats/{test_user.chat_id}/users/{test_user.id}",
            json={"username": "  ", "name": "Alice Smith"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["username"] is None
        assert data["name"] == "Alice Smith"

    @pytest.mark.asyncio
    async def test_upsert_user_unknown_chat(self, client: AsyncClient):
        """User (10, 99) is rejected while chat 99 does not exist."""
        response = await client.put("/api/chats/99/users/10", json={"name": "Bob"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["details"] == {"chat_id": 99}

    @pytest.mark.asyncio
    async def test_upsert_user_missing_name(self, client: AsyncClient, test_chat):
        response = await client.put(f"/api/chats/{test_chat.id}/users/10", json={"username": "x"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_bulk_upsert(self, client: AsyncClient, test_user):
        payload = {
            "users": [
                {"id": test_user.id, "username": "alice", "name": "Alice B."},
                {"id": 30, "name": "Frank"},
            ]
        }

        response = await client.put(f"/api/chats/{test_user.chat_id}/users/", json=payload)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [(u["id"], u["name"]) for u in data] == [(10, "Alice B."), (30, "Frank")]
        assert data[1]["username"] is None

    @pytest.mark.asyncio
    async def test_bulk_upsert_unknown_chat_writes_nothing(self, client: AsyncClient):
        response = await client.put(
            "/api/chats/99/users/", json={"users": [{"id": 1, "name": "A"}]}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_upsert_user_id_out_of_range(self, client: AsyncClient, test_chat):
        response = await client.put(
            f"/api/chats/{test_chat.id}/users/99999999999999999999", json={"name": "Big"}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_get_user_chat_id_out_of_range(self, client: AsyncClient):
        response = await client.get("/api/chats/99999999999999999999/users/1")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_bulk_upsert_id_out_of_range(self, client: AsyncClient, test_chat):
        response = await client.put(
            f"/api/chats/{test_chat.id}/users/",
            json={"users": [{"id": 2**63, "name": "Big"}]},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_bulk_upsert_empty(self, client: AsyncClient, test_chat):
        response = await client.put(f"/api/chats/{test_chat.id}/users/", json={"users": []})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_remove_user(self, client: AsyncClient, populated_chat):
        response = await client.delete(f"/api/chats/{populated_chat.id}/users/11")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "User removed successfully"

        remaining = await client.get(f"/api/chats/{populated_chat.id}/users/")
        assert [u["id"] for u in remaining.json()] == [10, 12]

    @pytest.mark.asyncio
    async def test_remove_user_not_found(self, client: AsyncClient, test_chat):
        response = await client.delete(f"/api/chats/{test_chat.id}/users/999")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_same_user_in_two_chats(self, client: AsyncClient, test_chat, test_chat_2):
        for chat in (test_chat, test_chat_2):
            response = await client.put(
                f"/api/chats/{chat.id}/users/10", json={"name": f"Alice in {chat.name}"}
            )
            assert response.status_code == status.HTTP_200_OK

        first = await client.get(f"/api/chats/{test_chat.id}/users/10")
        second = await client.get(f"/api/chats/{test_chat_2.id}/users/10")

        assert first.json()["name"] == "Alice in General"
        assert second.json()["name"] == "Alice in Random"
