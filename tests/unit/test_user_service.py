# ruff: noqa: SIM117
"""
Unit tests for UserService.

This module contains unit tests for the chat-scoped user service, covering
upserts, removal and the foreign key guard on unknown chats.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.domains.user.service import UserService
from app.exceptions.chat import ChatNotFoundError
from app.schemas.user import UserUpsertItem


class TestUserService:
    """Test cases for UserService."""

    @pytest.mark.asyncio
    async def test_list_users_ordered_by_id(self, test_db, populated_chat):
        service = UserService(test_db)

        users = await service.list_users(populated_chat.id)

        assert [u.id for u in users] == [10, 11, 12]
        assert all(u.chat_id == populated_chat.id for u in users)

    @pytest.mark.asyncio
    async def test_list_users_unknown_chat_is_empty(self, test_db):
        service = UserService(test_db)

        assert await service.list_users(404) == []

    @pytest.mark.asyncio
    async def test_get_user_existing(self, test_db, test_user):
        service = UserService(test_db)

        result = await service.get_user(test_user.chat_id, test_user.id)

        assert result is not None
        assert result.username == "alice"
        assert result.name == "Alice"

    @pytest.mark.asyncio
    async def test_get_user_scoped_to_chat(self, test_db, test_user, test_chat_2):
        service = UserService(test_db)

        assert await service.get_user(test_chat_2.id, test_user.id) is None

    @pytest.mark.asyncio
    async def test_upsert_user_creates(self, test_db, test_chat):
        service = UserService(test_db)

        result = await service.upsert_user(test_chat.id, 20, name="Dave", username="dave")

        assert result.id == 20
        assert result.chat_id == test_chat.id
        assert result.username == "dave"
        assert result.name == "Dave"

    @pytest.mark.asyncio
    async def test_upsert_user_without_username(self, test_db, test_chat):
        service = UserService(test_db)

        result = await service.upsert_user(test_chat.id, 21, name="Eve")

        assert result.username is None

    @pytest.mark.asyncio
    async def test_upsert_user_updates_existing(self, test_db, test_user):
        """A second upsert refreshes username and name in place."""
        service = UserService(test_db)

        result = await service.upsert_user(
            test_user.chat_id, test_user.id, name="Alice Smith", username=None
        )

        assert result.name == "Alice Smith"
        assert result.username is None
        assert len(await service.list_users(test_user.chat_id)) == 1

    @pytest.mark.asyncio
    async def test_upsert_user_unknown_chat(self, test_db):
        """User(10, 99) cannot be stored while chat 99 does not exist."""
        service = UserService(test_db)

        with pytest.raises(ChatNotFoundError) as exc_info:
            await service.upsert_user(99, 10, name="Bob")

        assert exc_info.value.chat_id == 99
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_upsert_users_bulk(self, test_db, test_user):
        service = UserService(test_db)
        items = [
            UserUpsertItem(id=test_user.id, name="Alice B.", username="alice"),
            UserUpsertItem(id=30, name="Frank", username="frank"),
            UserUpsertItem(id=31, name="Grace", username=""),
        ]

        result = await service.upsert_users(test_user.chat_id, items)

        assert [u.id for u in result] == [test_user.id, 30, 31]
        assert result[0].name == "Alice B."
        assert result[2].username is None
        assert len(await service.list_users(test_user.chat_id)) == 3

    @pytest.mark.asyncio
    async def test_upsert_users_database_error_rolls_back(self, test_db, test_chat):
        service = UserService(test_db)

        with patch.object(test_db, "commit", side_effect=SQLAlchemyError("Database error")):
            with patch.object(test_db, "rollback") as mock_rollback:
                with pytest.raises(SQLAlchemyError):
                    await service.upsert_user(test_chat.id, 40, name="Heidi")
                mock_rollback.assert_called_once()

    @pytest.mark.asyncio
    async def test_remove_user(self, test_db, test_user):
        service = UserService(test_db)

        assert await service.remove_user(test_user.chat_id, test_user.id) is True
        assert await service.get_user(test_user.chat_id, test_user.id) is None

    @pytest.mark.asyncio
    async def test_remove_user_missing(self, test_db, test_chat):
        service = UserService(test_db)

        assert await service.remove_user(test_chat.id, 999) is False

    @pytest.mark.asyncio
    async def test_remove_user_only_affects_one_chat(self, test_db, test_chat, test_chat_2):
        service = UserService(test_db)
        await service.upsert_user(test_chat.id, 10, name="Alice")
        await service.upsert_user(test_chat_2.id, 10, name="Alice")

        await service.remove_user(test_chat.id, 10)

        assert await service.get_user(test_chat.id, 10) is None
        assert await service.get_user(test_chat_2.id, 10) is not None

    @pytest.mark.asyncio
    async def test_delete_all_users(self, test_db, populated_chat):
        service = UserService(test_db)

        removed = await service.delete_all_users(populated_chat.id)

        assert removed == 3
        assert await service.list_users(populated_chat.id) == []
