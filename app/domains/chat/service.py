"""Chat service layer.

Keeps the ``tg_chat`` table in step with what the messaging platform
reports: chats are upserted when seen, deleted when abandoned, re-keyed when
a group migrates to a new id, and cleaned of their tracked users on request.
Users of a chat follow every delete and id change through the ``fk_chat``
cascade, so this service never touches ``tg_user`` rows for those paths.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.domains.chat.status import ChatStatusRegistry, CleaningState, get_status_registry
from app.domains.user.service import UserService, upsert_insert
from app.exceptions.base import ValidationError
from app.exceptions.chat import ChatAlreadyExistsError, ChatNotFoundError
from app.shared.pagination import PaginationParams, paginate, single_page
from models import Chat


logger = logging.getLogger(__name__)


class ChatService:
    """Service class for chat roster operations."""

    def __init__(self, db: AsyncSession, registry: Optional[ChatStatusRegistry] = None):
        """Initialize chat service.

        Args:
            db: Async database session for data operations.
            registry: Cleaning status registry; the process-wide one by default.
        """
        self.db = db
        self.registry = registry if registry is not None else get_status_registry()

    async def list_chats(self, pagination: Optional[PaginationParams] = None) -> Dict[str, Any]:
        """Get chats ordered by id, paginated when parameters are given."""
        stmt = select(Chat).order_by(Chat.id).execution_options(populate_existing=True)

        if pagination:
            return await paginate(self.db, stmt, pagination)

        result = await self.db.execute(stmt)
        return single_page(result.scalars().all())

    async def get_chat(self, chat_id: int) -> Optional[Chat]:
        """Get a chat by ID."""
        result = await self.db.execute(
            select(Chat).where(Chat.id == chat_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_chat_with_users(self, chat_id: int) -> Chat:
        """Get a chat with its users loaded.

        Raises:
            ChatNotFoundError: If the chat is not tracked.
        """
        stmt = (
            select(Chat)
            .options(selectinload(Chat.users))
            .where(Chat.id == chat_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        chat = result.scalar_one_or_none()
        if not chat:
            raise ChatNotFoundError(chat_id)
        return chat

    async def upsert_chat(self, chat_id: int, name: str) -> Chat:
        """Create a chat, or rename it if it already exists."""
        logger.info("Upserting chat %s (%r)", chat_id, name)

        stmt = upsert_insert(self.db, Chat).values(id=chat_id, name=name)
        stmt = stmt.on_conflict_do_update(index_elements=["id"], set_={"name": stmt.excluded.name})

        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to upsert chat %s: %s", chat_id, e)
            raise e

        self.registry.ensure(chat_id)
        return await self.get_chat(chat_id)

    async def delete_chat(self, chat_id: int) -> bool:
        """Delete a chat; its users are removed by the database cascade.

        Returns:
            True if a chat was deleted, False if it did not exist.
        """
        logger.info("Deleting chat %s", chat_id)

        try:
            result = await self.db.execute(
                delete(Chat).where(Chat.id == chat_id).execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to delete chat %s: %s", chat_id, e)
            raise e

        # Rows removed by the cascade may still sit in the identity map
        self.db.expunge_all()
        self.registry.remove(chat_id)
        return result.rowcount > 0

    async def migrate_chat(self, old_id: int, new_id: int) -> Chat:
        """Move a chat to a new id, carrying its users along.

        Raises:
            ValidationError: If both ids are the same.
            ChatNotFoundError: If ``old_id`` is not tracked.
            ChatAlreadyExistsError: If ``new_id`` is already taken.
        """
        logger.info("Migrating chat %s -> %s", old_id, new_id)

        if old_id == new_id:
            raise ValidationError(
                "Chat cannot be migrated to its own id", details={"chat_id": old_id}
            )
        if await self.get_chat(new_id) is not None:
            raise ChatAlreadyExistsError(new_id)

        try:
            result = await self.db.execute(
                update(Chat)
                .where(Chat.id == old_id)
                .values(id=new_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise ChatNotFoundError(old_id)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ChatAlreadyExistsError(new_id) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to migrate chat %s -> %s: %s", old_id, new_id, e)
            raise e

        self.db.expunge_all()
        self.registry.move(old_id, new_id)
        return await self.get_chat(new_id)

    async def clear_chat(self, chat_id: int) -> int:
        """Remove every tracked user of a chat while reporting its status.

        Returns:
            Number of users removed.
        """
        if await self.get_chat(chat_id) is None:
            raise ChatNotFoundError(chat_id)

        self.registry.ensure(chat_id)
        self.registry.set_state(chat_id, CleaningState.IN_PROGRESS)
        try:
            removed = await UserService(self.db).delete_all_users(chat_id)
        except Exception as e:
            self.registry.set_state(chat_id, CleaningState.ERROR, str(e))
            logger.error("Failed to clean chat %s: %s", chat_id, e)
            raise

        self.registry.set_state(chat_id, CleaningState.IDLE)
        logger.info("Done cleaning chat %s, removed %s users", chat_id, removed)
        return removed

    def queue_cleaning(self, chat_ids: Iterable[int]) -> List[int]:
        """Mark chats as queued; chats already queued or in progress are skipped."""
        queued = self.registry.enqueue(chat_ids)
        logger.info("Queued chats for cleaning: %s", queued)
        return queued

    async def run_cleaning(self, chat_ids: Iterable[int]) -> Dict[int, int]:
        """Clean each chat in turn; a failure is recorded and the rest continue.

        Returns:
            Removed user count for every chat cleaned successfully.
        """
        removed = {}
        for chat_id in chat_ids:
            try:
                removed[chat_id] = await self.clear_chat(chat_id)
            except Exception as e:
                if chat_id in self.registry:
                    self.registry.set_state(chat_id, CleaningState.ERROR, str(e))
                logger.error("Cleaning chat %s failed: %s", chat_id, e)
        return removed

    async def clear_chats(self, chat_ids: Iterable[int]) -> Dict[int, int]:
        """Queue then clean several chats."""
        queued = self.queue_cleaning(chat_ids)
        return await self.run_cleaning(queued)

    async def sync_statuses(self) -> int:
        """Register every stored chat in the status registry.

        Returns:
            Number of chats known to the registry afterwards.
        """
        result = await self.db.execute(select(Chat.id))
        self.registry.seed(result.scalars().all())
        return len(self.registry)
