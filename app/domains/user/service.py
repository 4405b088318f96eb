# app/domains/user/service.py
import logging
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.chat import ChatNotFoundError
from app.schemas.user import UserUpsertItem
from models import Chat, User

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def upsert_insert(db: AsyncSession, model):
    """Return the dialect's ``INSERT`` construct supporting ``ON CONFLICT``."""
    dialect = db.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect](model)
    except KeyError:
        raise RuntimeError(f"Upserts are not supported on the {dialect} dialect") from None


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _chat_exists(self, chat_id: int) -> bool:
        result = await self.db.execute(select(Chat.id).where(Chat.id == chat_id))
        return result.scalar_one_or_none() is not None

    async def list_users(self, chat_id: int) -> List[User]:
        """Get every user tracked in a chat."""
        result = await self.db.execute(
            select(User)
            .where(User.chat_id == chat_id)
            .order_by(User.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_user(self, chat_id: int, user_id: int) -> Optional[User]:
        """Get a user of a chat by platform user ID."""
        result = await self.db.execute(
            select(User)
            .where(User.chat_id == chat_id, User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _upsert(self, chat_id: int, user_id: int, name: str, username: Optional[str]) -> None:
        stmt = upsert_insert(self.db, User).values(
            id=user_id, chat_id=chat_id, username=username, name=name
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["id", "chat_id"],
            set_={"username": stmt.excluded.username, "name": stmt.excluded.name},
        )
        await self.db.execute(stmt)

    async def upsert_user(
        self, chat_id: int, user_id: int, name: str, username: Optional[str] = None
    ) -> User:
        """Add a user to a chat, or refresh the stored names of an existing one."""
        logger.info("Upserting user %s in chat %s", user_id, chat_id)
        item = UserUpsertItem(id=user_id, name=name, username=username)
        stored = await self.upsert_users(chat_id, [item])
        return stored[0]

    async def upsert_users(self, chat_id: int, users: Iterable[UserUpsertItem]) -> List[User]:
        """Upsert several users of one chat in a single transaction."""
        users = list(users)
        if not await self._chat_exists(chat_id):
            raise ChatNotFoundError(chat_id)

        try:
            for user in users:
                await self._upsert(chat_id, user.id, user.name, user.username)
            await self.db.commit()
        except IntegrityError as e:
            # The chat vanished between the existence check and the insert
            await self.db.rollback()
            logger.error("Failed to upsert users in chat %s: %s", chat_id, e)
            raise ChatNotFoundError(chat_id) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

        stored = []
        for user in users:
            stored.append(await self.get_user(chat_id, user.id))
        return stored

    async def remove_user(self, chat_id: int, user_id: int) -> bool:
        """Remove a user from a chat."""
        logger.info("Removing user %s from chat %s", user_id, chat_id)
        try:
            result = await self.db.execute(
                delete(User).where(User.chat_id == chat_id, User.id == user_id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e
        return result.rowcount > 0

    async def delete_all_users(self, chat_id: int) -> int:
        """Remove every tracked user of a chat, keeping the chat itself."""
        logger.info("Deleting all users from chat %s", chat_id)
        try:
            result = await self.db.execute(delete(User).where(User.chat_id == chat_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e
        return result.rowcount
