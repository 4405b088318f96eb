# app/core/dependencies.py
"""FastAPI dependencies shared by the domain routers."""
import logging

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db, get_session_factory
from app.domains.chat.status import ChatStatusRegistry, get_status_registry
from app.exceptions.chat import ChatNotFoundError
from app.schemas.base import PLATFORM_ID_MAX, PLATFORM_ID_MIN
from models import Chat

logger = logging.getLogger(__name__)


async def get_existing_chat(
    chat_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX),
    db: AsyncSession = Depends(get_db),
) -> Chat:
    """Resolve the ``chat_id`` path parameter to a stored chat.

    Raises:
        ChatNotFoundError: If the chat is not tracked
    """
    chat = await db.get(Chat, chat_id)
    if chat is None:
        logger.debug("Chat %s requested but not tracked", chat_id)
        raise ChatNotFoundError(chat_id)
    return chat


__all__ = [
    "get_db",
    "get_session_factory",
    "get_status_registry",
    "get_existing_chat",
    "ChatStatusRegistry",
]
