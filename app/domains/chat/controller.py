"""Chat API controller with FastAPI endpoints."""

import logging

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Path, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.dependencies import get_db, get_session_factory, get_status_registry
from app.domains.chat.service import ChatService
from app.domains.chat.status import ChatStatusRegistry
from app.exceptions.chat import ChatNotFoundError
from app.schemas.base import PLATFORM_ID_MAX, PLATFORM_ID_MIN, ResponseSchema
from app.schemas.chat import (
    ChatClearRequest,
    ChatListResponse,
    ChatMigrateRequest,
    ChatResponse,
    ChatUpsert,
    ChatWithUsers,
    CleaningStatusResponse,
)
from app.shared.pagination import PaginationParams


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/chats",
    tags=["chats"],
)


async def clean_chats_in_background(
    session_factory: async_sessionmaker[AsyncSession],
    registry: ChatStatusRegistry,
    chat_ids: list[int],
) -> None:
    """Run queued cleanings with a session of their own."""
    async with session_factory() as session:
        await ChatService(session, registry).run_cleaning(chat_ids)


@router.get("/", response_model=ChatListResponse)
async def get_chats(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Page size"),
    db: AsyncSession = Depends(get_db),
    registry: ChatStatusRegistry = Depends(get_status_registry),
):
    """Get paginated list of tracked chats."""
    service = ChatService(db, registry)
    result = await service.list_chats(PaginationParams(page=page, size=size))

    return ChatListResponse(
        chats=[ChatResponse.model_validate(chat) for chat in result["items"]],
        total=result["total"],
        page=result["page"],
        size=result["size"],
        has_next=result["has_next"],
        has_prev=result["has_prev"],
        total_pages=result["total_pages"],
    )


@router.get("/status", response_model=ResponseSchema)
async def get_cleaning_status(
    registry: ChatStatusRegistry = Depends(get_status_registry),
):
    """Get the cleaning status of every known chat, keyed by chat ID."""
    statuses = {
        str(chat_id): CleaningStatusResponse(state=entry.state, error=entry.error).model_dump(
            mode="json"
        )
        for chat_id, entry in registry.snapshot().items()
    }
    return ResponseSchema(
        status="success",
        message="Cleaning status retrieved successfully",
        data=statuses,
    )


@router.post("/clear", response_model=ResponseSchema, status_code=status.HTTP_202_ACCEPTED)
async def clear_chats(
    background_tasks: BackgroundTasks,
    clear_request: ChatClearRequest = Body(...),
    db: AsyncSession = Depends(get_db),
    registry: ChatStatusRegistry = Depends(get_status_registry),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Queue chats for cleaning; the work continues after the response."""
    service = ChatService(db, registry)
    queued = service.queue_cleaning(clear_request.chats)

    if queued:
        background_tasks.add_task(clean_chats_in_background, session_factory, registry, queued)

    return ResponseSchema(
        status="success",
        message="Chats queued for cleaning",
        data={"queued": queued},
    )


@router.get("/{chat_id}", response_model=ResponseSchema)
async def get_chat(
    chat_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="Chat ID"),
    db: AsyncSession = Depends(get_db),
    registry: ChatStatusRegistry = Depends(get_status_registry),
):
    """Get a chat with all its users."""
    service = ChatService(db, registry)
    chat = await service.get_chat_with_users(chat_id)

    return ResponseSchema(
        status="success",
        message="Chat retrieved successfully",
        data=ChatWithUsers.model_validate(chat).model_dump(),
    )


@router.put("/{chat_id}", response_model=ResponseSchema)
async def upsert_chat(
    chat_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="Chat ID"),
    chat_data: ChatUpsert = Body(...),
    db: AsyncSession = Depends(get_db),
    registry: ChatStatusRegistry = Depends(get_status_registry),
):
    """Create a chat or rename an existing one."""
    service = ChatService(db, registry)
    chat = await service.upsert_chat(chat_id, chat_data.name)

    return ResponseSchema(
        status="success",
        message="Chat saved successfully",
        data=ChatResponse.model_validate(chat).model_dump(),
    )


@router.delete("/{chat_id}", response_model=ResponseSchema)
async def delete_chat(
    chat_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="Chat ID"),
    db: AsyncSession = Depends(get_db),
    registry: ChatStatusRegistry = Depends(get_status_registry),
):
    """Delete a chat together with all its users."""
    service = ChatService(db, registry)
    deleted = await service.delete_chat(chat_id)

    if not deleted:
        raise ChatNotFoundError(chat_id)

    return ResponseSchema(
        status="success",
        message="Chat deleted successfully",
        data=None,
    )


@router.post("/{chat_id}/migrate", response_model=ResponseSchema)
async def migrate_chat(
    chat_id: int = Path(
        ..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="Current chat ID"
    ),
    migrate_request: ChatMigrateRequest = Body(...),
    db: AsyncSession = Depends(get_db),
    registry: ChatStatusRegistry = Depends(get_status_registry),
):
    """Move a chat and its users to a new chat ID."""
    service = ChatService(db, registry)
    chat = await service.migrate_chat(chat_id, migrate_request.new_id)

    return ResponseSchema(
        status="success",
        message="Chat migrated successfully",
        data=ChatResponse.model_validate(chat).model_dump(),
    )


@router.post("/{chat_id}/clear", response_model=ResponseSchema)
async def clear_chat(
    chat_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="Chat ID"),
    db: AsyncSession = Depends(get_db),
    registry: ChatStatusRegistry = Depends(get_status_registry),
):
    """Remove every tracked user from a chat."""
    service = ChatService(db, registry)

    try:
        removed = await service.clear_chat(chat_id)
    except ChatNotFoundError:
        raise
    except Exception as e:
        logger.error(f"Error cleaning chat {chat_id}: {str(e)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ResponseSchema(
                status="error",
                message="Failed to clean chat",
                data={"error": str(e)},
            ).model_dump(),
        )

    return ResponseSchema(
        status="success",
        message="Chat cleaned successfully",
        data={"removed": removed},
    )
