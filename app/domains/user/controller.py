"""Chat member controller endpoints."""

from fastapi import APIRouter, Body, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_existing_chat
from app.domains.user.service import UserService
from app.exceptions.user import UserNotFoundError
from app.schemas.base import PLATFORM_ID_MAX, PLATFORM_ID_MIN, ResponseSchema
from app.schemas.user import UserResponse, UsersBulkUpsert, UserUpsert
from models import Chat

router = APIRouter(prefix="/api/chats/{chat_id}/users", tags=["users"])


@router.get("/", response_model=list[UserResponse])
async def list_users(
    chat: Chat = Depends(get_existing_chat),
    db: AsyncSession = Depends(get_db),
):
    """List every tracked user of a chat."""
    users = await UserService(db).list_users(chat.id)
    return [UserResponse.model_validate(user) for user in users]


@router.put("/", response_model=list[UserResponse])
async def upsert_users(
    chat_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="Chat ID"),
    bulk: UsersBulkUpsert = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Add or refresh several users of a chat at once.

    The chat must already exist; a missing chat is rejected with 404 and
    nothing is written.
    """
    users = await UserService(db).upsert_users(chat_id, bulk.users)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="User ID"),
    chat: Chat = Depends(get_existing_chat),
    db: AsyncSession = Depends(get_db),
):
    """Get one user of a chat."""
    user = await UserService(db).get_user(chat.id, user_id)
    if not user:
        raise UserNotFoundError(chat.id, user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse, status_code=status.HTTP_200_OK)
async def upsert_user(
    chat_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="Chat ID"),
    user_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="User ID"),
    user_data: UserUpsert = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Add a user to a chat or refresh their stored names."""
    user = await UserService(db).upsert_user(
        chat_id=chat_id,
        user_id=user_id,
        name=user_data.name,
        username=user_data.username,
    )
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=ResponseSchema)
async def remove_user(
    user_id: int = Path(..., ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX, description="User ID"),
    chat: Chat = Depends(get_existing_chat),
    db: AsyncSession = Depends(get_db),
):
    """Remove a user from a chat."""
    removed = await UserService(db).remove_user(chat.id, user_id)
    if not removed:
        raise UserNotFoundError(chat.id, user_id)

    return ResponseSchema(status="success", message="User removed successfully", data=None)
