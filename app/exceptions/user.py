"""User-related exceptions."""

from .base import NotFoundError


class UserNotFoundError(NotFoundError):
    """Raised when a user is not a tracked member of a chat."""

    def __init__(self, chat_id: int, user_id: int):
        self.chat_id = chat_id
        self.user_id = user_id
        super().__init__(
            message=f"User {user_id} not found in chat {chat_id}",
            error_code="USER_NOT_FOUND",
            details={"chat_id": chat_id, "user_id": user_id},
        )
