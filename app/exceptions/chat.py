"""Chat-related exceptions."""

from .base import ConflictError, NotFoundError


class ChatNotFoundError(NotFoundError):
    """Raised when a chat is not tracked by the roster."""

    def __init__(self, chat_id: int | None = None, message: str | None = None):
        self.chat_id = chat_id
        super().__init__(
            message=message or (f"Chat {chat_id} not found" if chat_id is not None else "Chat not found"),
            error_code="CHAT_NOT_FOUND",
            details={"chat_id": chat_id} if chat_id is not None else None,
        )


class ChatAlreadyExistsError(ConflictError):
    """Raised when a chat id is already taken, e.g. as a migration target."""

    def __init__(self, chat_id: int, message: str | None = None):
        self.chat_id = chat_id
        super().__init__(
            message=message or f"Chat {chat_id} already exists",
            error_code="CHAT_ALREADY_EXISTS",
            details={"chat_id": chat_id},
        )
