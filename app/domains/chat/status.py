"""In-memory cleaning status of every known chat.

Cleaning removes all tracked users from a chat and may run in the
background, so callers need a place to see whether a chat is idle, waiting,
being cleaned, or failed last time. The registry lives in process memory and
is reseeded from the database on startup.
"""

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from app.exceptions.chat import ChatNotFoundError

logger = logging.getLogger(__name__)


class CleaningState(str, enum.Enum):
    """Cleaning lifecycle of a chat."""

    IDLE = "idle"
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    ERROR = "error"


@dataclass
class CleaningStatus:
    state: CleaningState = CleaningState.IDLE
    error: str | None = None

    @property
    def can_be_queued(self) -> bool:
        return self.state in (CleaningState.IDLE, CleaningState.ERROR)


class ChatStatusRegistry:
    """Mapping of chat id to its current `CleaningStatus`."""

    def __init__(self):
        self._statuses: dict[int, CleaningStatus] = {}

    def __contains__(self, chat_id: int) -> bool:
        return chat_id in self._statuses

    def __len__(self) -> int:
        return len(self._statuses)

    def ensure(self, chat_id: int) -> CleaningStatus:
        """Register ``chat_id`` as idle unless it is already known."""
        return self._statuses.setdefault(chat_id, CleaningStatus())

    def seed(self, chat_ids: Iterable[int]) -> None:
        for chat_id in chat_ids:
            self.ensure(chat_id)

    def get(self, chat_id: int) -> CleaningStatus | None:
        return self._statuses.get(chat_id)

    def set_state(self, chat_id: int, state: CleaningState, error: str | None = None) -> None:
        status = self._statuses.get(chat_id)
        if status is None:
            raise ChatNotFoundError(chat_id)
        status.state = state
        status.error = error if state == CleaningState.ERROR else None

    def remove(self, chat_id: int) -> None:
        self._statuses.pop(chat_id, None)

    def move(self, old_id: int, new_id: int) -> None:
        """Re-key a chat's status after the chat itself changed id."""
        if self._statuses.pop(old_id, None) is None:
            logger.warning("Moving status of unknown chat %s to %s", old_id, new_id)
        self._statuses[new_id] = CleaningStatus()

    def enqueue(self, chat_ids: Iterable[int]) -> list[int]:
        """Mark chats as queued for cleaning.

        Every id must be known; otherwise nothing is queued. Chats that are
        already queued or being cleaned are skipped.

        Returns:
            The ids that moved to ``queued``, in request order.
        """
        chat_ids = list(dict.fromkeys(chat_ids))
        missing = [chat_id for chat_id in chat_ids if chat_id not in self._statuses]
        if missing:
            raise ChatNotFoundError(missing[0])

        queued = []
        for chat_id in chat_ids:
            status = self._statuses[chat_id]
            if status.can_be_queued:
                status.state = CleaningState.QUEUED
                status.error = None
                queued.append(chat_id)
        return queued

    def snapshot(self) -> dict[int, CleaningStatus]:
        return {
            chat_id: CleaningStatus(status.state, status.error)
            for chat_id, status in sorted(self._statuses.items())
        }

    def clear(self) -> None:
        self._statuses.clear()


# Process-wide registry used by the application
status_registry = ChatStatusRegistry()


def get_status_registry() -> ChatStatusRegistry:
    return status_registry
