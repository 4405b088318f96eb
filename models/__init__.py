"""
Models package initialization.
"""

from .base import Base
from .chat import Chat
from .user import User

__all__ = [
    "Base",
    "Chat",
    "User",
]
