# ruff: noqa: F403, F401
"""Schemas package initialization."""

from .base import *
from .chat import *
from .user import *
from .chat import ChatWithUsers

# Rebuild models after all schemas are loaded
ChatWithUsers.model_rebuild()
