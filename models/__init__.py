"""Database models."""

from db import Base

# Import all models so Alembic can detect them
from models.chat_thread import ChatMessage, ChatThread
from models.prompt import Prompt

__all__ = [
    "Base",
    "ChatThread",
    "ChatMessage",
    "Prompt",
]
