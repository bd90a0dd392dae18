"""Pydantic models for chat data, API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.
Stored and wire JSON uses camelCase keys; Python attributes are snake_case.

Models:
    - Message, TextPart, FilePart: Conversation content
    - ChatSession: A saved conversation
    - User: A locally registered user
    - RecoverySnapshot: Tab-scoped crash-recovery copy of the open chat
    - ChatRequest, ImageRequest, ImageResponse, ErrorResponse: HTTP payloads
"""

from indie_coach.models.schemas import (
    ChatRequest,
    ChatSession,
    ErrorResponse,
    FileData,
    FilePart,
    ImageRequest,
    ImageResponse,
    Message,
    Part,
    RecoverySnapshot,
    Role,
    TextPart,
    User,
)

__all__ = [
    "ChatRequest",
    "ChatSession",
    "ErrorResponse",
    "FileData",
    "FilePart",
    "ImageRequest",
    "ImageResponse",
    "Message",
    "Part",
    "RecoverySnapshot",
    "Role",
    "TextPart",
    "User",
]
