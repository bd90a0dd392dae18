"""Chat controller: the state behind the chat page, free of UI code."""

from indie_coach.chat.controller import (
    GUEST_MESSAGE_LIMIT,
    ChatController,
    ChatStreamer,
    ChatStreamError,
    derive_title,
)

__all__ = [
    "GUEST_MESSAGE_LIMIT",
    "ChatController",
    "ChatStreamError",
    "ChatStreamer",
    "derive_title",
]
