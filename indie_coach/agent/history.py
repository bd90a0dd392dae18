"""Conversion of stored chat history into model input.

The Gemini API requires strictly alternating user/model turns that end with
a user turn. Stored history can break that (a failed request leaves two user
messages in a row), so it is normalized here before every call.
"""

import base64
import binascii
import logging
import time

from agno.media import File, Image
from agno.models.message import Message as AgentMessage

from indie_coach.agent.prompts import (
    ALL_ABOUT_MUSIC_BUSINESS_SUMMARY,
    BOOK_SUMMARY_ACKNOWLEDGEMENT,
)
from indie_coach.models.schemas import FilePart, Message, Role, TextPart

logger = logging.getLogger(__name__)

# Agno speaks OpenAI-style roles; its Gemini model maps "assistant" to "model".
_AGENT_ROLES = {Role.USER: "user", Role.MODEL: "assistant"}


def alternate_roles(messages: list[Message]) -> list[Message]:
    """Keep only the first message of each run of same-role messages.

    A trailing model message is dropped so the result always ends on a user
    turn.

    Args:
        messages: Conversation in chronological order.

    Returns:
        Filtered conversation, possibly empty.
    """
    filtered: list[Message] = []
    last_role: Role | None = None
    for message in messages:
        if message.role != last_role:
            filtered.append(message)
            last_role = message.role

    if filtered and filtered[-1].role != Role.USER:
        filtered.pop()

    return filtered


def _decode(data: str, name: str) -> bytes | None:
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        logger.warning(f"Skipping attachment with invalid base64 data: {name}")
        return None


def to_agent_message(message: Message) -> AgentMessage:
    """Convert one chat message into an Agno message with inline media.

    Text parts are joined with blank lines. Image files become images, other
    files become generic files. File parts whose data was stripped from
    saved history are skipped.
    """
    texts: list[str] = []
    images: list[Image] = []
    files: list[File] = []

    for part in message.parts:
        if isinstance(part, TextPart):
            texts.append(part.text)
            continue
        if not isinstance(part, FilePart) or not part.file.data:
            continue
        content = _decode(part.file.data, part.file.name)
        if content is None:
            continue
        if part.file.mime_type.startswith("image/"):
            images.append(Image(content=content, mime_type=part.file.mime_type))
        else:
            files.append(
                File(content=content, mime_type=part.file.mime_type, filename=part.file.name)
            )

    return AgentMessage(
        role=_AGENT_ROLES[message.role],
        content="\n\n".join(texts),
        images=images or None,
        files=files or None,
    )


def to_agent_messages(messages: list[Message]) -> list[AgentMessage]:
    """Normalize a conversation and convert it for the agent.

    Args:
        messages: Conversation in chronological order.

    Returns:
        Agent messages ready to send. Empty when nothing usable remains.
    """
    return [to_agent_message(m) for m in alternate_roles(messages)]


def with_book_summary_context(messages: list[Message]) -> list[Message]:
    """Prepend the book summary as an earlier exchange in the conversation.

    The summary goes in as a user turn followed by a model acknowledgement,
    so role alternation keeps the real conversation intact.
    """
    now = int(time.time() * 1000)
    context = [
        Message(
            role=Role.USER,
            parts=[
                TextPart(
                    text=(
                        "Use the following book summary to answer my question:\n\n"
                        f"{ALL_ABOUT_MUSIC_BUSINESS_SUMMARY}"
                    )
                )
            ],
            timestamp=now,
        ),
        Message(
            role=Role.MODEL,
            parts=[TextPart(text=BOOK_SUMMARY_ACKNOWLEDGEMENT)],
            timestamp=now,
        ),
    ]
    return context + list(messages)
