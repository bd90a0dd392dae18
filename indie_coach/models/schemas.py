from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON.

    Python code uses snake_case attributes; stored and wire JSON keeps the
    camelCase keys the browser client has always written.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Serialize with camelCase keys, omitting unset optional values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Role(str, Enum):
    """Speaker of a message."""

    USER = "user"
    MODEL = "model"


class TextPart(CamelModel):
    """A plain text part of a message."""

    type: Literal["text"] = "text"
    text: str


class FileData(CamelModel):
    """An attached file.

    Attributes:
        name: Original filename.
        mime_type: MIME type reported for the file.
        data: Base64 payload. Absent once stripped from saved history.
    """

    name: str
    mime_type: str
    data: str | None = None


class FilePart(CamelModel):
    """A file attachment part of a message."""

    type: Literal["file"] = "file"
    file: FileData


Part = Annotated[TextPart | FilePart, Field(discriminator="type")]


class Message(CamelModel):
    """A single chat message.

    Attributes:
        role: Who sent the message.
        parts: Ordered text and file parts.
        timestamp: Creation time in epoch milliseconds.
    """

    role: Role
    parts: list[Part] = Field(..., min_length=1)
    timestamp: int

    def first_text(self) -> str | None:
        """Return the text of the first text part, if any."""
        for part in self.parts:
            if isinstance(part, TextPart):
                return part.text
        return None

    def first_file(self) -> FileData | None:
        """Return the first attached file, if any."""
        for part in self.parts:
            if isinstance(part, FilePart):
                return part.file
        return None

    def text(self) -> str:
        """Concatenate all text parts."""
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))


class ChatSession(CamelModel):
    """A saved conversation.

    Attributes:
        id: Epoch-millisecond creation time as a string.
        title: Short title derived from the first user message.
        messages: Ordered messages.
    """

    id: str
    title: str
    messages: list[Message] = Field(default_factory=list)


class User(CamelModel):
    """A locally registered user. The email is never verified."""

    first_name: str = ""
    last_name: str = ""
    email: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: str) -> str:
        """Strip whitespace from the email before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class RecoverySnapshot(CamelModel):
    """Tab-scoped copy of the open conversation for crash recovery.

    Attributes:
        active_chat_id: Open chat for signed-in users, None for guests.
        messages: Messages on screen when the snapshot was taken.
    """

    active_chat_id: str | None = None
    messages: list[Message] = Field(default_factory=list)


class ChatRequest(CamelModel):
    """Request payload for the chat streaming endpoint.

    Attributes:
        messages: Full conversation so far, oldest first.
        book_summary: Prepend the book summary as conversation context.
    """

    messages: list[Message]
    book_summary: bool = False


class ImageRequest(BaseModel):
    """Request payload for the image generation endpoint."""

    prompt: str = Field(..., min_length=1)

    @field_validator("prompt", mode="before")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        """Strip whitespace from prompt before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ImageResponse(CamelModel):
    """Generated image as a data URL."""

    image_url: str


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint."""

    error: str
