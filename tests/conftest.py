"""Pytest fixtures and shared test configuration.

Fixtures:
    - async_client: HTTPX client for API testing
    - browser_store / tab_store: dict stand-ins for browser storage
    - storage: CoachStorage over those dicts
    - make_message: builder for chat messages
    - fake_service: coach service whose reply is scripted per test
"""

from collections.abc import AsyncGenerator, Callable, Generator

import pytest
from httpx import ASGITransport, AsyncClient

from indie_coach.api import app
from indie_coach.api.chat import coach_service, image_generator
from indie_coach.models.schemas import FileData, FilePart, Message, Role, TextPart
from indie_coach.storage.store import CoachStorage


class FakeCoachService:
    """Stands in for CoachService; yields ``chunks`` then raises ``error``."""

    def __init__(self) -> None:
        self.chunks: list[str] = ["Hello ", "artist!"]
        self.error: Exception | None = None
        self.calls: list[tuple[list[Message], bool]] = []

    async def stream_response(
        self, messages: list[Message], book_summary: bool = False
    ) -> AsyncGenerator[str]:
        self.calls.append((messages, book_summary))
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error


class FakeImageGenerator:
    def __init__(self) -> None:
        self.image_url = "data:image/png;base64,iVBORw0KGgo="
        self.error: Exception | None = None
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.image_url


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fake_service() -> Generator[FakeCoachService]:
    """Install a scripted coach service for the duration of a test."""
    service = FakeCoachService()
    app.dependency_overrides[coach_service] = lambda: service
    yield service
    app.dependency_overrides.pop(coach_service, None)


@pytest.fixture
def fake_image_generator() -> Generator[FakeImageGenerator]:
    """Install a scripted image generator for the duration of a test."""
    generator = FakeImageGenerator()
    app.dependency_overrides[image_generator] = lambda: generator
    yield generator
    app.dependency_overrides.pop(image_generator, None)


@pytest.fixture
def browser_store() -> dict[str, str]:
    return {}


@pytest.fixture
def tab_store() -> dict[str, str]:
    return {}


@pytest.fixture
def storage(browser_store: dict[str, str], tab_store: dict[str, str]) -> CoachStorage:
    return CoachStorage(browser_store, tab_store)


@pytest.fixture
def make_message() -> Callable[..., Message]:
    """Build a message from text and/or a file.

    Returns:
        ``make(role, text=None, file=None, timestamp=1)`` where ``file`` is a
        ``(name, mime_type, data)`` tuple.
    """

    def make(
        role: Role | str,
        text: str | None = None,
        file: tuple[str, str, str | None] | None = None,
        timestamp: int = 1,
    ) -> Message:
        parts: list[TextPart | FilePart] = []
        if text is not None:
            parts.append(TextPart(text=text))
        if file is not None:
            name, mime_type, data = file
            parts.append(FilePart(file=FileData(name=name, mime_type=mime_type, data=data)))
        return Message(role=Role(role), parts=parts, timestamp=timestamp)

    return make
