"""HTTP client the chat page uses to reach the Indie Coach API."""

import logging
import os
from collections.abc import AsyncIterator

import httpx

from indie_coach.chat.controller import ChatStreamError
from indie_coach.models.schemas import ChatRequest, ImageRequest, Message

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


class ImageRequestError(Exception):
    """Raised when the image endpoint does not return an image."""

    pass


def _error_text(response: httpx.Response) -> str:
    """Pull the ``error`` field out of an error response, if there is one."""
    try:
        error = response.json().get("error")
    except ValueError:
        error = None
    return error or f"HTTP {response.status_code}"


class CoachApiClient:
    """Talks to ``/api/chat`` and ``/api/generate-image``.

    Args:
        base_url: API root, defaults to ``API_BASE_URL``.
        transport: Optional httpx transport, e.g. ASGITransport in tests.
        timeout: Seconds before a request is abandoned.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 120.0,
    ) -> None:
        self._base_url = base_url
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url, transport=self._transport, timeout=self._timeout
        )

    async def stream_chat(
        self, messages: list[Message], book_summary: bool = False
    ) -> AsyncIterator[str]:
        """Consume the plain-text stream from /api/chat.

        Yields:
            Text chunks as they arrive.

        Raises:
            ChatStreamError: On connection failure or an error response.
        """
        payload = ChatRequest(messages=messages, book_summary=book_summary).to_json_dict()
        async with self._client() as client:
            try:
                async with client.stream("POST", "/api/chat", json=payload) as response:
                    if response.is_error:
                        await response.aread()
                        raise ChatStreamError(_error_text(response))
                    async for chunk in response.aiter_text():
                        if chunk:
                            yield chunk
            except httpx.RequestError as e:
                raise ChatStreamError(f"Connection failed: {e}") from e

    async def generate_image(self, prompt: str) -> str:
        """Request an image and return its data URL.

        Raises:
            ImageRequestError: On connection failure or an error response.
        """
        payload = ImageRequest(prompt=prompt).model_dump()
        async with self._client() as client:
            try:
                response = await client.post("/api/generate-image", json=payload)
            except httpx.RequestError as e:
                raise ImageRequestError(f"Connection failed: {e}") from e

        if response.is_error:
            raise ImageRequestError(f"API Error: {_error_text(response)}")

        image_url = response.json().get("imageUrl")
        if not image_url:
            raise ImageRequestError(
                "The AI did not return an image. Please try a different prompt."
            )
        return image_url
