"""Logo image generation through the google-genai client."""

import base64
import logging

from google import genai

from indie_coach.agent.config import CoachConfig, get_coach_config

logger = logging.getLogger(__name__)


class ImageGenerationError(Exception):
    """Raised when the image model returns no usable image."""

    pass


def first_inline_image(response: object) -> str | None:
    """Return the first inline image in a model response as a data URL.

    Blocked or text-only responses have no inline data.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    for part in parts:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            data = inline.data
            if isinstance(data, bytes):
                data = base64.b64encode(data).decode("ascii")
            return f"data:{inline.mime_type};base64,{data}"
    return None


class ImageGenerator:
    """Generates images with the configured Gemini image model."""

    def __init__(self, config: CoachConfig | None = None) -> None:
        self._config = config or get_coach_config()
        self._client = genai.Client(api_key=self._config.api_key)

    async def generate(self, prompt: str) -> str:
        """Generate an image for a prompt.

        Args:
            prompt: Full image prompt.

        Returns:
            The image as a ``data:`` URL.

        Raises:
            ImageGenerationError: If the model returned no image.
        """
        response = await self._client.aio.models.generate_content(
            model=self._config.image_model,
            contents=prompt,
        )

        image_url = first_inline_image(response)
        if image_url is None:
            logger.warning("Image model returned no inline image")
            raise ImageGenerationError("The AI did not return an image.")

        logger.info("Generated image")
        return image_url


_image_generator: ImageGenerator | None = None


def get_image_generator() -> ImageGenerator:
    """Get or create the global image generator."""
    global _image_generator
    if _image_generator is None:
        _image_generator = ImageGenerator()
    return _image_generator
