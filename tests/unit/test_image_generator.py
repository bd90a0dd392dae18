"""Unit tests for ImageGenerator with a mocked google-genai client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from indie_coach.agent.config import CoachConfig
from indie_coach.agent.image_generator import (
    ImageGenerationError,
    ImageGenerator,
    first_inline_image,
)


def response_with_parts(*parts: object) -> SimpleNamespace:
    return SimpleNamespace(
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))]
    )


def inline_part(data: bytes | str, mime_type: str = "image/png") -> SimpleNamespace:
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type))


class TestFirstInlineImage:
    def test_encodes_bytes_as_data_url(self) -> None:
        response = response_with_parts(inline_part(b"\x89PNG"))

        assert first_inline_image(response) == "data:image/png;base64,iVBORw=="

    def test_skips_text_parts(self) -> None:
        response = response_with_parts(
            SimpleNamespace(inline_data=None, text="Here is your logo"),
            inline_part("QUJD", "image/jpeg"),
        )

        assert first_inline_image(response) == "data:image/jpeg;base64,QUJD"

    def test_no_candidates(self) -> None:
        assert first_inline_image(SimpleNamespace(candidates=None)) is None
        assert first_inline_image(SimpleNamespace(candidates=[])) is None

    def test_text_only_response(self) -> None:
        response = response_with_parts(SimpleNamespace(inline_data=None, text="Sorry"))

        assert first_inline_image(response) is None


class TestImageGenerator:
    @pytest.fixture
    def config(self) -> CoachConfig:
        return CoachConfig(api_key="test-key", image_model="image-test")

    async def test_generate_returns_data_url(self, config: CoachConfig) -> None:
        with patch("indie_coach.agent.image_generator.genai.Client") as mock_client_class:
            generate = AsyncMock(return_value=response_with_parts(inline_part("QUJD")))
            mock_client_class.return_value.aio.models.generate_content = generate

            generator = ImageGenerator(config=config)
            image_url = await generator.generate("logo prompt")

        mock_client_class.assert_called_once_with(api_key="test-key")
        generate.assert_awaited_once_with(model="image-test", contents="logo prompt")
        assert image_url == "data:image/png;base64,QUJD"

    async def test_generate_without_image_raises(self, config: CoachConfig) -> None:
        with patch("indie_coach.agent.image_generator.genai.Client") as mock_client_class:
            mock_client_class.return_value.aio.models.generate_content = AsyncMock(
                return_value=SimpleNamespace(candidates=[])
            )
            generator = ImageGenerator(config=config)

            with pytest.raises(ImageGenerationError, match="did not return an image"):
                await generator.generate("logo prompt")
