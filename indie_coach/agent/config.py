"""Coach configuration with environment variable loading.

Pydantic-based configuration for the Gemini chat and image models.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


def _optional_float(name: str) -> float | None:
    value = os.getenv(name)
    return float(value) if value else None


def _optional_int(name: str) -> int | None:
    value = os.getenv(name)
    return int(value) if value else None


class CoachConfig(BaseModel):
    """Configuration for the Gemini-backed coach.

    Attributes:
        api_key: Google AI Studio API key.
        chat_model: Model identifier for chat streaming.
        image_model: Model identifier for logo generation.
        temperature: Sampling temperature, None for the provider default.
        max_output_tokens: Response token cap, None for the provider default.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("API_KEY", os.getenv("GEMINI_API_KEY", "")),
        description="API key for the Gemini API",
        validate_default=True,
    )
    chat_model: str = Field(
        default_factory=lambda: os.getenv("CHAT_MODEL", "gemini-2.5-flash"),
        description="Model used for chat responses",
    )
    image_model: str = Field(
        default_factory=lambda: os.getenv("IMAGE_MODEL", "gemini-2.5-flash-image"),
        description="Model used for image generation",
    )
    temperature: float | None = Field(
        default_factory=lambda: _optional_float("CHAT_TEMPERATURE"),
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_output_tokens: int | None = Field(
        default_factory=lambda: _optional_int("CHAT_MAX_TOKENS"),
        ge=1,
        le=65536,
        description="Maximum tokens in generated response",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("API key is missing. Set API_KEY or GEMINI_API_KEY in .env")
        return v.strip()


def get_coach_config() -> CoachConfig:
    """Create coach configuration from environment.

    Returns:
        Configured CoachConfig instance.

    Raises:
        ValidationError: If no API key is set.
    """
    return CoachConfig()
