"""Agno agent logic for the Gemini coaching model.

Responsibilities:
    - Agent initialization with the Gemini chat model
    - Normalizing browser-held history into alternating model turns
    - Streaming token generation for the chat endpoint
    - Logo image generation with the Gemini image model

Maintains clean separation from the HTTP layer.
"""

from indie_coach.agent.coach_agent import (
    CoachService,
    CoachServiceError,
    EmptyConversationError,
    get_coach_service,
)
from indie_coach.agent.config import CoachConfig, get_coach_config
from indie_coach.agent.image_generator import (
    ImageGenerationError,
    ImageGenerator,
    get_image_generator,
)

__all__ = [
    "CoachConfig",
    "CoachService",
    "CoachServiceError",
    "EmptyConversationError",
    "ImageGenerationError",
    "ImageGenerator",
    "get_coach_config",
    "get_coach_service",
    "get_image_generator",
]
