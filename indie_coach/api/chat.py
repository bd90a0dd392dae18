"""Chat streaming and image generation endpoints.

The chat endpoint relays model output as chunked plain text: the browser
appends each chunk to the pending reply as it arrives.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from indie_coach.agent.coach_agent import (
    CoachService,
    CoachServiceError,
    EmptyConversationError,
    get_coach_service,
)
from indie_coach.agent.image_generator import (
    ImageGenerationError,
    ImageGenerator,
    get_image_generator,
)
from indie_coach.models.schemas import ChatRequest, ErrorResponse, ImageRequest, ImageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _config_error(e: ValidationError) -> HTTPException:
    if any("api_key" in err.get("loc", ()) for err in e.errors()):
        message = "API key is missing"
    else:
        message = "Invalid model configuration"
    logger.error(f"Coach configuration error: {e}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


def coach_service() -> CoachService:
    """Dependency returning the shared coach service.

    Raises:
        HTTPException: 500 if the service cannot be configured.
    """
    try:
        return get_coach_service()
    except ValidationError as e:
        raise _config_error(e) from e


def image_generator() -> ImageGenerator:
    """Dependency returning the shared image generator.

    Raises:
        HTTPException: 500 if the generator cannot be configured.
    """
    try:
        return get_image_generator()
    except ValidationError as e:
        raise _config_error(e) from e


@router.post(
    "/chat",
    response_class=StreamingResponse,
    responses=_ERROR_RESPONSES,
)
async def chat(
    request: ChatRequest,
    service: CoachService = Depends(coach_service),
) -> StreamingResponse:
    """Stream the coach's reply to a conversation as plain text.

    The first chunk is awaited before the response starts, so failures that
    happen up front still get a proper status code. Failures after that end
    the stream with an error marker.

    Raises:
        400: Invalid or empty message history.
        500: Missing API key or model failure.
    """
    stream = service.stream_response(request.messages, book_summary=request.book_summary)

    try:
        first_chunk = await anext(stream)
    except StopAsyncIteration:
        first_chunk = ""
    except EmptyConversationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except CoachServiceError as e:
        logger.error(f"Error in chat handler: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e

    async def body() -> AsyncGenerator[str]:
        if first_chunk:
            yield first_chunk
        try:
            async for chunk in stream:
                yield chunk
        except CoachServiceError as e:
            logger.error(f"Chat stream interrupted: {e}")
            yield f"\n\n[Error: {e}]"

    return StreamingResponse(body(), media_type="text/plain; charset=utf-8")


@router.post(
    "/generate-image",
    response_model=ImageResponse,
    responses=_ERROR_RESPONSES,
)
async def generate_image(
    request: ImageRequest,
    generator: ImageGenerator = Depends(image_generator),
) -> ImageResponse:
    """Generate an image for a prompt and return it as a data URL.

    Raises:
        400: Missing or blank prompt.
        500: Any failure to produce an image.
    """
    try:
        image_url = await generator.generate(request.prompt)
    except ImageGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e
    except Exception as e:
        logger.error(f"Error in image generation handler: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e

    return ImageResponse(image_url=image_url)
