"""FastAPI endpoints for Indie Coach.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Conversation in, chunked plain-text reply out
    - POST /api/generate-image: Prompt in, data-URL image out

Every error response has the shape ``{"error": "..."}``.
"""

from indie_coach.api.app import app, create_app

__all__ = ["app", "create_app"]
