"""Indie Coach - a music industry coaching assistant for independent artists.

Combines FastAPI for HTTP streaming, Agno with Gemini for the coaching model,
NiceGUI for the chat interface, and Pydantic for data validation.

Components:
    - api: Chat and image-generation endpoints
    - agent: Gemini orchestration, prompts, and history conversion
    - parsing: Suggestion/widget tag extraction and attachment validation
    - widgets: Ticket estimator, budget table, branding guide, book summary
    - storage: Browser-scoped accounts, chat history, and crash recovery
    - chat: UI-independent chat controller
    - ui: Web interface for chat interactions
    - models: Request/response schemas
"""

__version__ = "0.1.0"
