"""Integration tests for the FastAPI app.

Coverage:
    - Chat streaming, error shapes, CORS, and health
    - Image generation endpoint
    - Chat controller driven through the HTTP client and the app
    - A live Gemini reply (when API_KEY is configured)

The model layer is swapped through dependency overrides except in the live
test.
"""
