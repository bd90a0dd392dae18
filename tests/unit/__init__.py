"""Unit tests for individual components in isolation.

Coverage:
    - agent/: Configuration, history conversion, streaming, image generation
    - parsing/: Suggestion and widget tags, attachment validation
    - widgets/: Ticket estimator math, budget totals, branding guide edits
    - storage/ and chat/: Account, history, recovery, and controller flows
    - ui/: Markdown rendering and the HTTP client

Uses mocks for the Gemini model and client. Leverages pytest-check for
multiple assertions per test.
"""
