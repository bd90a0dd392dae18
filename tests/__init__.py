"""Test package for Indie Coach.

Structure:
    - unit/: Individual function and class tests
    - integration/: API endpoint tests through the ASGI app

Leverages pytest with pytest-check for soft assertions.
"""
