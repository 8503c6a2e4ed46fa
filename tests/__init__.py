"""Test package for chatstream.

Provides coverage for all components with unit tests for isolated logic
and integration tests for the HTTP adapter and end-to-end streaming.

Structure:
    - unit/: Individual function and class tests
    - integration/: Streams replayed through the FastAPI app

No network access or API keys required. Leverages pytest with
pytest-check for soft assertions.
"""
