"""Integration tests for components working together as a system.

No mocks for core functionality - tests real interactions.

Coverage:
    - API endpoints with real HTTP requests over ASGI transport
    - Replayed event streams decoded and assembled by a session
    - Rendering of assembled messages
"""
