"""FastAPI endpoints for the transcript pipeline.

Endpoints:
    - GET /health: Service health status
    - POST /transcript/structure: Structure prose into nodes
    - POST /transcript/render: Assemble and render a raw event stream
    - POST /transcript/replay: Replay wire events as Server-Sent Events
"""

from chatstream.api.app import app, create_app

__all__ = ["app", "create_app"]
