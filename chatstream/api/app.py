"""FastAPI application factory.

Builds the HTTP adapter around one PipelineConfig, shared by every request
through ``app.state``.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatstream import __version__
from chatstream.api.routes import router as transcript_router
from chatstream.config import PipelineConfig, get_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log the active structuring limits for the lifetime of the server.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    config: PipelineConfig = app.state.config
    logger.info(
        f"Starting chatstream API (paragraph_max_chars={config.paragraph_max_chars}, "
        f"producer={config.api_base_url})"
    )
    yield
    logger.info("Shutting down chatstream API...")


def create_app(config: PipelineConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Pipeline configuration for all requests. Loads from
            environment if not provided.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="chatstream API",
        description=(
            "Decodes streamed assistant events into transcripts and structures "
            "assistant prose into headings, lists, tables and code blocks. "
            "Also replays recorded events as a server-sent stream."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    application.state.config = config or get_config()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    application.include_router(transcript_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chatstream"}

    return application


app = create_app()
