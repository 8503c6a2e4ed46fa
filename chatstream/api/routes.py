"""Transcript endpoints.

Thin adapters over the in-process pipeline: structure prose, render a
raw event stream, and replay wire events as a server-sent stream.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from chatstream.config import PipelineConfig
from chatstream.models.schemas import (
    RenderedMessage,
    RenderRequest,
    ReplayRequest,
    StructureRequest,
    StructureResponse,
)
from chatstream.parsing.event_decoder import DONE_TOKEN, frame_payload
from chatstream.parsing.markdown_structurer import structure
from chatstream.transcript.session import StreamSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transcript", tags=["transcript"])


def _pipeline_config(http_request: Request) -> PipelineConfig:
    return http_request.app.state.config


@router.post("/structure", response_model=StructureResponse)
async def structure_text(request: StructureRequest, http_request: Request) -> StructureResponse:
    """Structure assistant prose into nodes.

    Args:
        request: Text to structure; may be a streaming prefix.
        http_request: Incoming request, for the app's configuration.

    Returns:
        StructureResponse with nodes in source order.
    """
    return StructureResponse(nodes=structure(request.text, _pipeline_config(http_request)))


@router.post("/render", response_model=RenderedMessage)
async def render_stream(request: RenderRequest, http_request: Request) -> RenderedMessage:
    """Decode, assemble and render a raw event stream body.

    A body without the done token renders as a streaming message rather
    than failing.

    Args:
        request: Raw ``data:`` framed stream text.
        http_request: Incoming request, for the app's configuration.

    Returns:
        RenderedMessage for the assembled assistant message.
    """
    session = StreamSession(config=_pipeline_config(http_request))
    message = session.start_assistant_message()
    session.feed(message.id, request.stream)
    session.finish(message.id)

    logger.info(f"Rendered stream into {len(message.parts)} parts ({message.status.value})")
    return session.render(message.id)


async def _replay_chunks(events: list[dict[str, Any]], chunk_size: int | None) -> AsyncGenerator[str]:
    frames = [frame_payload(event) for event in events]
    frames.append(frame_payload(DONE_TOKEN))

    if chunk_size is None:
        for frame in frames:
            yield frame
        return

    body = "".join(frames)
    for start in range(0, len(body), chunk_size):
        yield body[start:start + chunk_size]


@router.post("/replay")
async def replay_stream(request: ReplayRequest) -> StreamingResponse:
    """Replay wire events as a server-sent event stream.

    Events are framed verbatim, unknown types included, and followed by
    the done token.

    Args:
        request: Wire payloads and optional re-chunking size.

    Returns:
        A text/event-stream response.
    """
    return StreamingResponse(
        _replay_chunks(request.events, request.chunk_size),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
