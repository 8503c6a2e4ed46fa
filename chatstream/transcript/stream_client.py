"""HTTP client driving a session from a server-sent event stream."""

import logging
from typing import Any

import httpx

from chatstream.models.transcript import Message
from chatstream.transcript.session import StreamSession

logger = logging.getLogger(__name__)


async def stream_transcript(
    session: StreamSession,
    path: str,
    payload: dict[str, Any],
    client: httpx.AsyncClient | None = None,
    message: Message | None = None,
) -> Message:
    """POST a request and assemble the streamed reply into the session.

    The response body is fed chunk by chunk as it arrives. Transport
    failures are not retried; they are logged and recorded on the message,
    which then stays streaming.

    Args:
        session: Session that owns the transcript.
        path: Endpoint path, or an absolute URL.
        payload: JSON request body.
        client: Client to reuse. A client bound to the configured base URL
            and timeout is created if not provided.
        message: Assistant message to fill. A new one is started if not
            provided.

    Returns:
        The assistant message.
    """
    message = message or session.start_assistant_message()
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(
            base_url=session.config.api_base_url,
            timeout=session.config.request_timeout,
        )

    try:
        async with client.stream(
            "POST",
            path,
            json=payload,
            headers={"Accept": "text/event-stream"},
        ) as response:
            response.raise_for_status()
            await session.consume(message.id, response.aiter_text())
    except httpx.HTTPStatusError as e:
        logger.error(f"Stream request failed with HTTP {e.response.status_code}")
        message.error = f"HTTP {e.response.status_code}"
    except httpx.RequestError as e:
        logger.error(f"Stream connection failed: {e}")
        message.error = f"Connection failed: {e}"
    finally:
        if owns_client:
            await client.aclose()

    return message
