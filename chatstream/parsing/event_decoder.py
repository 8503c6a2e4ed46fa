"""Server-sent event decoding for assistant streams.

Turns arbitrarily chunked ``data: <payload>`` text into typed events.
Chunk boundaries are invisible to the result: a line is decoded only once
its terminating newline has arrived, whichever ``feed`` call carried it.
"""

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Any

from pydantic import TypeAdapter, ValidationError

from chatstream.models.events import WIRE_TYPES, Event, StreamEnd, WirePayload

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_TOKEN = "[DONE]"

_payload_adapter: TypeAdapter[Any] = TypeAdapter(WirePayload)


def decode_payload(payload: str) -> Event | None:
    """Decode the payload of a single ``data:`` line.

    Args:
        payload: Text after the ``data: `` prefix.

    Returns:
        The decoded Event, or None if the payload is malformed or of an
        unrecognized type.
    """
    if payload.strip() == DONE_TOKEN:
        return StreamEnd()

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning(f"Dropping malformed stream payload: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Dropping non-object stream payload of type {type(data).__name__}")
        return None

    event_type = data.get("type")
    if not isinstance(event_type, str) or event_type not in WIRE_TYPES:
        logger.debug(f"Ignoring unrecognized stream event type: {event_type!r}")
        return None

    try:
        wire = _payload_adapter.validate_python(data)
    except ValidationError as e:
        logger.warning(f"Dropping invalid '{event_type}' payload ({e.error_count()} errors)")
        return None

    return wire.to_event()


def frame_payload(payload: dict[str, Any] | str) -> str:
    """Frame one payload as a server-sent ``data:`` record.

    Args:
        payload: A wire payload object, or a raw string such as the done token.

    Returns:
        The framed record, terminated by a blank line.
    """
    body = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return f"{DATA_PREFIX}{body}\n\n"


class EventDecoder:
    """Incremental decoder for one message's event stream.

    Keeps the unterminated tail of the input as a carry buffer between
    calls. Once the done token has been decoded, everything after it is
    discarded.
    """

    def __init__(self) -> None:
        self._carry = ""
        self._bytes = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._finished = False

    @property
    def finished(self) -> bool:
        """Whether the terminal event has been emitted."""
        return self._finished

    @property
    def pending(self) -> str:
        """Text received after the last complete line."""
        return self._carry

    def feed(self, chunk: str | bytes) -> list[Event]:
        """Decode one received chunk.

        Args:
            chunk: Raw text or UTF-8 bytes, split anywhere.

        Returns:
            Events for every line completed by this chunk, in arrival order.
        """
        if isinstance(chunk, bytes):
            chunk = self._bytes.decode(chunk)
        if self._finished:
            return []

        *lines, self._carry = (self._carry + chunk).split("\n")
        return self._decode_lines(lines)

    def finish(self) -> list[Event]:
        """Flush the decoder once the stream has no more chunks.

        An unterminated final line gets one parse attempt before it is
        discarded.
        """
        line = self._carry + self._bytes.decode(b"", final=True)
        self._carry = ""
        if self._finished or not line.strip():
            return []
        return self._decode_lines([line])

    def _decode_lines(self, lines: list[str]) -> list[Event]:
        events: list[Event] = []
        for raw_line in lines:
            if self._finished:
                break
            line = raw_line.rstrip("\r")
            if not line.startswith(DATA_PREFIX):
                continue
            event = decode_payload(line[len(DATA_PREFIX):])
            if event is None:
                continue
            events.append(event)
            if isinstance(event, StreamEnd):
                self._finished = True
                self._carry = ""
        return events


def iter_events(chunks: Iterable[str | bytes]) -> Iterator[Event]:
    """Lazily decode a finite sequence of chunks."""
    decoder = EventDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.finish()


async def aiter_events(chunks: AsyncIterable[str | bytes]) -> AsyncIterator[Event]:
    """Lazily decode chunks as they arrive from an async source."""
    decoder = EventDecoder()
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            yield event
    for event in decoder.finish():
        yield event
