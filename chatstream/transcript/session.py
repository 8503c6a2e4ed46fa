"""Per-session transcript state and the decode/apply loop.

Each chat session owns its own context, transcript, assembler and
collaborators; nothing is shared between sessions through module state.
"""

import logging
from collections.abc import AsyncIterable
from typing import Any

from pydantic import BaseModel, Field

from chatstream.config import PipelineConfig
from chatstream.models.schemas import RenderedMessage
from chatstream.models.transcript import Message, Transcript
from chatstream.parsing.event_decoder import EventDecoder
from chatstream.transcript.assembler import TranscriptAssembler
from chatstream.transcript.collaborators import (
    ControlDispatcher,
    ControlSink,
    EditorBuffer,
    MediaSink,
)
from chatstream.transcript.rendering import render_message

logger = logging.getLogger(__name__)


class StreamAlreadyAttachedError(RuntimeError):
    """Raised when a second decode loop attaches to a streaming message."""

    pass


class SessionContext(BaseModel):
    """Explicit per-session metadata.

    Attributes:
        user_id: Owner of the session, if known.
        editor_path: File open in the user's editor when the session starts.
        metadata: Free-form values for collaborators.
    """

    user_id: str | None = None
    editor_path: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class StreamSession:
    """A chat session: one transcript plus the machinery that fills it.

    Keeps one decoder per streaming message, so a message's chunks may be
    fed piecemeal through ``feed``/``finish`` or handed over as an async
    iterable through ``consume``.
    """

    def __init__(
        self,
        context: SessionContext | None = None,
        config: PipelineConfig | None = None,
        media_sink: MediaSink | None = None,
        control_sink: ControlSink | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            context: Session metadata. Empty if not provided.
            config: Pipeline configuration. Loads from environment if not
                provided.
            media_sink: Override for media attachments.
            control_sink: Override for control signals. Defaults to a
                dispatcher whose editor starts at ``context.editor_path``.
        """
        self.context = context or SessionContext()
        self.config = config or PipelineConfig()
        self.transcript = Transcript()
        if control_sink is None:
            control_sink = ControlDispatcher(EditorBuffer(path=self.context.editor_path))
        self.assembler = TranscriptAssembler(self.transcript, media_sink, control_sink)
        self._decoders: dict[str, EventDecoder] = {}
        self._attached: set[str] = set()

    @property
    def messages(self) -> list[Message]:
        return self.transcript.messages

    def add_user_message(self, text: str) -> Message:
        return self.transcript.add_user_message(text)

    def start_assistant_message(self) -> Message:
        """Create an empty assistant message and its decoder."""
        message = self.transcript.start_assistant_message()
        self._decoders[message.id] = EventDecoder()
        return message

    def _decoder(self, message_id: str) -> EventDecoder:
        decoder = self._decoders.get(message_id)
        if decoder is None:
            # Raises UnknownMessageError before any decoder state is created
            self.assembler.get_message(message_id)
            decoder = self._decoders[message_id] = EventDecoder()
        return decoder

    def feed(self, message_id: str, chunk: str | bytes) -> int:
        """Decode one chunk and apply its events to a message.

        Args:
            message_id: Target assistant message.
            chunk: Raw text or bytes as received.

        Returns:
            Number of events applied.

        Raises:
            UnknownMessageError: If the transcript has no such message.
        """
        events = self._decoder(message_id).feed(chunk)
        for event in events:
            self.assembler.apply(message_id, event)
        return len(events)

    def finish(self, message_id: str) -> int:
        """Flush the message's decoder after its last chunk."""
        decoder = self._decoders.pop(message_id, None)
        if decoder is None:
            return 0
        events = decoder.finish()
        for event in events:
            self.assembler.apply(message_id, event)
        return len(events)

    async def consume(self, message_id: str, chunks: AsyncIterable[str | bytes]) -> Message:
        """Run the decode/apply loop for one message until its chunks run out.

        If the source is cancelled or raises, the message keeps its
        last-known content and stays streaming; any unterminated line
        received so far is discarded.

        Args:
            message_id: Target assistant message.
            chunks: Chunk source, typically a response body iterator.

        Returns:
            The message after the loop ends.

        Raises:
            StreamAlreadyAttachedError: If another loop is feeding the message.
        """
        if message_id in self._attached:
            raise StreamAlreadyAttachedError(message_id)
        message = self.assembler.get_message(message_id)

        self._attached.add(message_id)
        try:
            async for chunk in chunks:
                self.feed(message_id, chunk)
            self.finish(message_id)
        finally:
            self._decoders.pop(message_id, None)
            self._attached.discard(message_id)

        if not message.is_complete:
            logger.info(f"Stream for message {message_id} ended without a terminal event")
        return message

    def render(self, message_id: str) -> RenderedMessage:
        return render_message(self.assembler.get_message(message_id), self.config)
