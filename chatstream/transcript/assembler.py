"""Event assembly into transcript messages.

Folds decoded events into the content parts of one assistant message at a
time. Parts are only ever appended to or extended, never reordered or
deleted, and a message stops changing once its terminal event arrives.

Tool results are matched first-in, first-out: a result binds to the
earliest step of the same name that is still waiting for one. With one
pending call per name this is the same as nearest-pending matching; with
overlapping calls of one name it keeps results in announcement order.
"""

import logging

from chatstream.models.events import (
    ControlSignal,
    Event,
    MediaAttached,
    StreamEnd,
    StreamError,
    TextDelta,
    ToolCallAnnounced,
    ToolResult,
)
from chatstream.models.transcript import (
    Message,
    MessageStatus,
    TextPart,
    ToolStatus,
    ToolStep,
    Transcript,
)
from chatstream.transcript.collaborators import (
    ControlDispatcher,
    ControlSink,
    MediaSink,
    MessageAttachments,
)

logger = logging.getLogger(__name__)


class UnknownMessageError(KeyError):
    """Raised when an event targets a message the transcript does not hold."""

    pass


class TranscriptAssembler:
    """Applies events to messages of one transcript.

    Holds no lock: each message is fed by exactly one decode/apply loop,
    which applies its events strictly in arrival order.
    """

    def __init__(
        self,
        transcript: Transcript,
        media_sink: MediaSink | None = None,
        control_sink: ControlSink | None = None,
    ) -> None:
        """Initialize the assembler.

        Args:
            transcript: Transcript whose messages are mutated.
            media_sink: Receives media attachments. Defaults to storing
                them on the message.
            control_sink: Receives control signals. Defaults to a
                ControlDispatcher with an empty editor buffer.
        """
        self.transcript = transcript
        self.media_sink = media_sink or MessageAttachments()
        self.control_sink = control_sink or ControlDispatcher()

    def get_message(self, message_id: str) -> Message:
        message = self.transcript.find(message_id)
        if message is None:
            raise UnknownMessageError(message_id)
        return message

    def apply(self, message_id: str, event: Event) -> None:
        """Apply one event to a message in place.

        Args:
            message_id: Target message.
            event: Next event of that message's stream.

        Raises:
            UnknownMessageError: If no message has this id.
        """
        message = self.get_message(message_id)
        if message.is_complete:
            logger.warning(f"Ignoring {event.kind} for completed message {message_id}")
            return

        if isinstance(event, TextDelta):
            self._append_text(message, event.text)
        elif isinstance(event, ToolCallAnnounced):
            message.parts.append(ToolStep(name=event.name, args=event.args))
        elif isinstance(event, ToolResult):
            self._bind_result(message, event)
        elif isinstance(event, MediaAttached):
            self.media_sink.attach(message, event.media_kind, event.payload)
        elif isinstance(event, ControlSignal):
            self.control_sink.handle(message, event.control_kind, event.payload)
        elif isinstance(event, StreamError):
            logger.warning(f"Stream error on message {message_id}: {event.message}")
            message.error = event.message
            self._append_text(message, f"\n\nError: {event.message}")
        elif isinstance(event, StreamEnd):
            message.status = MessageStatus.COMPLETE
            logger.debug(f"Message {message_id} complete with {len(message.parts)} parts")

    def _append_text(self, message: Message, text: str) -> None:
        if not text:
            return
        last = message.parts[-1] if message.parts else None
        if isinstance(last, TextPart):
            last.content += text
        else:
            message.parts.append(TextPart(content=text))

    def _bind_result(self, message: Message, result: ToolResult) -> None:
        status = ToolStatus.ERROR if result.is_error else ToolStatus.SUCCESS
        for part in message.parts:
            if isinstance(part, ToolStep) and part.name == result.name and part.is_pending:
                part.response = result.payload
                part.status = status
                return

        logger.warning(f"No pending '{result.name}' call on message {message.id}; recording result alone")
        message.parts.append(ToolStep(name=result.name, response=result.payload, status=status))
