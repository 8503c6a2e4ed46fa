"""Transcript content models.

A transcript is an ordered list of messages. Assistant messages own an
ordered list of content parts (prose and tool steps) that only ever grows
while the message streams, and is frozen once the stream ends.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Speaker of a transcript message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageStatus(str, Enum):
    """Lifecycle state of a message."""

    STREAMING = "streaming"
    COMPLETE = "complete"


class ToolStatus(str, Enum):
    """Outcome of a finished tool step."""

    SUCCESS = "success"
    ERROR = "error"


class TextPart(BaseModel):
    """Accumulated assistant prose."""

    type: Literal["text"] = "text"
    content: str = ""


class ToolStep(BaseModel):
    """One tool execution and, once it arrives, its result.

    Attributes:
        name: Tool name as announced by the model.
        args: Invocation arguments.
        response: Raw tool response; None while pending.
        status: None while pending, then success or error.
    """

    type: Literal["tool"] = "tool"
    name: str
    args: dict[str, Any] = Field(default_factory=dict)
    response: Any = None
    status: ToolStatus | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is None


ContentPart = Annotated[Union[TextPart, ToolStep], Field(discriminator="type")]


class Message(BaseModel):
    """A single transcript message.

    Attributes:
        id: Unique message identifier.
        role: user or assistant.
        parts: Ordered content parts.
        status: streaming until the terminal event, then complete.
        attachments: Media attached to the message as a whole, by kind.
        error: Last error reported by the producer or the transport.
        time: Display timestamp.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: MessageRole
    parts: list[ContentPart] = Field(default_factory=list)
    status: MessageStatus = MessageStatus.STREAMING
    attachments: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    time: str = Field(default_factory=lambda: datetime.now().strftime("%I:%M %p"))

    @property
    def content(self) -> str:
        """Concatenated prose of all text parts."""
        return "".join(part.content for part in self.parts if isinstance(part, TextPart))

    @property
    def tool_steps(self) -> list[ToolStep]:
        return [part for part in self.parts if isinstance(part, ToolStep)]

    @property
    def is_complete(self) -> bool:
        return self.status == MessageStatus.COMPLETE


class Transcript(BaseModel):
    """Ordered sequence of messages for one chat session."""

    messages: list[Message] = Field(default_factory=list)

    def add_user_message(self, text: str) -> Message:
        message = Message(
            role=MessageRole.USER,
            parts=[TextPart(content=text)],
            status=MessageStatus.COMPLETE,
        )
        self.messages.append(message)
        return message

    def start_assistant_message(self) -> Message:
        """Append an empty assistant message ready to receive events."""
        message = Message(role=MessageRole.ASSISTANT)
        self.messages.append(message)
        return message

    def find(self, message_id: str) -> Message | None:
        for message in self.messages:
            if message.id == message_id:
                return message
        return None
