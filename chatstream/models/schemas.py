from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator

from chatstream.models.nodes import StructuralNode
from chatstream.models.transcript import MessageRole, MessageStatus, ToolStatus


class StructureRequest(BaseModel):
    """Request payload for the structuring endpoint.

    Attributes:
        text: Assistant prose, complete or a streaming prefix.
    """

    text: str


class StructureResponse(BaseModel):
    """Structural nodes for a piece of prose."""

    nodes: list[StructuralNode]


class RenderRequest(BaseModel):
    """Request payload for rendering a raw event stream.

    Attributes:
        stream: Raw ``data:`` framed stream body, possibly truncated.
    """

    stream: str = Field(..., min_length=1)

    @field_validator("stream", mode="before")
    @classmethod
    def reject_blank_stream(cls, v: str) -> str:
        """Treat whitespace-only bodies as empty."""
        if isinstance(v, str) and not v.strip():
            return ""
        return v


class ReplayRequest(BaseModel):
    """Request payload for replaying wire events as a server-sent stream.

    Attributes:
        events: Wire payload objects, sent in order.
        chunk_size: Re-chunk the framed stream into pieces of this many
            characters. None sends one chunk per event.
    """

    events: list[dict[str, Any]] = Field(default_factory=list)
    chunk_size: int | None = Field(default=None, ge=1, le=65536)


class RenderedText(BaseModel):
    """A text part with its structural nodes."""

    type: Literal["text"] = "text"
    content: str
    nodes: list[StructuralNode]


class RenderedToolStep(BaseModel):
    """A tool step with display summaries.

    Attributes:
        summary_args: Compact ``key=value`` rendering of the arguments.
        summary_output: Short human readable result, if one applies.
    """

    type: Literal["tool"] = "tool"
    name: str
    args: dict[str, Any]
    status: ToolStatus | None = None
    response: Any = None
    summary_args: str = ""
    summary_output: str | None = None


RenderedPart = Annotated[Union[RenderedText, RenderedToolStep], Field(discriminator="type")]


class RenderedMessage(BaseModel):
    """Plain-data view of one message for a presentation layer.

    Attributes:
        id: Message identifier.
        role: user or assistant.
        status: streaming messages are incomplete, not failed.
        parts: Text and tool parts in original order.
        attachments: Media attached to the message, by kind.
        error: Last reported error, if any.
    """

    id: str
    role: MessageRole
    status: MessageStatus
    parts: list[RenderedPart]
    attachments: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
