"""Pydantic models for events, transcripts, structural nodes and API payloads.

Provides type safety and validation at every stage of the pipeline.

Models:
    - Event: closed union of decoded stream events
    - WirePayload: validated ``data:`` JSON records
    - Message / Transcript: append-only assistant content
    - StructuralNode: markdown-like blocks for rendering
    - Request/response schemas for the HTTP adapter
"""

from chatstream.models.events import (
    ControlSignal,
    Event,
    MediaAttached,
    StreamEnd,
    StreamError,
    TextDelta,
    ToolCallAnnounced,
    ToolResult,
    WirePayload,
)
from chatstream.models.nodes import (
    BulletGroup,
    CodeBlock,
    Heading,
    InlineRun,
    IntroLine,
    NumberedItem,
    Paragraph,
    StructuralNode,
    Table,
)
from chatstream.models.schemas import (
    RenderedMessage,
    RenderedText,
    RenderedToolStep,
    RenderRequest,
    ReplayRequest,
    StructureRequest,
    StructureResponse,
)
from chatstream.models.transcript import (
    ContentPart,
    Message,
    MessageRole,
    MessageStatus,
    TextPart,
    ToolStatus,
    ToolStep,
    Transcript,
)

__all__ = [
    "BulletGroup",
    "CodeBlock",
    "ContentPart",
    "ControlSignal",
    "Event",
    "Heading",
    "InlineRun",
    "IntroLine",
    "MediaAttached",
    "Message",
    "MessageRole",
    "MessageStatus",
    "NumberedItem",
    "Paragraph",
    "RenderRequest",
    "RenderedMessage",
    "RenderedText",
    "RenderedToolStep",
    "ReplayRequest",
    "StreamEnd",
    "StreamError",
    "StructuralNode",
    "StructureRequest",
    "StructureResponse",
    "Table",
    "TextDelta",
    "TextPart",
    "ToolCallAnnounced",
    "ToolResult",
    "ToolStatus",
    "ToolStep",
    "Transcript",
    "WirePayload",
]
