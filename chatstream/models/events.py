"""Stream event models.

Two layers live here:

    - Wire payloads: the JSON records carried on ``data:`` lines, validated
      through a pydantic discriminated union keyed on ``type``.
    - Events: the closed set of typed units the decoder emits and the
      assembler consumes, discriminated on ``kind``.

Each wire payload knows how to turn itself into exactly one Event.
"""

from abc import abstractmethod
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

MediaKind = Literal["images", "videos", "formatted_search", "file_list"]
ControlKind = Literal["editor_open", "editor_update", "image_generated"]


# =============================================================================
# Events
# =============================================================================


class TextDelta(BaseModel):
    """A fragment of assistant prose to append."""

    kind: Literal["text_delta"] = "text_delta"
    text: str


class ToolCallAnnounced(BaseModel):
    """A tool invocation has started."""

    kind: Literal["tool_call"] = "tool_call"
    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class ToolResult(BaseModel):
    """Result for the earliest unmatched call with the same name.

    Attributes:
        name: Tool name the result belongs to.
        payload: Raw tool response, any JSON value.
        is_error: Whether the payload's shape signals a failure.
    """

    kind: Literal["tool_result"] = "tool_result"
    name: str
    payload: Any = None
    is_error: bool = False


class MediaAttached(BaseModel):
    """Media attached to the message as a whole, outside the text stream."""

    kind: Literal["media"] = "media"
    media_kind: MediaKind
    payload: Any = None


class ControlSignal(BaseModel):
    """Out-of-band instruction for an external collaborator."""

    kind: Literal["control"] = "control"
    control_kind: ControlKind
    payload: dict[str, Any] = Field(default_factory=dict)


class StreamError(BaseModel):
    """The producer reported an error mid-stream."""

    kind: Literal["stream_error"] = "stream_error"
    message: str


class StreamEnd(BaseModel):
    """Terminal marker; nothing follows for this message."""

    kind: Literal["stream_end"] = "stream_end"


Event = Annotated[
    Union[
        TextDelta,
        ToolCallAnnounced,
        ToolResult,
        MediaAttached,
        ControlSignal,
        StreamError,
        StreamEnd,
    ],
    Field(discriminator="kind"),
]


# =============================================================================
# Wire payloads
# =============================================================================


class _WirePayload(BaseModel):
    """Base of wire payloads; each subclass maps itself to one Event."""

    model_config = ConfigDict(populate_by_name=True)

    @abstractmethod
    def to_event(self) -> Event:
        """Convert the validated record into its Event."""


class TextPayload(_WirePayload):
    type: Literal["text"] = "text"
    content: str

    def to_event(self) -> Event:
        return TextDelta(text=self.content)


class FunctionCall(BaseModel):
    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class FunctionCallPayload(_WirePayload):
    type: Literal["function_call"] = "function_call"
    function_call: FunctionCall = Field(alias="functionCall")

    def to_event(self) -> Event:
        return ToolCallAnnounced(name=self.function_call.name, args=self.function_call.args)


class FunctionResponse(BaseModel):
    name: str
    response: Any = None

    @property
    def is_error(self) -> bool:
        """A response object carrying an ``error`` key counts as a failure."""
        return isinstance(self.response, dict) and "error" in self.response


class FunctionResponsePayload(_WirePayload):
    type: Literal["function_response"] = "function_response"
    function_response: FunctionResponse = Field(alias="functionResponse")

    def to_event(self) -> Event:
        return ToolResult(
            name=self.function_response.name,
            payload=self.function_response.response,
            is_error=self.function_response.is_error,
        )


class ImagesPayload(_WirePayload):
    type: Literal["images"] = "images"
    images: list[Any] = Field(default_factory=list)

    def to_event(self) -> Event:
        return MediaAttached(media_kind="images", payload=self.images)


class VideosPayload(_WirePayload):
    type: Literal["videos"] = "videos"
    videos: list[Any] = Field(default_factory=list)

    def to_event(self) -> Event:
        return MediaAttached(media_kind="videos", payload=self.videos)


class FormattedSearchPayload(_WirePayload):
    type: Literal["formatted_search"] = "formatted_search"
    query: str = ""
    images: list[Any] = Field(default_factory=list)
    videos: list[Any] = Field(default_factory=list)
    discussions: list[Any] = Field(default_factory=list)
    all_sources: list[Any] = Field(default_factory=list, alias="allSources")

    def to_event(self) -> Event:
        return MediaAttached(
            media_kind="formatted_search",
            payload=self.model_dump(by_alias=True, exclude={"type"}),
        )


class FileListPayload(_WirePayload):
    type: Literal["file_list"] = "file_list"
    file_list: Any = Field(default=None, alias="fileList")

    def to_event(self) -> Event:
        return MediaAttached(media_kind="file_list", payload=self.file_list)


class EditorOpenPayload(_WirePayload):
    type: Literal["editor_open"] = "editor_open"
    path: str
    content: str

    def to_event(self) -> Event:
        return ControlSignal(
            control_kind="editor_open",
            payload={"path": self.path, "content": self.content},
        )


class EditorUpdatePayload(_WirePayload):
    type: Literal["editor_update"] = "editor_update"
    path: str
    content: str

    def to_event(self) -> Event:
        return ControlSignal(
            control_kind="editor_update",
            payload={"path": self.path, "content": self.content},
        )


class ImageGeneratedPayload(_WirePayload):
    type: Literal["image_generated"] = "image_generated"
    image_url: str = Field(alias="imageUrl")

    def to_event(self) -> Event:
        return ControlSignal(control_kind="image_generated", payload={"imageUrl": self.image_url})


class ErrorPayload(_WirePayload):
    type: Literal["error"] = "error"
    error: Any = "Unknown error"

    def to_event(self) -> Event:
        return StreamError(message=str(self.error))


WirePayload = Annotated[
    Union[
        TextPayload,
        FunctionCallPayload,
        FunctionResponsePayload,
        ImagesPayload,
        VideosPayload,
        FormattedSearchPayload,
        FileListPayload,
        EditorOpenPayload,
        EditorUpdatePayload,
        ImageGeneratedPayload,
        ErrorPayload,
    ],
    Field(discriminator="type"),
]

WIRE_TYPES = frozenset(
    {
        "text",
        "function_call",
        "function_response",
        "images",
        "videos",
        "formatted_search",
        "file_list",
        "editor_open",
        "editor_update",
        "image_generated",
        "error",
    }
)
