"""Unit tests for transcript assembly."""

import logging
from typing import Any

import pytest
import pytest_check as check

from chatstream.models.events import (
    ControlSignal,
    MediaAttached,
    StreamEnd,
    StreamError,
    TextDelta,
    ToolCallAnnounced,
    ToolResult,
)
from chatstream.models.transcript import (
    MessageStatus,
    TextPart,
    ToolStatus,
    ToolStep,
    Transcript,
)
from chatstream.transcript.assembler import TranscriptAssembler, UnknownMessageError
from chatstream.transcript.collaborators import ControlDispatcher, EditorBuffer


class RecordingSink:
    """Collects whatever the assembler hands off."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []

    def attach(self, message, kind: str, payload: Any) -> None:
        self.calls.append((message.id, kind, payload))

    def handle(self, message, kind: str, payload: dict[str, Any]) -> None:
        self.calls.append((message.id, kind, payload))


@pytest.fixture
def transcript() -> Transcript:
    return Transcript()


@pytest.fixture
def assembler(transcript: Transcript) -> TranscriptAssembler:
    return TranscriptAssembler(transcript)


class TestTextAssembly:
    """Tests for prose accumulation."""

    def test_consecutive_deltas_merge(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """Adjacent text deltas extend a single text part."""
        message = transcript.start_assistant_message()

        for text in ["Hel", "lo ", "world"]:
            assembler.apply(message.id, TextDelta(text=text))

        assert message.parts == [TextPart(content="Hello world")]

    def test_empty_delta_is_ignored(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """Empty text never creates a part."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, TextDelta(text=""))

        assert message.parts == []

    def test_text_after_tool_starts_new_part(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """Text following a tool step opens a new text part."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, TextDelta(text="Before. "))
        assembler.apply(message.id, ToolCallAnnounced(name="fs.read", args={"path": "a"}))
        assembler.apply(message.id, TextDelta(text="After."))

        kinds = [part.type for part in message.parts]
        assert kinds == ["text", "tool", "text"]

    def test_no_adjacent_text_parts(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """Any event sequence leaves no two text parts next to each other."""
        message = transcript.start_assistant_message()
        events = [
            TextDelta(text="a"),
            MediaAttached(media_kind="images", payload=[]),
            TextDelta(text="b"),
            ToolCallAnnounced(name="x"),
            ToolResult(name="x", payload={}),
            TextDelta(text="c"),
            StreamError(message="boom"),
            TextDelta(text="d"),
        ]

        for event in events:
            assembler.apply(message.id, event)

        for first, second in zip(message.parts, message.parts[1:]):
            assert not (isinstance(first, TextPart) and isinstance(second, TextPart))


class TestToolSteps:
    """Tests for tool call and result matching."""

    def test_read_file_round_trip(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """A call, its result and surrounding prose assemble in order."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, TextDelta(text="Reading the file. "))
        assembler.apply(message.id, ToolCallAnnounced(name="fs.read", args={"path": "README.md"}))
        assembler.apply(message.id, ToolResult(name="fs.read", payload={"content": "# Title"}))
        assembler.apply(message.id, TextDelta(text="It has a title."))
        assembler.apply(message.id, StreamEnd())

        assert len(message.parts) == 3
        step = message.parts[1]
        assert isinstance(step, ToolStep)
        check.equal(step.args, {"path": "README.md"})
        check.equal(step.response, {"content": "# Title"})
        check.equal(step.status, ToolStatus.SUCCESS)
        check.equal(message.content, "Reading the file. It has a title.")
        check.is_true(message.is_complete)

    def test_result_after_interleaved_text(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """A result arriving after text still completes the earlier step."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, ToolCallAnnounced(name="fs.read", args={"path": "a"}))
        assembler.apply(message.id, TextDelta(text="ok "))
        assembler.apply(message.id, ToolResult(name="fs.read", payload={"content": "x"}))

        assert message.parts == [
            ToolStep(name="fs.read", args={"path": "a"}, response={"content": "x"}, status=ToolStatus.SUCCESS),
            TextPart(content="ok "),
        ]

    def test_results_bind_first_in_first_out(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """Overlapping calls of one name take results in announcement order."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, ToolCallAnnounced(name="fs.read", args={"path": "a"}))
        assembler.apply(message.id, ToolCallAnnounced(name="fs.read", args={"path": "b"}))
        assembler.apply(message.id, ToolResult(name="fs.read", payload="first"))
        assembler.apply(message.id, ToolResult(name="fs.read", payload="second"))

        responses = [(step.args["path"], step.response) for step in message.tool_steps]
        assert responses == [("a", "first"), ("b", "second")]

    def test_results_bind_by_name(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """Interleaved calls of different tools each get their own result."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, ToolCallAnnounced(name="fs.list"))
        assembler.apply(message.id, ToolCallAnnounced(name="exec.run"))
        assembler.apply(message.id, ToolResult(name="exec.run", payload={"stdout": "ok"}))
        assembler.apply(message.id, ToolResult(name="fs.list", payload={"total": 1}))

        fs_list, exec_run = message.tool_steps
        check.equal(fs_list.response, {"total": 1})
        check.equal(exec_run.response, {"stdout": "ok"})

    def test_error_result_sets_error_status(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """Error-shaped results mark the step as failed."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, ToolCallAnnounced(name="fs.read"))
        assembler.apply(message.id, ToolResult(name="fs.read", payload={"error": "denied"}, is_error=True))

        assert message.tool_steps[0].status == ToolStatus.ERROR

    def test_unmatched_result_is_recorded_alone(
        self,
        transcript: Transcript,
        assembler: TranscriptAssembler,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A result with no pending call becomes a response-only step."""
        message = transcript.start_assistant_message()

        with caplog.at_level(logging.WARNING):
            assembler.apply(message.id, ToolResult(name="brave.search", payload={"totalResults": 4}))

        step = message.tool_steps[0]
        check.equal(step.name, "brave.search")
        check.equal(step.args, {})
        check.equal(step.response, {"totalResults": 4})
        check.equal(step.status, ToolStatus.SUCCESS)
        check.is_in("No pending 'brave.search' call", caplog.text)

    def test_second_result_for_one_call_is_unmatched(
        self, transcript: Transcript, assembler: TranscriptAssembler
    ) -> None:
        """A finished step never receives another result."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, ToolCallAnnounced(name="fs.read"))
        assembler.apply(message.id, ToolResult(name="fs.read", payload=1))
        assembler.apply(message.id, ToolResult(name="fs.read", payload=2))

        assert [step.response for step in message.tool_steps] == [1, 2]


class TestCollaborators:
    """Tests for media and control hand-off."""

    def test_media_is_stored_on_message_by_default(
        self, transcript: Transcript, assembler: TranscriptAssembler
    ) -> None:
        """The default media sink keeps attachments on the message."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, MediaAttached(media_kind="images", payload=[{"url": "u"}]))

        check.equal(message.attachments, {"images": [{"url": "u"}]})
        check.equal(message.parts, [])

    def test_custom_sinks_receive_events(self, transcript: Transcript) -> None:
        """Media and control events go to the configured sinks."""
        media, control = RecordingSink(), RecordingSink()
        assembler = TranscriptAssembler(transcript, media_sink=media, control_sink=control)
        message = transcript.start_assistant_message()

        assembler.apply(message.id, MediaAttached(media_kind="videos", payload=["v"]))
        assembler.apply(message.id, ControlSignal(control_kind="image_generated", payload={"imageUrl": "i"}))

        check.equal(media.calls, [(message.id, "videos", ["v"])])
        check.equal(control.calls, [(message.id, "image_generated", {"imageUrl": "i"})])
        check.equal(message.attachments, {})

    def test_editor_signals_drive_editor_buffer(self, transcript: Transcript) -> None:
        """Editor open and update signals reach the editor buffer."""
        editor = EditorBuffer()
        assembler = TranscriptAssembler(transcript, control_sink=ControlDispatcher(editor))
        message = transcript.start_assistant_message()

        assembler.apply(message.id, ControlSignal(control_kind="editor_open", payload={"path": "/w/src/App.py", "content": "v1"}))
        assembler.apply(message.id, ControlSignal(control_kind="editor_update", payload={"path": "src\\app.py", "content": "v2"}))

        check.equal(editor.path, "/w/src/App.py")
        check.equal(editor.content, "v2")
        check.equal(message.parts, [])


class TestMessageLifecycle:
    """Tests for stream end, errors and unknown messages."""

    def test_stream_end_freezes_message(
        self,
        transcript: Transcript,
        assembler: TranscriptAssembler,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Events after the terminal event are ignored with a warning."""
        message = transcript.start_assistant_message()
        assembler.apply(message.id, TextDelta(text="done"))
        assembler.apply(message.id, StreamEnd())

        with caplog.at_level(logging.WARNING):
            assembler.apply(message.id, TextDelta(text=" more"))

        check.equal(message.status, MessageStatus.COMPLETE)
        check.equal(message.content, "done")
        check.is_in("completed message", caplog.text)

    def test_stream_error_records_and_appends(
        self, transcript: Transcript, assembler: TranscriptAssembler
    ) -> None:
        """Producer errors are kept on the message and shown inline."""
        message = transcript.start_assistant_message()

        assembler.apply(message.id, TextDelta(text="Partial"))
        assembler.apply(message.id, StreamError(message="rate limited"))

        check.equal(message.error, "rate limited")
        check.equal(message.content, "Partial\n\nError: rate limited")
        check.equal(message.status, MessageStatus.STREAMING)

    def test_unknown_message_raises(self, assembler: TranscriptAssembler) -> None:
        """Events for an id the transcript does not hold are rejected."""
        with pytest.raises(UnknownMessageError):
            assembler.apply("missing", TextDelta(text="x"))

    def test_unknown_message_error_is_key_error(self, assembler: TranscriptAssembler) -> None:
        """Callers can treat unknown ids as missing keys."""
        with pytest.raises(KeyError):
            assembler.get_message("missing")

    def test_messages_are_independent(self, transcript: Transcript, assembler: TranscriptAssembler) -> None:
        """Interleaving two messages' events keeps their content apart."""
        first = transcript.start_assistant_message()
        second = transcript.start_assistant_message()

        assembler.apply(first.id, TextDelta(text="one"))
        assembler.apply(second.id, TextDelta(text="two"))
        assembler.apply(first.id, StreamEnd())
        assembler.apply(second.id, TextDelta(text="!"))

        check.equal(first.content, "one")
        check.equal(second.content, "two!")
        check.is_true(first.is_complete)
        check.is_false(second.is_complete)
