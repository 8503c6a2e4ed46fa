"""Transcript assembly for streamed assistant messages.

Folds decoded events into an append-only transcript and exposes it as
plain data for rendering.

Responsibilities:
    - Text merging and tool call/result matching per message
    - Hand-off of media and control signals to collaborators
    - Per-session context, decoders and the decode/apply loop
    - Rendering view with structural nodes and tool summaries
    - HTTP streaming client feeding a session

Holds no process-wide state; every session owns its own instances.
"""

from chatstream.transcript.assembler import TranscriptAssembler, UnknownMessageError
from chatstream.transcript.collaborators import (
    ControlDispatcher,
    ControlSink,
    EditorBuffer,
    MediaSink,
    MessageAttachments,
    paths_match,
)
from chatstream.transcript.rendering import render_message
from chatstream.transcript.session import SessionContext, StreamAlreadyAttachedError, StreamSession
from chatstream.transcript.stream_client import stream_transcript
from chatstream.transcript.tool_summary import format_args, format_output

__all__ = [
    "ControlDispatcher",
    "ControlSink",
    "EditorBuffer",
    "MediaSink",
    "MessageAttachments",
    "SessionContext",
    "StreamAlreadyAttachedError",
    "StreamSession",
    "TranscriptAssembler",
    "UnknownMessageError",
    "format_args",
    "format_output",
    "paths_match",
    "render_message",
    "stream_transcript",
]
