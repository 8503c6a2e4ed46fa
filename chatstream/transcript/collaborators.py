"""External collaborators fed by the assembler.

Media attachments and control signals are not transcript content. The
assembler hands them to a media sink and a control sink; the defaults here
keep media on the message and drive an in-memory editor buffer.
"""

import logging
from typing import Any, Protocol

from chatstream.models.transcript import Message

logger = logging.getLogger(__name__)


class MediaSink(Protocol):
    """Receives media attached to a message as a whole."""

    def attach(self, message: Message, kind: str, payload: Any) -> None: ...


class ControlSink(Protocol):
    """Receives out-of-band instructions such as editor commands."""

    def handle(self, message: Message, kind: str, payload: dict[str, Any]) -> None: ...


class MessageAttachments:
    """Default media sink: stores the latest payload per kind on the message."""

    def attach(self, message: Message, kind: str, payload: Any) -> None:
        message.attachments[kind] = payload
        logger.debug(f"Attached {kind} to message {message.id}")


def normalize_path(path: str) -> str:
    return path.replace("\\", "/").strip().lower()


def paths_match(first: str, second: str) -> bool:
    """Compare editor paths case-insensitively across separator styles.

    A relative path matches an absolute one when it is a trailing
    component sequence of it.

    Args:
        first: A path as sent by the producer.
        second: A path as known to the editor.

    Returns:
        True if both refer to the same file.
    """
    a, b = normalize_path(first), normalize_path(second)
    if not a or not b:
        return False
    return a == b or a.endswith("/" + b) or b.endswith("/" + a)


class EditorBuffer:
    """In-memory stand-in for an editor with one open file."""

    def __init__(self, path: str | None = None, content: str = "") -> None:
        self.path = path
        self.content = content

    def open(self, path: str, content: str) -> None:
        self.path = path
        self.content = content
        logger.info(f"Opened {path} in editor")

    def update(self, path: str, content: str) -> bool:
        """Replace the buffer content if ``path`` is the open file.

        Returns:
            Whether the update was applied.
        """
        if self.path is None or not paths_match(path, self.path):
            logger.debug(f"Ignoring editor update for {path}: not the open file")
            return False
        self.content = content
        return True


class ControlDispatcher:
    """Default control sink routing signals to their collaborators.

    Attributes:
        editor: Buffer receiving editor_open and editor_update signals.
        opened_images: URLs of generated images, in arrival order.
    """

    def __init__(self, editor: EditorBuffer | None = None) -> None:
        self.editor = editor or EditorBuffer()
        self.opened_images: list[str] = []

    def handle(self, message: Message, kind: str, payload: dict[str, Any]) -> None:
        if kind == "editor_open":
            self.editor.open(payload["path"], payload["content"])
        elif kind == "editor_update":
            self.editor.update(payload["path"], payload["content"])
        elif kind == "image_generated":
            self.opened_images.append(payload["imageUrl"])
        else:
            logger.debug(f"No handler for control signal {kind!r} on message {message.id}")
