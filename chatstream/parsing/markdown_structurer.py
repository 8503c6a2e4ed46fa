"""Markdown-like structuring of assistant prose.

Converts a text part's full string into an ordered list of structural
nodes. The conversion is a pure function of its input, so it is re-run on
the whole string every time more text streams in; a half-received code
block or table still produces a sensible node.

Pipeline:
    1. Fenced code regions become code blocks and are replaced by
       placeholder lines, so their contents are never read as markdown.
    2. Runs of blank lines collapse to a single paragraph break.
    3. Repeated tables are removed; surviving tables become placeholders.
    4. A line state machine emits headings, intro lines, numbered items,
       bullet groups and paragraphs around the placeholders.
"""

import re
import textwrap

from chatstream.config import PipelineConfig
from chatstream.models.nodes import (
    BulletGroup,
    CodeBlock,
    Heading,
    IntroLine,
    NumberedItem,
    Paragraph,
    StructuralNode,
)
from chatstream.parsing.inline import parse_inline
from chatstream.parsing.table_deduplicator import dedupe_tables

CODE_FENCE_RE = re.compile(r"```(?P<info>[^\n`]*)(?:\n(?P<body>.*?))?(?P<close>```|\Z)", re.DOTALL)
NUMBERED_RE = re.compile(r"^(\d+)\.\s+(.*)$")
_BLANK_RUN_RE = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")
# Terminal punctuation only ends a sentence when whitespace follows ("1.2", "e.g." stay whole)
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")

# NUL never survives input cleaning, so placeholder lines cannot collide with prose
_PLACEHOLDER = "\x00{kind}:{index}\x00"
_PLACEHOLDER_RE = re.compile(r"^\x00(code|table):(\d+)\x00$")


def _extract_code_blocks(text: str) -> tuple[str, list[CodeBlock]]:
    blocks: list[CodeBlock] = []

    def replace(match: re.Match[str]) -> str:
        info = match.group("info").strip()
        body = match.group("body") or ""
        closed = bool(match.group("close"))
        if closed and body.endswith("\n"):
            body = body[:-1]
        blocks.append(
            CodeBlock(
                language=info.split()[0] if info else None,
                content=body,
                closed=closed,
            )
        )
        return "\n" + _PLACEHOLDER.format(kind="code", index=len(blocks) - 1) + "\n"

    return CODE_FENCE_RE.sub(replace, text), blocks


def split_paragraph(text: str, max_chars: int) -> list[str]:
    """Split long paragraph text into chunks of at most ``max_chars``.

    Chunks end on sentence boundaries; only a single sentence longer than
    the limit is wrapped between words.
    """
    if len(text) <= max_chars:
        return [text]

    chunks: list[str] = []
    current = ""
    for sentence in _SENTENCE_BOUNDARY_RE.split(text.strip()):
        if not sentence:
            continue
        if len(sentence) > max_chars:
            if current:
                chunks.append(current)
                current = ""
            chunks.extend(textwrap.wrap(sentence, width=max_chars, break_on_hyphens=False))
            continue
        candidate = f"{current} {sentence}" if current else sentence
        if len(candidate) > max_chars:
            chunks.append(current)
            current = sentence
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


class _LineStructurer:
    """Line state machine with pending paragraph and bullet accumulators."""

    def __init__(self, config: PipelineConfig, placeholders: dict[tuple[str, int], StructuralNode]) -> None:
        self._config = config
        self._placeholders = placeholders
        self.nodes: list[StructuralNode] = []
        self._paragraph: list[str] = []
        self._bullets: list[str] = []

    def flush_paragraph(self) -> None:
        if not self._paragraph:
            return
        text = " ".join(self._paragraph)
        self._paragraph = []
        for chunk in split_paragraph(text, self._config.paragraph_max_chars):
            self.nodes.append(Paragraph(runs=parse_inline(chunk)))

    def flush_bullets(self) -> None:
        if not self._bullets:
            return
        self.nodes.append(BulletGroup(items=self._bullets))
        self._bullets = []

    def flush(self) -> None:
        self.flush_bullets()
        self.flush_paragraph()

    def _is_intro_line(self, line: str) -> bool:
        return (
            line.endswith(":")
            and self._config.intro_min_length < len(line) < self._config.intro_max_length
        )

    def feed(self, line: str) -> None:
        stripped = line.strip()

        placeholder = _PLACEHOLDER_RE.match(stripped)
        if placeholder:
            node = self._placeholders.get((placeholder.group(1), int(placeholder.group(2))))
            self.flush()
            if node is not None:
                self.nodes.append(node)
            return

        if stripped.startswith("##"):
            self.flush()
            level = 3 if stripped.startswith("###") else 2
            self.nodes.append(Heading(level=level, text=stripped.lstrip("#").strip()))
        elif self._is_intro_line(stripped):
            self.flush()
            self.nodes.append(IntroLine(text=stripped))
        elif numbered := NUMBERED_RE.match(stripped):
            self.flush()
            self.nodes.append(NumberedItem(number=int(numbered.group(1)), text=numbered.group(2).strip()))
        elif stripped.startswith(("- ", "* ")):
            self.flush_paragraph()
            self._bullets.append(stripped[2:].strip())
        elif not stripped:
            self.flush()
        else:
            self.flush_bullets()
            self._paragraph.append(stripped)


def structure(text: str, config: PipelineConfig | None = None) -> list[StructuralNode]:
    """Structure assistant prose into ordered nodes.

    Safe to call repeatedly on a growing prefix of the same message: each
    call recomputes the full node list from scratch.

    Args:
        text: Full accumulated text of one text part.
        config: Structuring limits. Loads from environment if not provided.

    Returns:
        Structural nodes in source order.
    """
    config = config or PipelineConfig()
    text = text.replace("\x00", "").replace("\r\n", "\n")

    text, code_blocks = _extract_code_blocks(text)
    text = _BLANK_RUN_RE.sub("\n\n", text)

    deduped = dedupe_tables(text)
    text = deduped.text
    placeholders: dict[tuple[str, int], StructuralNode] = {
        ("code", index): block for index, block in enumerate(code_blocks)
    }
    # Replace from the end so earlier offsets stay valid
    for index in range(len(deduped.tables) - 1, -1, -1):
        table = deduped.tables[index]
        placeholders[("table", index)] = table.to_node()
        marker = _PLACEHOLDER.format(kind="table", index=index)
        text = f"{text[:table.start]}\n{marker}\n{text[table.end:]}"

    structurer = _LineStructurer(config, placeholders)
    for line in text.split("\n"):
        structurer.feed(line)
    structurer.flush()
    return structurer.nodes
