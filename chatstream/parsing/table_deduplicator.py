"""Markdown table detection and duplicate removal.

Models frequently restate a table they already printed. Tables are
located with a line grammar, compared after whitespace normalization, and
every repeat of an earlier table is cut out of the text before the
structurer's line pass sees it. The source text of surviving tables is
left untouched.
"""

import logging
import re

from pydantic import BaseModel, Field

from chatstream.models.nodes import Table

logger = logging.getLogger(__name__)

SEPARATOR_RE = re.compile(r"^[\s|\-:]+$")
_WHITESPACE_RE = re.compile(r"\s+")


class TableMatch(BaseModel):
    """A table region located in text.

    Attributes:
        start: Offset of the first character of the header line.
        end: Offset just past the last character of the final row.
        text: Source text of the region.
        headers: Header cells.
        rows: Data rows, each reconciled to the header width.
    """

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    text: str
    headers: list[str]
    rows: list[list[str]] = Field(default_factory=list)

    def to_node(self) -> Table:
        return Table(headers=self.headers, rows=self.rows)


class DedupeResult(BaseModel):
    """Text with repeated tables removed.

    Attributes:
        text: Input text minus duplicate tables.
        tables: Surviving tables with offsets into ``text``.
        removed: Number of duplicates cut out.
    """

    text: str
    tables: list[TableMatch] = Field(default_factory=list)
    removed: int = 0


def split_cells(line: str) -> list[str]:
    """Split a table line on pipes, dropping the boundary pipes' empty tokens."""
    cells = [cell.strip() for cell in line.strip().split("|")]
    if cells and cells[0] == "":
        cells = cells[1:]
    if cells and cells[-1] == "":
        cells = cells[:-1]
    return cells


def is_separator_line(line: str) -> bool:
    return bool(SEPARATOR_RE.match(line.strip()))


def parse_table(lines: list[str]) -> tuple[list[str], list[list[str]]] | None:
    """Parse table lines into header cells and data rows.

    Args:
        lines: Consecutive pipe-bearing lines, header first.

    Returns:
        ``(headers, rows)``, or None when the lines cannot form a table.
    """
    if len(lines) < 2:
        return None

    headers = [cell for cell in split_cells(lines[0]) if cell]
    if not headers:
        return None

    body = lines[2:] if is_separator_line(lines[1]) else lines[1:]
    width = len(headers)
    rows: list[list[str]] = []
    for line in body:
        cells = split_cells(line)[:width]
        cells.extend([""] * (width - len(cells)))
        rows.append(cells)
    return headers, rows


def _pipe_runs(text: str) -> list[list[tuple[int, int, str]]]:
    """Collect runs of 2+ consecutive lines that contain a pipe.

    Each line is reported as ``(start, end, line)`` with offsets into text.
    """
    runs: list[list[tuple[int, int, str]]] = []
    current: list[tuple[int, int, str]] = []
    offset = 0
    for line in text.split("\n"):
        start, end = offset, offset + len(line)
        offset = end + 1
        if "|" in line and line.strip():
            current.append((start, end, line))
            continue
        if len(current) >= 2:
            runs.append(current)
        current = []
    if len(current) >= 2:
        runs.append(current)
    return runs


def _match_from(run: list[tuple[int, int, str]], text: str) -> TableMatch | None:
    parsed = parse_table([line for _, _, line in run])
    if parsed is None:
        return None
    headers, rows = parsed
    start = run[0][0]
    region = text[start:run[-1][1]].rstrip()
    return TableMatch(start=start, end=start + len(region), text=region, headers=headers, rows=rows)


def find_tables(text: str) -> list[TableMatch]:
    """Locate table regions in text, in source order.

    The strict grammar needs a header line directly followed by a
    separator line; pipe lines ahead of the header stay outside the
    region. Only when no strict table exists anywhere in the text is every
    pipe run of two or more lines accepted as a table.
    """
    runs = _pipe_runs(text)

    strict: list[TableMatch] = []
    for run in runs:
        for i in range(len(run) - 1):
            if is_separator_line(run[i + 1][2]) and split_cells(run[i][2]):
                match = _match_from(run[i:], text)
                if match is not None:
                    strict.append(match)
                break
    if strict:
        return strict

    permissive = [_match_from(run, text) for run in runs]
    return [match for match in permissive if match is not None]


def normalize_table_text(text: str) -> str:
    """Collapse whitespace for equality comparison."""
    return _WHITESPACE_RE.sub(" ", text).strip()


class _TextBuilder:
    """Accumulates output text, replacing cut regions with one blank line.

    Text up to the end of the last kept table is never trimmed, so offsets
    recorded for kept tables stay valid.
    """

    def __init__(self) -> None:
        self.text = ""
        self._floor = 0
        self._pending_break = False

    def append(self, piece: str) -> str:
        if self._pending_break:
            piece = piece.lstrip()
            if not piece:
                return piece
            if self.text:
                self.text += "\n\n"
            self._pending_break = False
        self.text += piece
        return piece

    def keep(self, piece: str) -> int:
        """Append a kept table and return its offset in the output."""
        piece = self.append(piece)
        self._floor = len(self.text)
        return self._floor - len(piece)

    def cut(self) -> None:
        self.text = self.text[:self._floor] + self.text[self._floor:].rstrip()
        self._pending_break = True


def dedupe_tables(text: str) -> DedupeResult:
    """Remove every table that repeats an earlier one.

    Tables are equal when they match after whitespace normalization; any
    other difference keeps both. A removed table takes its surrounding
    whitespace with it, leaving a single blank line between the
    neighbouring content.

    Args:
        text: Prose with code regions already extracted.

    Returns:
        DedupeResult with the cleaned text and the surviving tables.
    """
    builder = _TextBuilder()
    seen: set[str] = set()
    kept: list[TableMatch] = []
    removed = 0
    cursor = 0

    for match in find_tables(text):
        builder.append(text[cursor:match.start])
        cursor = match.end

        key = normalize_table_text(match.text)
        if key in seen:
            removed += 1
            builder.cut()
            continue
        seen.add(key)

        start = builder.keep(match.text)
        piece = builder.text[start:]
        kept.append(match.model_copy(update={"start": start, "end": len(builder.text), "text": piece}))

    builder.append(text[cursor:])

    if removed:
        logger.debug(f"Removed {removed} duplicate table(s)")

    return DedupeResult(text=builder.text, tables=kept, removed=removed)
