"""Stream and text parsing for assistant output.

Transforms raw stream chunks into typed events and assistant prose into
structural nodes.

Responsibilities:
    - Server-sent ``data:`` line decoding with partial-line buffering
    - Wire payload validation into the closed Event union
    - Fenced code, heading, list and paragraph structuring
    - Table detection, parsing and duplicate removal
    - Inline bold, code and link runs

Everything here is synchronous and free of I/O.
"""

from chatstream.parsing.event_decoder import (
    DATA_PREFIX,
    DONE_TOKEN,
    EventDecoder,
    aiter_events,
    decode_payload,
    frame_payload,
    iter_events,
)
from chatstream.parsing.inline import parse_inline
from chatstream.parsing.markdown_structurer import split_paragraph, structure
from chatstream.parsing.table_deduplicator import (
    DedupeResult,
    TableMatch,
    dedupe_tables,
    find_tables,
    parse_table,
)

__all__ = [
    "DATA_PREFIX",
    "DONE_TOKEN",
    "DedupeResult",
    "EventDecoder",
    "TableMatch",
    "aiter_events",
    "decode_payload",
    "dedupe_tables",
    "find_tables",
    "frame_payload",
    "iter_events",
    "parse_inline",
    "parse_table",
    "split_paragraph",
    "structure",
]
