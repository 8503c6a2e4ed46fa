"""Inline formatting for paragraph text.

Supports: bold, inline code, markdown links, bare URLs.
"""

import re

from chatstream.models.nodes import InlineRun

_INLINE_RE = re.compile(
    r"\*\*(?P<bold>.+?)\*\*"
    r"|`(?P<code>[^`]+)`"
    r"|\[(?P<label>[^\]]+)\]\((?P<href>[^)\s]+)\)"
    r"|(?P<url>https?://[^\s<>()\[\]]+)"
)

# Sentence punctuation directly after a bare URL belongs to the prose
_URL_TRAILING = ".,;:!?'\""


def parse_inline(text: str) -> list[InlineRun]:
    """Split text into formatted runs in source order.

    Unmatched markers (a lone ``**`` while a bold span is still
    streaming, for example) stay in the plain text.
    """
    runs: list[InlineRun] = []
    buffer = ""
    last = 0

    for match in _INLINE_RE.finditer(text):
        buffer += text[last:match.start()]
        last = match.end()

        if match.group("bold") is not None:
            run = InlineRun(style="bold", text=match.group("bold"))
        elif match.group("code") is not None:
            run = InlineRun(style="code", text=match.group("code"))
        elif match.group("label") is not None:
            run = InlineRun(style="link", text=match.group("label"), href=match.group("href"))
        else:
            url = match.group("url").rstrip(_URL_TRAILING)
            last = match.start() + len(url)
            run = InlineRun(style="link", text=url, href=url)

        if buffer:
            runs.append(InlineRun(text=buffer))
            buffer = ""
        runs.append(run)

    buffer += text[last:]
    if buffer:
        runs.append(InlineRun(text=buffer))
    return runs
