"""Structural nodes produced from assistant prose.

Nodes are rebuilt from a text part's full string on every render pass
and are never persisted.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class InlineRun(BaseModel):
    """A span of paragraph text with uniform formatting.

    Attributes:
        style: text, bold, code or link.
        text: Visible text of the span.
        href: Link target, only set for links.
    """

    style: Literal["text", "bold", "code", "link"] = "text"
    text: str
    href: str | None = None


class Heading(BaseModel):
    type: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=6)
    text: str


class Paragraph(BaseModel):
    """A block of running prose split into inline runs."""

    type: Literal["paragraph"] = "paragraph"
    runs: list[InlineRun] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


class IntroLine(BaseModel):
    """A short line ending in a colon that introduces what follows."""

    type: Literal["intro_line"] = "intro_line"
    text: str


class BulletGroup(BaseModel):
    type: Literal["bullet_group"] = "bullet_group"
    items: list[str] = Field(default_factory=list)


class NumberedItem(BaseModel):
    type: Literal["numbered_item"] = "numbered_item"
    number: int
    text: str


class Table(BaseModel):
    """A parsed markdown table.

    Every row has exactly ``len(headers)`` cells.
    """

    type: Literal["table"] = "table"
    headers: list[str]
    rows: list[list[str]] = Field(default_factory=list)


class CodeBlock(BaseModel):
    """A fenced code region.

    Attributes:
        language: Info string after the opening fence, if any.
        content: Code between the fences.
        closed: False while the closing fence has not arrived yet.
    """

    type: Literal["code_block"] = "code_block"
    language: str | None = None
    content: str
    closed: bool = True


StructuralNode = Annotated[
    Union[Heading, Paragraph, IntroLine, BulletGroup, NumberedItem, Table, CodeBlock],
    Field(discriminator="type"),
]
