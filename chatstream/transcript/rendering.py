"""Plain-data rendering view of transcript messages.

The presentation layer receives structural nodes per text part and tool
steps with display summaries, interleaved in their original order. Nodes
are recomputed on every call.
"""

from chatstream.config import PipelineConfig
from chatstream.models.schemas import RenderedMessage, RenderedPart, RenderedText, RenderedToolStep
from chatstream.models.transcript import Message, TextPart
from chatstream.parsing.markdown_structurer import structure
from chatstream.transcript.tool_summary import format_args, format_output


def render_message(message: Message, config: PipelineConfig | None = None) -> RenderedMessage:
    """Build the rendering view of a message.

    Args:
        message: Message in any state; streaming messages render their
            current prefix.
        config: Structuring limits. Loads from environment if not provided.

    Returns:
        RenderedMessage with parts in original order.
    """
    config = config or PipelineConfig()
    parts: list[RenderedPart] = []
    for part in message.parts:
        if isinstance(part, TextPart):
            parts.append(
                RenderedText(content=part.content, nodes=structure(part.content, config))
            )
        else:
            parts.append(
                RenderedToolStep(
                    name=part.name,
                    args=part.args,
                    status=part.status,
                    response=part.response,
                    summary_args=format_args(part.args),
                    summary_output=format_output(part.name, part.response),
                )
            )

    return RenderedMessage(
        id=message.id,
        role=message.role,
        status=message.status,
        parts=parts,
        attachments=message.attachments,
        error=message.error,
    )
