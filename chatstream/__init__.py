"""chatstream - streaming chat transcript pipeline.

Turns a chunked assistant event stream into a renderable transcript.

Components:
    - parsing: SSE event decoding, markdown structuring, table deduplication
    - transcript: event assembly into messages, sessions, rendering view
    - models: Event, ContentPart, Message and StructuralNode schemas
    - api: thin HTTP adapter for structuring and replaying streams
"""

__version__ = "0.1.0"
