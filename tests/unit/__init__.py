"""Unit tests for individual components in isolation.

Ensures fast execution with no I/O.

Coverage:
    - parsing/: Event decoding, structuring, table deduplication, inline runs
    - transcript/: Assembly, collaborators, sessions, tool summaries
    - config: Validation and environment defaults

Follows single responsibility per test function. Leverages pytest-check
for multiple assertions per test.
"""
