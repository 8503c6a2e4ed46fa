"""Compact display summaries for tool steps."""

import json
from typing import Any

MAX_ARG_CHARS = 200
MAX_QUERY_CHARS = 60
MAX_STDOUT_CHARS = 300


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def format_args(args: dict[str, Any]) -> str:
    """Render tool arguments as ``key=value`` pairs.

    Internal (underscore) keys, overly long strings and ``True`` flags are
    left out; paths are shortened to their last component and queries are
    truncated.
    """
    rendered: list[str] = []
    for key, value in args.items():
        if key.startswith("_") or (isinstance(value, str) and len(value) > MAX_ARG_CHARS):
            continue
        if value is True:
            continue
        if key == "path" and isinstance(value, str):
            value = value.rstrip("/").split("/")[-1] or value
        elif key == "query" and isinstance(value, str):
            value = _truncate(value, MAX_QUERY_CHARS)
        text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        rendered.append(f"{key}={text}")
    return " ".join(rendered)


def format_output(name: str, response: Any) -> str | None:
    """Summarize a tool response in one short line.

    Args:
        name: Tool name, selects the tool-specific summary.
        response: Raw tool response.

    Returns:
        A summary, or None when nothing useful can be said.
    """
    if not isinstance(response, dict) or not response:
        return None

    if name == "exec.run":
        stdout = response.get("stdout") or ""
        stderr = response.get("stderr") or ""
        exit_code = response.get("exitCode")
        if exit_code not in (None, 0) and stderr:
            return f"Exit code: {exit_code}\n{stderr}"
        if isinstance(stdout, str) and stdout.strip():
            return _truncate(stdout, MAX_STDOUT_CHARS)

    if name == "fs.write" and response.get("success"):
        return f"File written: {response.get('path')}"

    if name == "fs.list" and response.get("total"):
        return f"{response['total']} items"

    if name == "brave.search" and response.get("totalResults"):
        return f"{response['totalResults']} results"

    if response.get("error"):
        return f"Error: {response['error']}"

    return None
