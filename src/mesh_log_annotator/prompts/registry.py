"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP


def _format_types(message_types: Sequence[str] | str | None) -> str:
    """Return message types as a JSON array literal for prompt display."""
    if message_types is None:
        return "[]"
    if isinstance(message_types, str):
        items = [s.strip() for s in message_types.split(",") if s.strip()]
    else:
        items = [str(s).strip() for s in message_types if str(s).strip()]
    if not items:
        return "[]"
    quoted = ", ".join(f'"{item}"' for item in items)
    return f"[{quoted}]"


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def summarize_resource(uri: str) -> list[dict[str, Any]]:
        """Build a prompt that summarizes a resource URI."""
        return [
            {
                "role": "system",
                "content": (
                    "You are a precise assistant. Summarize the provided resource clearly and "
                    "concisely. Extract key points and anything unusual."
                ),
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Summarize this resource:"},
                    {"type": "resource", "uri": uri},
                ],
            },
        ]

    @mcp.prompt()
    def explain_mesh_log(
        log_path: str,
        message_types: Sequence[str] | str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Build a prompt that walks through recent mesh traffic."""
        call_lines = [
            f"- log_path: {log_path}",
            f"- message_types: {_format_types(message_types)}",
            f"- limit: {limit}",
            "- newest_first: true",
        ]
        call_block = "\n".join(call_lines)
        return [
            {
                "role": "system",
                "content": (
                    "You are a mesh radio network assistant. Explain protocol traffic plainly. "
                    "Refer to nodes by their !xxxxxxxx id. Do not invent details."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Explain the recent mesh log using annotate_log_file. Follow this workflow:\n"
                    "- Call annotate_log_file first with the parameters below.\n"
                    "- Node ids in raw_message are followed by their hex form, e.g. "
                    "'from: 2885173132 (!abf83f8c)'. Use the hex form when naming nodes.\n"
                    "- An empty message_types list means all kinds.\n"
                    "- If no records are returned, say so.\n\n"
                    "Call annotate_log_file with:\n"
                    f"{call_block}\n\n"
                    "Return this structure:\n"
                    "1) Nodes seen (hex id, role: sender/destination/local node)\n"
                    "2) Notable traffic (2-5 bullets, cite uuid and received_date)\n"
                ),
            },
        ]
