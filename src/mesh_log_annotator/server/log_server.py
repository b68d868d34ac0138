"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: annotate raw messages, records and stored log files
- Resources: annotation grammar, record schema, stored logs via URI
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m mesh_log_annotator.server.log_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mesh_log_annotator.prompts.registry import register_prompts
from mesh_log_annotator.resources.registry import register_resources
from mesh_log_annotator.tools.annotate import (
    annotate_log_file_impl,
    annotate_record_impl,
    annotate_text_impl,
    extract_spans_impl,
)

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging on stderr; stdout carries the stdio transport."""
    level_name = os.getenv("MESH_LOG_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("mesh-log-annotator", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
def annotate_text(raw_message: str, node_ids: list[int | str] | None = None) -> dict[str, Any]:
    """Annotate node ids in a raw protocol message with their hex form.

    Parameters
    ----------
    raw_message:
        Text form of a protocol message.
    node_ids:
        Node ids to look for, in order. Ints may be signed or unsigned 32-bit
        values; strings may be !xxxxxxxx, 0x<hex> or decimal.

    Returns
    -------
    dict:
        {"text": str, "annotated": bool, "spans": list[dict]}
    """
    return annotate_text_impl(raw_message=raw_message, node_ids=node_ids)


@mcp.tool()
def annotate_record(
    raw_message: str,
    message_type: str,
    packet_from: int | str | None = None,
    packet_to: int | str | None = None,
    node_num: int | str | None = None,
    my_node_num: int | str | None = None,
) -> dict[str, Any]:
    """Annotate a record's raw message using the node ids of its kind.

    Packet uses packet_from/packet_to, NodeInfo uses node_num and MyNodeInfo
    uses my_node_num. Other kinds are returned unchanged.
    """
    return annotate_record_impl(
        raw_message=raw_message,
        message_type=message_type,
        packet_from=packet_from,
        packet_to=packet_to,
        node_num=node_num,
        my_node_num=my_node_num,
    )


@mcp.tool()
async def annotate_log_file(
    log_path: str,
    message_types: list[str] | None = None,
    limit: int | None = None,
    newest_first: bool = True,
    include_spans: bool = True,
) -> dict[str, Any]:
    """Load a stored mesh log (JSON lines, optionally .gz) and annotate every record.

    Returns
    -------
    dict:
        {"count": int, "records": list[dict]}
    """
    return await annotate_log_file_impl(
        log_path=log_path,
        message_types=message_types,
        limit=limit,
        newest_first=newest_first,
        include_spans=include_spans,
    )


@mcp.tool()
def extract_annotated_spans(annotated_text: str) -> dict[str, Any]:
    """Return the annotation spans found at line ends, in textual order."""
    return extract_spans_impl(annotated_text=annotated_text)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
