"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import asyncio
import gzip
import json
import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from mesh_log_annotator.core.annotation import ANNOTATION_RE, format_annotation
from mesh_log_annotator.core.node_id import NODE_ID_HEX_DIGITS, NODE_ID_PREFIX
from mesh_log_annotator.core.schema import MeshLogRecord

ALLOWED_FILE_SUFFIXES = {".jsonl", ".log", ".txt"}
BASE_DIR_ENV = "MESH_LOG_BASE_DIR"
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"

SAMPLE_RECORD: dict[str, Any] = {
    "uuid": "sample-0001",
    "message_type": "Packet",
    "received_date": 1601251258000,
    "raw_message": (
        "from: 2885173132\n"
        "decoded {\n"
        "   position {\n"
        "       altitude: 60\n"
        "       battery_level: 81\n"
        "       latitude_i: 411111136\n"
        "       longitude_i: -711111805\n"
        "       time: 1600390966\n"
        "   }\n"
        "}\n"
        "hop_limit: 3\n"
        "id: 1737414295\n"
        "rx_snr: 9.5\n"
        "rx_time: 316400569\n"
        "to: 2885176588"
    ),
    "packet": {"from": -1409794164, "to": -1409790708},
}


def _base_dir() -> Path:
    """Return the resolved base directory for file resources."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = _base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def _allowed_suffix(path: Path) -> str:
    """Return the effective suffix for allowlist checks."""
    suffix = path.suffix.lower()
    if suffix == ".gz":
        suffix = path.with_suffix("").suffix.lower()
    return suffix


def resolve_resource_path(path: str) -> Path:
    """Resolve and validate a resource file path."""
    resolved = _safe_resolve(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"File not found: {resolved}")
    if _allowed_suffix(resolved) not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"File type not allowed. Allowed: {allowed}.")
    return resolved


def _open_text(path: Path) -> str:
    """Read text from a file, supporting optional gzip compression."""
    if path.suffix.lower() == ".gz":
        with gzip.open(path, mode="rt", encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
            return f.read()
    return path.read_text(encoding=TEXT_ENCODING, errors=TEXT_ERRORS)


def annotation_grammar() -> dict[str, Any]:
    """Describe the annotation text shape and its recovery pattern."""
    return {
        "node_id_prefix": NODE_ID_PREFIX,
        "hex_digits": NODE_ID_HEX_DIGITS,
        "inserted_text_example": format_annotation(0x0000ABCD),
        "span_pattern": ANNOTATION_RE.pattern,
        "span_pattern_flags": [],
        "matching": "first occurrence of the unsigned decimal id, plain substring search",
    }


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://mesh-log/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        base = _base_dir()
        return (
            "Resources:\n"
            "- app://mesh-log/help\n"
            "- app://mesh-log/examples/sample-record\n"
            "- app://mesh-log/config/annotation-grammar\n"
            "- app://mesh-log/schemas/record\n"
            f"- log://{{path}} (restricted to {BASE_DIR_ENV}; allowed: {allowed}, .gz)\n"
            f"\nBase directory: {base}\n"
        )

    @mcp.resource("app://mesh-log/examples/sample-record")
    def sample_record() -> str:
        """Return one stored record as a JSON line, for demos and tests."""
        return json.dumps(SAMPLE_RECORD)

    @mcp.resource("app://mesh-log/config/annotation-grammar")
    def grammar() -> dict[str, Any]:
        """Return the annotation grammar."""
        return annotation_grammar()

    @mcp.resource("app://mesh-log/schemas/record")
    def record_schema() -> dict[str, Any]:
        """Return the JSON schema of a stored mesh log record."""
        return MeshLogRecord.model_json_schema(by_alias=True)

    @mcp.resource("log://{path}")
    async def read_log(path: str) -> str:
        """Return the full contents of a stored log within MESH_LOG_BASE_DIR."""
        p = resolve_resource_path(path)
        return await asyncio.to_thread(_open_text, p)
