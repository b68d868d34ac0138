"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Any

from mesh_log_annotator.core.annotation import annotate, extract_annotated_spans
from mesh_log_annotator.core.log_store import load_mesh_logs
from mesh_log_annotator.core.models import (
    AnnotatedSpan,
    MeshLog,
    MeshPacket,
    MessageType,
    MyNodeInfo,
    NodeInfo,
)
from mesh_log_annotator.core.node_id import parse_node_id, to_unsigned
from mesh_log_annotator.core.records import annotate_mesh_log, node_id_candidates
from mesh_log_annotator.core.rendering import format_received_date

DEFAULT_LIMIT = 200
DEFAULT_HARD_LIMIT = 5000
HARD_LIMIT_ENV = "MESH_LOG_HARD_LIMIT"
KNOWN_MESSAGE_TYPES = [t.value for t in MessageType]


def resolve_hard_limit() -> int:
    """Return the record cap, honoring MESH_LOG_HARD_LIMIT."""
    env = os.getenv(HARD_LIMIT_ENV)
    if env is None or env == "":
        return DEFAULT_HARD_LIMIT
    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{HARD_LIMIT_ENV} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{HARD_LIMIT_ENV} must be >= 1")
    return value


def _resolve_limit(limit: int | None) -> int:
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    return min(limit, resolve_hard_limit())


def _parse_node_ids(node_ids: Sequence[int | str] | None) -> list[int]:
    """Accept ints (signed or unsigned) and node id strings."""
    out: list[int] = []
    for value in node_ids or ():
        if isinstance(value, bool):
            raise ValueError(f"Invalid node id {value!r}")
        if isinstance(value, int):
            out.append(parse_node_id(str(value)))
        else:
            out.append(parse_node_id(value))
    return out


def _optional_node_id(value: int | str | None) -> int | None:
    if value is None:
        return None
    return _parse_node_ids([value])[0]


def _span_to_dict(span: AnnotatedSpan, text: str) -> dict[str, Any]:
    return {"start": span.start, "end": span.end, "text": span.slice(text)}


def _spans(text: str) -> list[dict[str, Any]]:
    return [_span_to_dict(s, text) for s in extract_annotated_spans(text, reverse=False)]


def _log_to_dict(log: MeshLog, *, include_spans: bool) -> dict[str, Any]:
    """Convert an annotated MeshLog into a JSON-serializable dict."""
    d: dict[str, Any] = {
        "uuid": log.uuid,
        "message_type": log.message_type,
        "received_date": format_received_date(log.received_date),
        "raw_message": log.raw_message,
        "node_ids": [to_unsigned(n) for n in node_id_candidates(log)],
    }
    if include_spans:
        d["spans"] = _spans(log.raw_message)
    return d


def annotate_text_impl(*, raw_message: str, node_ids: Sequence[int | str] | None = None) -> dict[str, Any]:
    """Implementation for the `annotate_text` MCP tool."""
    text = annotate(raw_message, _parse_node_ids(node_ids))
    return {
        "text": text,
        "annotated": text is not raw_message,
        "spans": _spans(text),
    }


def annotate_record_impl(
    *,
    raw_message: str,
    message_type: str,
    packet_from: int | str | None = None,
    packet_to: int | str | None = None,
    node_num: int | str | None = None,
    my_node_num: int | str | None = None,
) -> dict[str, Any]:
    """Implementation for the `annotate_record` MCP tool.

    Only the fields relevant to ``message_type`` are used; a Packet needs both
    ``packet_from`` and ``packet_to``.
    """
    from_node = _optional_node_id(packet_from)
    to_node = _optional_node_id(packet_to)
    has_packet = from_node is not None and to_node is not None
    if message_type == MessageType.PACKET.value and (from_node is None) != (to_node is None):
        raise ValueError("packet_from and packet_to must be given together.")

    num = _optional_node_id(node_num)
    my_num = _optional_node_id(my_node_num)
    log = MeshLog(
        uuid="",
        message_type=message_type,
        received_date=0,
        raw_message=raw_message,
        mesh_packet=MeshPacket(from_node, to_node) if has_packet else None,
        node_info=NodeInfo(num) if num is not None else None,
        my_node_info=MyNodeInfo(my_num) if my_num is not None else None,
    )
    annotated = annotate_mesh_log(log)
    return {
        "text": annotated.raw_message,
        "annotated": annotated is not log,
        "node_ids": [to_unsigned(n) for n in node_id_candidates(log)],
        "spans": _spans(annotated.raw_message),
    }


def extract_spans_impl(*, annotated_text: str) -> dict[str, Any]:
    """Implementation for the `extract_annotated_spans` MCP tool."""
    spans = _spans(annotated_text)
    return {"count": len(spans), "spans": spans}


def _parse_message_types(message_types: Sequence[str] | None) -> list[str] | None:
    if not message_types:
        return None
    by_lower = {t.lower(): t for t in KNOWN_MESSAGE_TYPES}
    out: list[str] = []
    for s in message_types:
        name = s.strip()
        if not name:
            continue
        # Known kinds are matched case-insensitively; other kinds pass through as given.
        out.append(by_lower.get(name.lower(), name))
    return out or None


async def annotate_log_file_impl(
    *,
    log_path: str,
    message_types: Sequence[str] | None = None,
    limit: int | None = None,
    newest_first: bool = True,
    include_spans: bool = True,
) -> dict[str, Any]:
    """Implementation for the `annotate_log_file` MCP tool."""
    logs = await load_mesh_logs(
        log_path,
        message_types=_parse_message_types(message_types),
        limit=_resolve_limit(limit),
        newest_first=newest_first,
    )
    records = [_log_to_dict(annotate_mesh_log(log), include_spans=include_spans) for log in logs]
    return {"count": len(records), "records": records}
