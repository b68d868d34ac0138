"""Per-record annotation: which payload fields hold node ids."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Protocol

from .annotation import annotate
from .models import MeshLog, MessageType


class NodeIdSource(Protocol):
    """Payload that can name the node ids relevant to its record."""

    def node_ids(self) -> tuple[int, ...]:
        ...


_PAYLOAD_BY_KIND: dict[str, Callable[[MeshLog], NodeIdSource | None]] = {
    MessageType.PACKET.value: lambda log: log.mesh_packet,
    MessageType.NODE_INFO.value: lambda log: log.node_info,
    MessageType.MY_NODE_INFO.value: lambda log: log.my_node_info,
}


def node_id_candidates(log: MeshLog) -> tuple[int, ...]:
    """Return the node ids to annotate for a record (empty for unknown kinds)."""
    payload_of = _PAYLOAD_BY_KIND.get(log.message_type)
    if payload_of is None:
        return ()
    payload = payload_of(log)
    if payload is None:
        return ()
    return payload.node_ids()


def annotate_mesh_log(log: MeshLog) -> MeshLog:
    """Return ``log`` with node ids in its raw message annotated.

    The same record is returned when nothing was annotated.
    """
    candidates = node_id_candidates(log)
    if not candidates:
        return log
    annotated = annotate(log.raw_message, candidates)
    if annotated is log.raw_message:
        return log
    return replace(log, raw_message=annotated)
