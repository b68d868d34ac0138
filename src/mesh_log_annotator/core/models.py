"""Core data models for mesh log annotation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MessageType(str, Enum):
    """Record kinds whose payload carries node ids."""

    PACKET = "Packet"
    NODE_INFO = "NodeInfo"
    MY_NODE_INFO = "MyNodeInfo"


@dataclass(frozen=True, slots=True)
class AnnotatedSpan:
    """Half-open ``[start, end)`` range of one annotation in annotated text."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        """Return the annotated substring of ``text``."""
        return text[self.start : self.end]


@dataclass(frozen=True, slots=True)
class MeshPacket:
    """Routing fields of a mesh packet."""

    from_node: int
    to_node: int

    def node_ids(self) -> tuple[int, ...]:
        return (self.from_node, self.to_node)


@dataclass(frozen=True, slots=True)
class NodeInfo:
    """Node database entry announced by the radio."""

    num: int

    def node_ids(self) -> tuple[int, ...]:
        return (self.num,)


@dataclass(frozen=True, slots=True)
class MyNodeInfo:
    """Information about the locally connected node."""

    my_node_num: int

    def node_ids(self) -> tuple[int, ...]:
        return (self.my_node_num,)


@dataclass(frozen=True, slots=True)
class MeshLog:
    """One received protocol message as shown in the debug log."""

    uuid: str
    message_type: str
    received_date: int  # epoch milliseconds
    raw_message: str
    mesh_packet: MeshPacket | None = None
    node_info: NodeInfo | None = None
    my_node_info: MyNodeInfo | None = None
