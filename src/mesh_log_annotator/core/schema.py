"""Stored mesh log record schema."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .models import MeshLog, MeshPacket, MyNodeInfo, NodeInfo

# Node ids arrive signed (protocol fields) or unsigned (display form).
_NODE_ID_MIN = -(2**31)
_NODE_ID_MAX = 2**32 - 1
# Last millisecond of year 9999, the datetime range limit.
_RECEIVED_DATE_MAX = 253402300799999


def _node_id_field(description: str, **kwargs):
    return Field(ge=_NODE_ID_MIN, le=_NODE_ID_MAX, description=description, **kwargs)


class PacketFields(BaseModel):
    # JSON uses the protocol field names.
    model_config = ConfigDict(populate_by_name=True)

    from_node: int = _node_id_field("Sender node id.", alias="from")
    to_node: int = _node_id_field("Destination node id.", alias="to")


class NodeInfoFields(BaseModel):
    num: int = _node_id_field("Node number of the described node.")


class MyNodeInfoFields(BaseModel):
    my_node_num: int = _node_id_field("Node number of the local node.")


class MeshLogRecord(BaseModel):
    """One line of a stored mesh log (JSON lines)."""

    uuid: str = Field(description="Record identifier.")
    message_type: str = Field(description="Record kind, e.g. Packet, NodeInfo, MyNodeInfo.")
    received_date: int = Field(ge=0, le=_RECEIVED_DATE_MAX, description="Receive time in epoch milliseconds.")
    raw_message: str = Field(description="Text form of the protocol message.")
    packet: PacketFields | None = None
    node_info: NodeInfoFields | None = None
    my_node_info: MyNodeInfoFields | None = None

    def to_mesh_log(self) -> MeshLog:
        """Convert into the immutable core record."""
        return MeshLog(
            uuid=self.uuid,
            message_type=self.message_type,
            received_date=self.received_date,
            raw_message=self.raw_message,
            mesh_packet=(
                MeshPacket(from_node=self.packet.from_node, to_node=self.packet.to_node)
                if self.packet is not None
                else None
            ),
            node_info=NodeInfo(num=self.node_info.num) if self.node_info is not None else None,
            my_node_info=(
                MyNodeInfo(my_node_num=self.my_node_info.my_node_num)
                if self.my_node_info is not None
                else None
            ),
        )
