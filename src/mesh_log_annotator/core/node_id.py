"""Node identifier formatting.

Mesh node ids are 32-bit values. The radio protocol serializes them as signed
fields, but the id space itself is unsigned, so every conversion here works on
the unsigned bit pattern.
"""

from __future__ import annotations

import re

NODE_ID_BITS = 32
NODE_ID_PREFIX = "!"
NODE_ID_HEX_DIGITS = 8

_NODE_ID_MASK = (1 << NODE_ID_BITS) - 1
_SIGNED_MIN = -(1 << (NODE_ID_BITS - 1))

_HEX_ID_RE = re.compile(rf"^{re.escape(NODE_ID_PREFIX)}(?P<hex>[0-9a-fA-F]{{{NODE_ID_HEX_DIGITS}}})$")
_HEX_LITERAL_RE = re.compile(r"^0[xX](?P<hex>[0-9a-fA-F]{1,8})$")
_DECIMAL_RE = re.compile(r"^-?[0-9]+$")


def to_unsigned(node_id: int) -> int:
    """Reinterpret a node id as its unsigned 32-bit bit pattern."""
    return node_id & _NODE_ID_MASK


def format_hex(node_id: int) -> str:
    """Return the canonical ``!xxxxxxxx`` form of a node id."""
    return f"{NODE_ID_PREFIX}{to_unsigned(node_id):0{NODE_ID_HEX_DIGITS}x}"


def format_unsigned_decimal(node_id: int) -> str:
    """Return the unsigned decimal text of a node id (never with a minus sign)."""
    return str(to_unsigned(node_id))


def parse_node_id(text: str) -> int:
    """Parse user-supplied node id text into its unsigned value.

    Accepted forms: ``!abcd1234``, ``0xabcd1234``, unsigned decimal and signed
    32-bit decimal (``-1409790708``).
    """
    s = text.strip()
    m = _HEX_ID_RE.match(s) or _HEX_LITERAL_RE.match(s)
    if m:
        return int(m.group("hex"), 16)

    if _DECIMAL_RE.match(s):
        value = int(s)
        if _SIGNED_MIN <= value <= _NODE_ID_MASK:
            return to_unsigned(value)
        raise ValueError(f"Node id out of 32-bit range: {text!r}")

    raise ValueError(
        f"Invalid node id {text!r}. Expected !xxxxxxxx, 0x<hex> or a 32-bit decimal."
    )
