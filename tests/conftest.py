from __future__ import annotations

import gzip
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

PACKET_RAW = "from: 2885173132\nid: 1737414295\nrx_snr: 9.5\nto: 2885176588"
NODE_INFO_RAW = "num: 305419896\nuser {\n  long_name: \"base\"\n}"
MY_NODE_INFO_RAW = "my_node_num: 3735928559\nreboot_count: 4"


def _records() -> list[dict[str, Any]]:
    return [
        {
            "uuid": "a",
            "message_type": "Packet",
            "received_date": 1601251258000,
            "raw_message": PACKET_RAW,
            "packet": {"from": -1409794164, "to": -1409790708},
        },
        {
            "uuid": "b",
            "message_type": "NodeInfo",
            "received_date": 1601251259000,
            "raw_message": NODE_INFO_RAW,
            "node_info": {"num": 305419896},
        },
        {
            "uuid": "c",
            "message_type": "MyNodeInfo",
            "received_date": 1601251257000,
            "raw_message": MY_NODE_INFO_RAW,
            "my_node_info": {"my_node_num": -559038737},
        },
        {
            "uuid": "d",
            "message_type": "Config",
            "received_date": 1601251260000,
            "raw_message": "lora {\n  region: EU_868\n}",
        },
    ]


@pytest.fixture
def records() -> list[dict[str, Any]]:
    return _records()


@pytest.fixture
def write_records() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        lines = [json.dumps(r) for r in _records()]
        if path.suffix == ".gz":
            with gzip.open(path, mode="wt", encoding="utf-8") as f:
                f.write("\n".join(lines) + "\n")
        else:
            path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    return _write


@pytest.fixture
def write_lines() -> Callable[[Path, list[str]], None]:
    def _write(path: Path, lines: list[str]) -> None:
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")

    return _write
