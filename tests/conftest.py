"""Builders for v6 page records and zipped notebooks."""

from __future__ import annotations

import json
import struct
import zipfile
from pathlib import Path

import pytest

from rmexport.parser import HEADER_V6, BlockType


def _tag(index: int, tag_type: int) -> bytes:
    return bytes([(index << 4) | tag_type])


def _crdt_id(part1: int, part2: int) -> bytes:
    assert part2 < 0x80
    return bytes([part1, part2])


def block(block_type: int, payload: bytes, version: int = 2) -> bytes:
    return struct.pack("<IBBBB", len(payload), 0, 1, version, block_type) + payload


def line_block(points, parent=(0, 11), item=(1, 20), pen=2, color=0,
               version=2, deleted=False) -> bytes:
    """LineItem block; points are (x, y, width) or (x, y, width, pressure)."""
    encoded = b""
    for p in points:
        x, y, width = p[:3]
        pressure = p[3] if len(p) > 3 else 0
        if version == 1:
            encoded += struct.pack("<ffffff", x, y, 0.0, 0.0, width / 4, pressure / 255)
        else:
            encoded += struct.pack("<ffHHBB", x, y, 0, int(width), 0, int(pressure))

    value = (
        bytes([0x03])
        + _tag(1, 0x4) + struct.pack("<I", pen)
        + _tag(2, 0x4) + struct.pack("<I", color)
        + _tag(3, 0x8) + struct.pack("<d", 1.0)
        + _tag(4, 0x4) + struct.pack("<f", 0.0)
        + _tag(5, 0xC) + struct.pack("<I", len(encoded)) + encoded
        + _tag(6, 0xF) + _crdt_id(1, 1)
    )
    payload = (
        _tag(1, 0xF) + _crdt_id(*parent)
        + _tag(2, 0xF) + _crdt_id(*item)
        + _tag(3, 0xF) + _crdt_id(0, 0)
        + _tag(4, 0xF) + _crdt_id(0, 0)
        + _tag(5, 0x4) + struct.pack("<I", 1 if deleted else 0)
    )
    if not deleted:
        payload += _tag(6, 0xC) + struct.pack("<I", len(value)) + value
    return block(BlockType.LineItem, payload, version=version)


def page_record(*blocks: bytes) -> bytes:
    return HEADER_V6 + b"".join(blocks)


def write_notebook(path: Path, pages: dict, order=None, doc_id="doc") -> Path:
    """Zip a notebook; ``pages`` maps page id to record bytes (None for blank)."""
    order = order or list(pages)
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr(f"{doc_id}.content", json.dumps({"pages": order}))
        for page_id, record in pages.items():
            if record is not None:
                zf.writestr(f"{doc_id}/{page_id}.rm", record)
    return path


@pytest.fixture
def scenario_record() -> bytes:
    """One layer, one line of three points."""
    return page_record(line_block([(0, 0, 2), (10, 0, 4), (10, 10, 4)]))


@pytest.fixture
def notebook(tmp_path, scenario_record) -> Path:
    return write_notebook(
        tmp_path / "notebook.zip",
        {"p1": scenario_record, "p2": None, "p3": scenario_record},
    )
