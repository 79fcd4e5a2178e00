"""
reMarkable v6 scene decoder

Turns the body of a v6 .rm page record into layers of lines of points.
The v6 format uses a "tagged block" protocol where each value is prefixed
with an index and type tag.

Format Overview:
- Header: 43 bytes "reMarkable .lines file, version=6          "
- Blocks: length-prefixed chunks with type info
- Tags: varuint where index = tag >> 4, type = tag & 0xF
- Points: 14 bytes each in v2 blocks, 24 bytes in v1 blocks

Only LineItem blocks are decoded. Every other block type is skipped.
"""

from __future__ import annotations

import io
import math
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO, Iterator, Optional


# =============================================================================
# Constants
# =============================================================================

HEADER_V6 = b"reMarkable .lines file, version=6          "

# Value subblock type for line items
LINE_ITEM_TYPE = 0x03


class TagType(IntEnum):
    """Tag types indicate what kind of data follows."""
    Byte1 = 0x1     # 1-byte value (bool, u8)
    Byte4 = 0x4     # 4-byte value (float32, u32)
    Byte8 = 0x8     # 8-byte value (float64)
    Length4 = 0xC   # Length-prefixed subblock
    ID = 0xF        # CRDT ID (u8 + varuint)


class BlockType(IntEnum):
    """Top-level block types in v6 format."""
    MigrationInfo = 0x00
    SceneTree = 0x01
    TreeNode = 0x02
    GlyphItem = 0x03
    GroupItem = 0x04
    LineItem = 0x05
    TextItem = 0x06
    RootText = 0x07
    TombstoneItem = 0x08
    AuthorIds = 0x09
    PageInfo = 0x0A
    SceneInfo = 0x0D


class Pen(IntEnum):
    """Pen/tool types."""
    PAINTBRUSH = 0
    PENCIL = 1
    BALLPOINT = 2
    MARKER = 3
    FINELINER = 4
    HIGHLIGHTER = 5
    ERASER = 6
    MECHANICAL_PENCIL = 7
    ERASER_AREA = 8
    PAINTBRUSH_2 = 12
    MECHANICAL_PENCIL_2 = 13
    PENCIL_2 = 14
    BALLPOINT_2 = 15
    MARKER_2 = 16
    FINELINER_2 = 17
    HIGHLIGHTER_2 = 18
    CALIGRAPHY = 21
    SHADER = 23


class PenColor(IntEnum):
    """Pen colors."""
    BLACK = 0
    GRAY = 1
    WHITE = 2
    YELLOW = 3
    GREEN = 4
    PINK = 5
    BLUE = 6
    RED = 7
    GRAY_OVERLAP = 8
    HIGHLIGHT = 9
    GREEN_2 = 10
    CYAN = 11
    MAGENTA = 12
    YELLOW_2 = 13


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class CrdtId:
    """CRDT identifier (part1, part2)."""
    part1: int
    part2: int

    def __repr__(self) -> str:
        return f"CrdtId({self.part1}, {self.part2})"


@dataclass
class Point:
    """A single pen sample in page-local units."""
    x: float
    y: float
    width: float
    pressure: float = 0.0
    speed: float = 0.0
    direction: float = 0.0


@dataclass
class Line:
    """One continuous pen gesture."""
    points: list[Point] = field(default_factory=list)
    pen: Pen | int = Pen.BALLPOINT  # Unknown pen types kept as int
    color: PenColor | int = PenColor.BLACK  # Unknown colors kept as int
    thickness_scale: float = 1.0


@dataclass
class Layer:
    """Lines in paint order."""
    lines: list[Line] = field(default_factory=list)
    id: Optional[CrdtId] = None


@dataclass
class Scene:
    """Decoded content of one page."""
    layers: list[Layer] = field(default_factory=list)

    def all_lines(self) -> Iterator[Line]:
        """Iterate over all lines in paint order."""
        for layer in self.layers:
            yield from layer.lines


# =============================================================================
# Binary Stream Reader
# =============================================================================

class BinaryReader:
    """Little-endian primitives over a binary stream."""

    def __init__(self, data: BinaryIO):
        self.data = data

    def tell(self) -> int:
        return self.data.tell()

    def seek(self, pos: int) -> None:
        self.data.seek(pos)

    def read_bytes(self, n: int) -> bytes:
        """Read exactly n bytes, raise EOFError if not enough."""
        result = self.data.read(n)
        if len(result) != n:
            raise EOFError(f"Expected {n} bytes, got {len(result)}")
        return result

    def read_uint8(self) -> int:
        return struct.unpack("<B", self.read_bytes(1))[0]

    def read_uint16(self) -> int:
        return struct.unpack("<H", self.read_bytes(2))[0]

    def read_uint32(self) -> int:
        return struct.unpack("<I", self.read_bytes(4))[0]

    def read_float32(self) -> float:
        return struct.unpack("<f", self.read_bytes(4))[0]

    def read_float64(self) -> float:
        return struct.unpack("<d", self.read_bytes(8))[0]

    def read_varuint(self) -> int:
        result = 0
        shift = 0
        while True:
            byte = self.read_uint8()
            result |= (byte & 0x7F) << shift
            if not (byte & 0x80):
                break
            shift += 7
        return result

    def read_crdt_id(self) -> CrdtId:
        part1 = self.read_uint8()
        part2 = self.read_varuint()
        return CrdtId(part1, part2)


# =============================================================================
# Tagged Block Reader
# =============================================================================

class TaggedBlockReader:
    """Reader for the v6 tagged block format."""

    def __init__(self, data: BinaryIO):
        self.stream = BinaryReader(data)
        self._block_end: Optional[int] = None

    def bytes_remaining(self) -> float:
        """Bytes remaining in current block."""
        if self._block_end is None:
            return float('inf')
        return self._block_end - self.stream.tell()

    def _read_tag(self) -> tuple[int, TagType]:
        tag = self.stream.read_varuint()
        return tag >> 4, TagType(tag & 0xF)

    def _expect_tag(self, expected_index: int, expected_type: TagType) -> None:
        pos = self.stream.tell()
        index, tag_type = self._read_tag()
        if index != expected_index or tag_type != expected_type:
            self.stream.seek(pos)
            raise ValueError(
                f"Expected tag ({expected_index}, {expected_type.name}), "
                f"got ({index}, {tag_type.name}) at position {pos}"
            )

    def _check_tag(self, expected_index: int, expected_type: TagType) -> bool:
        """Check if next tag matches, without consuming it."""
        if self.bytes_remaining() <= 0:
            return False
        pos = self.stream.tell()
        try:
            index, tag_type = self._read_tag()
            return index == expected_index and tag_type == expected_type
        except (EOFError, ValueError):
            return False
        finally:
            self.stream.seek(pos)

    def read_int(self, index: int) -> int:
        self._expect_tag(index, TagType.Byte4)
        return self.stream.read_uint32()

    def read_float(self, index: int) -> float:
        self._expect_tag(index, TagType.Byte4)
        return self.stream.read_float32()

    def read_double(self, index: int) -> float:
        self._expect_tag(index, TagType.Byte8)
        return self.stream.read_float64()

    def read_id(self, index: int) -> CrdtId:
        self._expect_tag(index, TagType.ID)
        return self.stream.read_crdt_id()

    def read_block_header(self) -> Optional[tuple[int, int, int, int]]:
        """
        Read a main block header.
        Returns (block_type, length, min_version, current_version) or None at EOF.
        """
        first = self.stream.data.read(4)
        if not first:
            return None
        if len(first) != 4:
            raise EOFError(f"Truncated block header: {len(first)} bytes")
        length = struct.unpack("<I", first)[0]

        _unknown = self.stream.read_uint8()  # Always 0
        min_version = self.stream.read_uint8()
        current_version = self.stream.read_uint8()
        block_type = self.stream.read_uint8()
        return block_type, length, min_version, current_version

    def begin_block(self, length: int) -> int:
        self._block_end = self.stream.tell() + length
        return self._block_end

    def read_subblock(self, index: int) -> int:
        """Read a subblock tag and return its length."""
        self._expect_tag(index, TagType.Length4)
        return self.stream.read_uint32()

    def has_subblock(self, index: int) -> bool:
        return self._check_tag(index, TagType.Length4)


# =============================================================================
# Scene Decoder
# =============================================================================

def read_point(stream: BinaryReader, version: int = 2) -> Point:
    """Read one point; v1 blocks store six floats, v2 blocks a packed record."""
    x = stream.read_float32()
    y = stream.read_float32()
    if version == 1:
        speed = stream.read_float32() * 4
        direction = 255 * stream.read_float32() / (math.pi * 2)
        width = float(round(stream.read_float32() * 4))
        pressure = stream.read_float32() * 255
    else:
        speed = stream.read_uint16()
        width = stream.read_uint16()
        direction = stream.read_uint8()
        pressure = stream.read_uint8()
    return Point(x=x, y=y, width=float(width), pressure=float(pressure),
                 speed=float(speed), direction=float(direction))


def point_size(version: int) -> int:
    if version == 1:
        return 24
    if version == 2:
        return 14
    raise ValueError(f"Unknown point version {version}")


def read_line(reader: TaggedBlockReader, version: int) -> Line:
    """Read a line from a LineItem block's value subblock."""
    tool_id = reader.read_int(1)
    color_id = reader.read_int(2)
    thickness_scale = reader.read_double(3)
    _starting_length = reader.read_float(4)

    points_length = reader.read_subblock(5)
    size = point_size(version)
    if points_length % size:
        raise ValueError(
            f"Point data length {points_length} is not a multiple of {size}"
        )
    points = [read_point(reader.stream, version) for _ in range(points_length // size)]

    # Timestamp is required but unused
    reader.read_id(6)

    try:
        pen = Pen(tool_id)
    except ValueError:
        pen = tool_id
    try:
        color = PenColor(color_id)
    except ValueError:
        color = color_id

    return Line(points=points, pen=pen, color=color, thickness_scale=thickness_scale)


def _read_line_item(reader: TaggedBlockReader, version: int) -> tuple[CrdtId, Optional[Line]]:
    """Return (parent id, line) for a LineItem block; line is None for tombstones."""
    parent_id = reader.read_id(1)
    _item_id = reader.read_id(2)
    _left_id = reader.read_id(3)
    _right_id = reader.read_id(4)
    deleted_length = reader.read_int(5)

    if deleted_length > 0 or not reader.has_subblock(6):
        return parent_id, None

    reader.read_subblock(6)
    item_type = reader.stream.read_uint8()
    if item_type != LINE_ITEM_TYPE:
        raise ValueError(f"Unexpected item type {item_type:#x} in line block")
    return parent_id, read_line(reader, version)


def decode_scene(data: BinaryIO) -> Scene:
    """
    Decode the block stream that follows the page header.

    Lines are grouped into one layer per parent group, layers ordered by
    the first line that references them. Raises ValueError or EOFError on
    corrupt data.
    """
    start = data.tell()
    size = data.seek(0, io.SEEK_END)
    data.seek(start)

    reader = TaggedBlockReader(data)
    layers: dict[CrdtId, Layer] = {}

    while True:
        header = reader.read_block_header()
        if header is None:
            break

        block_type, length, _min_version, current_version = header
        block_end = reader.begin_block(length)
        if block_end > size:
            raise EOFError(
                f"Block of type {block_type:#x} runs past end of data "
                f"({block_end} > {size})"
            )

        if block_type == BlockType.LineItem:
            parent_id, line = _read_line_item(reader, current_version)
            if line is not None:
                layer = layers.setdefault(parent_id, Layer(id=parent_id))
                layer.lines.append(line)

        reader.stream.seek(block_end)

    return Scene(layers=list(layers.values()))


def parse_file(path: Path) -> Scene:
    """Parse a whole .rm file, header included."""
    with open(path, "rb") as f:
        header = f.read(len(HEADER_V6))
        if header != HEADER_V6:
            raise ValueError(f"Invalid header: {header!r}")
        return decode_scene(f)
