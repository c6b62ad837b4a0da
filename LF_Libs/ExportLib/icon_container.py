"""
Multi-resolution ICO container.

Layout (all integers little-endian):

    Header, 6 bytes
        reserved   u16 = 0
        type       u16 = 1 (icon)
        count      u16
    Directory, 16 bytes per image
        width      u8  (0 means 256)
        height     u8  (0 means 256)
        colors     u8  = 0 (no palette)
        reserved   u8  = 0
        planes     u16 = 1
        bpp        u16 = 32
        size       u32 byte length of the image data
        offset     u32 absolute offset of the image data
    Image data, concatenated in directory order (PNG encoded)

Functions:
    build_icon_container: Assemble an ICO file from encoded frames
    read_icon_container: Parse the header and directory of an ICO file
"""

import struct
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from LF_Libs.constants import (
    ICO_BITS_PER_PIXEL,
    ICO_COLOR_PLANES,
    ICO_DIRECTORY_ENTRY_SIZE,
    ICO_HEADER_SIZE,
    ICO_MAX_DIMENSION,
    ICO_TYPE_ICON,
)

HEADER_FORMAT = "<HHH"
ENTRY_FORMAT = "<BBBBHHII"

# (width, height, encoded image bytes)
IconFrame = Tuple[int, int, bytes]


@dataclass(frozen=True)
class IconDirectoryEntry:
    """One parsed directory entry of an ICO file."""
    width: int
    height: int
    planes: int
    bits_per_pixel: int
    size: int
    offset: int


def _dimension_byte(value: int) -> int:
    if not (1 <= value <= ICO_MAX_DIMENSION):
        raise ValueError(f"ICO frame dimensions must be 1-{ICO_MAX_DIMENSION}, got {value}")
    return 0 if value == ICO_MAX_DIMENSION else value


def build_icon_container(frames: Sequence[IconFrame]) -> bytes:
    """
    Build an ICO file from already encoded frames.

    Args:
        frames: (width, height, data) per image, in directory order

    Returns:
        Complete ICO file bytes

    Raises:
        ValueError: If there are no frames, too many, or a dimension is out of range
    """
    if not frames:
        raise ValueError("An icon container needs at least one image")
    if len(frames) > 0xFFFF:
        raise ValueError(f"Too many images for an icon container: {len(frames)}")

    header = struct.pack(HEADER_FORMAT, 0, ICO_TYPE_ICON, len(frames))

    offset = ICO_HEADER_SIZE + ICO_DIRECTORY_ENTRY_SIZE * len(frames)
    directory = bytearray()
    for width, height, data in frames:
        directory += struct.pack(
            ENTRY_FORMAT,
            _dimension_byte(width),
            _dimension_byte(height),
            0,
            0,
            ICO_COLOR_PLANES,
            ICO_BITS_PER_PIXEL,
            len(data),
            offset,
        )
        offset += len(data)

    return header + bytes(directory) + b"".join(data for _, _, data in frames)


def read_icon_container(data: bytes) -> List[IconDirectoryEntry]:
    """
    Parse the directory of an ICO file.

    Returns:
        Directory entries with 0 dimensions expanded back to 256

    Raises:
        ValueError: If the data is not a well-formed icon container
    """
    if len(data) < ICO_HEADER_SIZE:
        raise ValueError("Data too short for an ICO header")

    reserved, kind, count = struct.unpack_from(HEADER_FORMAT, data, 0)
    if reserved != 0 or kind != ICO_TYPE_ICON:
        raise ValueError(f"Not an ICO file (reserved={reserved}, type={kind})")

    entries = []
    for index in range(count):
        position = ICO_HEADER_SIZE + index * ICO_DIRECTORY_ENTRY_SIZE
        if position + ICO_DIRECTORY_ENTRY_SIZE > len(data):
            raise ValueError(f"Truncated ICO directory at entry {index}")

        width, height, _, _, planes, bpp, size, offset = struct.unpack_from(
            ENTRY_FORMAT, data, position
        )
        if offset + size > len(data):
            raise ValueError(f"ICO entry {index} points past the end of the file")

        entries.append(IconDirectoryEntry(
            width=width or ICO_MAX_DIMENSION,
            height=height or ICO_MAX_DIMENSION,
            planes=planes,
            bits_per_pixel=bpp,
            size=size,
            offset=offset,
        ))
    return entries
