"""
SRF Container Format Specification — "srf1".

Layout (all integers unsigned 32-bit big-endian):
    0x00  magic          "srf1"
    0x04  file_length    total size of the file in bytes
    0x08  header_length  byte length of the resource directory
    0x0C  directory      resource entries, exactly header_length bytes

Resource entry (variable length, 8 + 12 * item_count bytes):
    +0    resource_id    4 raw bytes
    +4    item_count     number of item records that follow
    +8    item records   item_count x (item_number, item_offset, item_size)

Item payloads are addressed by absolute offset from the start of the file.
They may overlap each other, alias the directory, or sit anywhere in the file.
"""

from __future__ import annotations

import struct

from srf import SRF_DIRECTORY_OFFSET, SRF_MAGIC

MAGIC = SRF_MAGIC
DIRECTORY_OFFSET = SRF_DIRECTORY_OFFSET

HEADER_STRUCT = struct.Struct(">4sII")    # magic, file_length, header_length
RESOURCE_STRUCT = struct.Struct(">4sI")   # resource_id, item_count
ITEM_STRUCT = struct.Struct(">III")       # item_number, item_offset, item_size

RESOURCE_PREFIX_SIZE = RESOURCE_STRUCT.size  # 8
ITEM_RECORD_SIZE = ITEM_STRUCT.size          # 12

# Field offsets inside the fixed header
MAGIC_OFFSET = 0x00
FILE_LENGTH_OFFSET = 0x04
HEADER_LENGTH_OFFSET = 0x08

# Identifier encoding: latin-1 maps every byte to one code point and back
ID_ENCODING = "latin-1"


def entry_length(item_count: int) -> int:
    """Total byte length of a resource entry with ``item_count`` records."""
    return RESOURCE_PREFIX_SIZE + ITEM_RECORD_SIZE * item_count


def item_record_offset(entry_offset: int, index: int) -> int:
    """Absolute offset of the ``index``-th item record of an entry."""
    return entry_offset + RESOURCE_PREFIX_SIZE + ITEM_RECORD_SIZE * index


def decode_id(raw: bytes) -> str:
    """Turn 4 raw identifier bytes into text, losslessly."""
    return bytes(raw).decode(ID_ENCODING)


def encode_id(resource_id: str) -> bytes:
    """Inverse of :func:`decode_id`."""
    return resource_id.encode(ID_ENCODING)

