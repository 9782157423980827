"""
Reader — decoder for SRF containers.

The whole source is buffered once and the resource directory is walked with
bounds-checked slices over a memoryview:
  - Fixed header validated first (magic, declared length vs true size)
  - Each resource entry checked against the directory end before it is read
  - Each field and payload checked against the end of the source

Every violation raises at the point it is found; no partial result is
returned. The caller's file object is only read, never written or closed,
and its stream position is restored.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from struct import Struct
from typing import Any, BinaryIO, Union

from srf import SRF_MAGIC_TEXT, SRF_MAX_FILE_SIZE
from srf._format.document import SrfData, SrfHeader, SrfResource
from srf._format.spec import (
    DIRECTORY_OFFSET, FILE_LENGTH_OFFSET, HEADER_LENGTH_OFFSET,
    ITEM_STRUCT, MAGIC, MAGIC_OFFSET, RESOURCE_STRUCT, decode_id, entry_length,
    item_record_offset,
)

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


class SrfDecodeError(ValueError):
    """Base error for any SRF decoding failure."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        offset: int | None = None,
        expected: Any = None,
        actual: Any = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.offset = offset
        self.expected = expected
        self.actual = actual


class MalformedHeaderError(SrfDecodeError):
    """Bad magic, unreadable header field, or file length mismatch."""


class TruncatedDataError(SrfDecodeError):
    """A directory field or payload extends past the end of the source."""


class MalformedDirectoryError(SrfDecodeError):
    """Directory entries do not add up to the declared header length."""


class SrfReader:
    """
    SRF container decoder.

    Usage:
        data = SrfReader.read("textures.srf")

        with open("textures.srf", "rb") as f:
            data = SrfReader.decode(f)

        data = SrfReader.parse(raw_bytes)
    """

    def __init__(self, data: BytesLike) -> None:
        self._view = memoryview(data).cast("B")
        self._size = len(self._view)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    @staticmethod
    def is_srf(path: str | Path) -> bool:
        """Fast check if a file is an SRF container. Reads only the magic."""
        with open(path, "rb") as f:
            head = f.read(len(MAGIC))
        return head == MAGIC

    @staticmethod
    def is_srf_bytes(data: BytesLike) -> bool:
        """Fast check if bytes start with the SRF magic."""
        return bytes(data[:len(MAGIC)]) == MAGIC

    @classmethod
    def read(cls, path: str | Path, max_size: int = SRF_MAX_FILE_SIZE) -> SrfData:
        """Decode the SRF file at ``path``."""
        path = Path(path)
        file_size = path.stat().st_size
        _check_size(file_size, max_size)
        with open(path, "rb") as f:
            data = f.read()
        return cls.parse(data)

    @classmethod
    def decode(cls, source: BinaryIO | BytesLike, max_size: int = SRF_MAX_FILE_SIZE) -> SrfData:
        """Decode from a seekable binary file object or a bytes-like object."""
        if isinstance(source, (bytes, bytearray, memoryview)):
            _check_size(len(source), max_size)
            return cls.parse(source)
        return cls.parse(_buffer_source(source, max_size))

    @classmethod
    def parse(cls, data: BytesLike) -> SrfData:
        """Decode an in-memory SRF image."""
        return cls(data)._decode()

    @classmethod
    def read_header(cls, data: BytesLike) -> SrfHeader:
        """Validate and return only the fixed header."""
        return cls(data)._read_header()

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def _read_header(self) -> SrfHeader:
        (magic,) = self._header_field(">4s", MAGIC_OFFSET, "magic")
        if magic != MAGIC:
            raise MalformedHeaderError(
                f"Invalid magic: expected {SRF_MAGIC_TEXT!r}, got {magic!r}",
                field="magic", offset=MAGIC_OFFSET, expected=MAGIC, actual=magic,
            )

        (file_length,) = self._header_field(">I", FILE_LENGTH_OFFSET, "file_length")
        if file_length != self._size:
            raise MalformedHeaderError(
                f"File size is incorrect: header declares {file_length} bytes, "
                f"source has {self._size}",
                field="file_length", offset=FILE_LENGTH_OFFSET,
                expected=file_length, actual=self._size,
            )

        (header_length,) = self._header_field(">I", HEADER_LENGTH_OFFSET, "header_length")
        return SrfHeader(magic=magic, file_length=file_length, header_length=header_length)

    def _decode(self) -> SrfData:
        header = self._read_header()
        end = header.directory_end
        logger.debug(
            "SRF header: file_length=%d header_length=%d", header.file_length, header.header_length
        )

        resources: dict[str, SrfResource] = {}
        cursor = DIRECTORY_OFFSET
        while cursor != end:
            if cursor + RESOURCE_STRUCT.size > end:
                raise MalformedDirectoryError(
                    f"Resource entry at offset {cursor} does not fit in directory "
                    f"ending at {end}",
                    field="header_length", offset=cursor,
                    expected=end, actual=cursor + RESOURCE_STRUCT.size,
                )
            raw_id, item_count = self._unpack(RESOURCE_STRUCT, cursor, "resource entry")
            length = entry_length(item_count)
            if cursor + length > end:
                raise MalformedDirectoryError(
                    f"Resource entry at offset {cursor} with {item_count} item(s) "
                    f"spans {length} bytes, past directory end {end}",
                    field="item_count", offset=cursor,
                    expected=end, actual=cursor + length,
                )

            resource = SrfResource(id=decode_id(raw_id))
            logger.debug(
                "Resource %r at offset %d: %d item(s)", resource.id, cursor, item_count
            )
            for i in range(item_count):
                record = item_record_offset(cursor, i)
                number, offset, size = self._unpack(ITEM_STRUCT, record, "item record")
                resource.items[number] = self._payload(offset, size, resource.id, number)

            if resource.id in resources:
                logger.debug("Resource %r redefined at offset %d", resource.id, cursor)
            resources[resource.id] = resource
            cursor += length

        data = SrfData(resources=resources, header=header)
        logger.debug(
            "Decoded %d resource(s), %d item(s), %d payload byte(s)",
            len(data), data.item_count, data.total_size,
        )
        return data

    # ------------------------------------------------------------------
    # Bounds-checked access
    # ------------------------------------------------------------------

    def _header_field(self, fmt: str, offset: int, name: str) -> tuple:
        st = Struct(fmt)
        if offset + st.size > self._size:
            raise MalformedHeaderError(
                f"Failed to read {name}: needs bytes {offset}..{offset + st.size}, "
                f"source has {self._size}",
                field=name, offset=offset, expected=offset + st.size, actual=self._size,
            )
        return st.unpack_from(self._view, offset)

    def _unpack(self, st: Struct, offset: int, name: str) -> tuple:
        if offset + st.size > self._size:
            raise TruncatedDataError(
                f"Failed to read {name} at offset {offset}: needs {st.size} bytes, "
                f"{max(self._size - offset, 0)} available",
                field=name, offset=offset, expected=st.size,
                actual=max(self._size - offset, 0),
            )
        return st.unpack_from(self._view, offset)

    def _payload(self, offset: int, size: int, resource_id: str, number: int) -> bytes:
        if offset + size > self._size:
            raise TruncatedDataError(
                f"Failed to read item {number} of resource {resource_id!r}: "
                f"{size} bytes at offset {offset} extend past end of source ({self._size})",
                field="item_payload", offset=offset, expected=size,
                actual=max(self._size - offset, 0),
            )
        return bytes(self._view[offset:offset + size])


def _check_size(size: int, max_size: int) -> None:
    if size > max_size:
        raise ValueError(
            f"Input size {size} exceeds maximum {max_size} bytes. "
            f"Pass max_size= to override."
        )


def _buffer_source(source: BinaryIO, max_size: int) -> bytes:
    """Read a whole seekable source, leaving its position where it was."""
    start = source.tell()
    try:
        size = source.seek(0, io.SEEK_END)
        _check_size(size, max_size)
        source.seek(0, io.SEEK_SET)
        return source.read()
    finally:
        source.seek(start, io.SEEK_SET)


def decode(source: BinaryIO | BytesLike, max_size: int = SRF_MAX_FILE_SIZE) -> SrfData:
    """Decode an SRF container from a file object or bytes."""
    return SrfReader.decode(source, max_size=max_size)
