"""
SRF reader — decode "srf1" resource containers into named resources of numbered blobs.

Architecture:
    Header:     "srf1" (4 bytes) + file length (u32 BE) + directory length (u32 BE)
    Directory:  resource entries at 0x0C, each id (4 bytes) + item count + 12-byte item records
    Payloads:   raw bytes addressed by absolute file offset, anywhere in the file
"""

__version__ = "0.1.0"

SRF_MAGIC = b"srf1"
SRF_MAGIC_TEXT = "srf1"
SRF_HEADER_SIZE = 12  # 4 (magic) + 4 (file length) + 4 (header length)
SRF_DIRECTORY_OFFSET = 0x0C

# Reader limits
SRF_MAX_FILE_SIZE = 256 * 1024 * 1024  # 256MB — whole file is buffered on decode
SRF_MAX_SIZE_ENV = "SRF_MAX_FILE_SIZE"

from srf._format.document import SrfData, SrfHeader, SrfResource  # noqa: E402
from srf._format.reader import (  # noqa: E402
    MalformedDirectoryError,
    MalformedHeaderError,
    SrfDecodeError,
    SrfReader,
    TruncatedDataError,
    decode,
)

__all__ = [
    "SrfData",
    "SrfHeader",
    "SrfResource",
    "SrfReader",
    "SrfDecodeError",
    "MalformedHeaderError",
    "TruncatedDataError",
    "MalformedDirectoryError",
    "decode",
]
