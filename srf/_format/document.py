"""
Document model — the in-memory result of decoding an SRF container.

An ``SrfData`` maps resource identifiers to ``SrfResource`` objects, and
each resource maps item numbers to raw payload bytes. Both are built fresh
by the reader on every decode and belong to the caller afterwards.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Iterator

from srf._format.spec import DIRECTORY_OFFSET, encode_id


@dataclass(frozen=True)
class SrfHeader:
    """The fixed 12-byte file header."""

    magic: bytes
    file_length: int
    header_length: int

    @property
    def directory_end(self) -> int:
        """Absolute offset one past the last directory byte."""
        return DIRECTORY_OFFSET + self.header_length


@dataclass
class SrfResource:
    """A named group of numbered payloads."""

    id: str
    items: dict[int, bytes] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def raw_id(self) -> bytes:
        return encode_id(self.id)

    @property
    def item_numbers(self) -> list[int]:
        return sorted(self.items)

    @property
    def total_size(self) -> int:
        return sum(len(data) for data in self.items.values())


@dataclass
class SrfData:
    """Decoded container: resource identifier -> resource.

    ``header`` is the fixed header the container was decoded from; it does
    not take part in equality.

    Iteration yields identifiers in the order they first appeared in the
    directory. A later entry with the same identifier replaces the earlier
    resource but keeps its position.
    """

    resources: dict[str, SrfResource] = field(default_factory=dict)
    header: SrfHeader | None = field(default=None, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.resources)

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self.resources

    def __getitem__(self, resource_id: str) -> SrfResource:
        return self.resources[resource_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.resources)

    def get_item(self, resource_id: str, number: int) -> bytes | None:
        """Payload of one item, or None if the resource or item is absent."""
        resource = self.resources.get(resource_id)
        if resource is None:
            return None
        return resource.items.get(number)

    @property
    def item_count(self) -> int:
        return sum(len(r) for r in self.resources.values())

    @property
    def total_size(self) -> int:
        return sum(r.total_size for r in self.resources.values())

    def summary(self) -> list[dict[str, Any]]:
        """JSON-serializable listing of every resource and item."""
        out = []
        for resource in self.resources.values():
            out.append({
                "id": resource.id,
                "items": [
                    {
                        "number": number,
                        "size": len(resource.items[number]),
                        "sha256": hashlib.sha256(resource.items[number]).hexdigest(),
                    }
                    for number in resource.item_numbers
                ],
            })
        return out
