"""128-bit content hash over the encoded buffers and their format tags."""

from __future__ import annotations

import hashlib
import struct

from splatasset.core.contracts import FORMAT_VERSION, EncodingFormats


class Hash128:
    """Incremental 128-bit hash (MD5) with helpers for integer tags."""

    def __init__(self, *seed: int):
        self.hash = hashlib.md5()
        for value in seed:
            self.hash.update(struct.pack("<I", value & 0xFFFFFFFF))

    def append(self, data: bytes) -> None:
        self.hash.update(data)

    def append_int(self, value: int) -> None:
        self.hash.update(struct.pack("<i", value))

    def to_hex(self) -> str:
        return self.hash.hexdigest().lower()


def compute_content_hash(
    splat_count: int,
    formats: EncodingFormats,
    positions: bytes,
    other: bytes,
    color: bytes,
    sh: bytes,
) -> str:
    """Hash buffers in fixed order, each followed by the tag of its format."""
    data_hash = Hash128(splat_count, FORMAT_VERSION)
    for data, tag in (
        (positions, formats.pos),
        (other, formats.scale),
        (color, formats.color),
        (sh, formats.sh),
    ):
        data_hash.append(data)
        data_hash.append_int(int(tag))
    return data_hash.to_hex()
