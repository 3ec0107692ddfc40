"""I/O utilities: 3DGS PLY header parser, record layout, asset dump."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np
from pydantic import BaseModel, ConfigDict

from splatasset.core.contracts import OutputAsset
from splatasset.core.errors import HeaderParseError, RecordSizeMismatch, SourceNotFound, SourceTooLarge

logger = logging.getLogger(__name__)

# Whole-file byte buffers are capped below 2 GiB.
MAX_FILE_SIZE = 2 * 1024 * 1024 * 1024

HEADER_SENTINEL = "end_header"
PROPERTY_SIZES = {"float": 4, "double": 8, "uchar": 1}

SH_COUNT = 15

# pos, normal, f_dc, f_rest (45), opacity, scale, rot: 62 little-endian floats.
INPUT_RECORD_DTYPE = np.dtype([
    ("pos", "<f4", (3,)),
    ("normal", "<f4", (3,)),
    ("dc0", "<f4", (3,)),
    ("sh", "<f4", (SH_COUNT, 3)),
    ("opacity", "<f4"),
    ("scale", "<f4", (3,)),
    ("rot", "<f4", (4,)),
])
RECORD_SIZE = INPUT_RECORD_DTYPE.itemsize
RECORD_FLOATS = RECORD_SIZE // 4


class PlyHeader(BaseModel):
    """Parsed PLY header: vertex count, per-record stride, attribute names."""

    model_config = ConfigDict(frozen=True)

    vertex_count: int
    vertex_stride: int
    attribute_names: list[str]
    header_size: int


# ── PLY reader ───────────────────────────────────────────────────────

def parse_ply_header(data: bytes) -> PlyHeader:
    """Parse the ASCII header at the start of ``data``.

    ``element vertex <N>`` sets the vertex count and every ``property <type> <name>``
    line adds the type's size to the stride. Only float, double and uchar
    properties are understood.

    Raises:
        SourceTooLarge: ``data`` is 2 GiB or larger.
        HeaderParseError: missing sentinel, malformed count, unknown property type,
            or a non binary_little_endian format line.
    """
    if len(data) >= MAX_FILE_SIZE:
        raise SourceTooLarge(f"PLY read error: files of 2GB or larger are not supported ({len(data)} bytes)")

    vertex_count = 0
    vertex_stride = 0
    attr_names: list[str] = []
    offset = 0
    line_no = 0

    while True:
        nl = data.find(b"\n", offset)
        if nl < 0:
            raise HeaderParseError(f"PLY header has no '{HEADER_SENTINEL}' line")
        try:
            line = data[offset:nl].decode("ascii").strip()
        except UnicodeDecodeError:
            raise HeaderParseError(f"Non-ASCII bytes in PLY header at line {line_no + 1}") from None
        offset = nl + 1
        line_no += 1

        if line_no == 1:
            if line != "ply":
                raise HeaderParseError(f"Not a PLY file (first line is '{line[:32]}')")
            continue
        if line == HEADER_SENTINEL:
            break

        tokens = line.split()
        if not tokens:
            continue
        if tokens[0] == "format":
            if len(tokens) < 2 or tokens[1] != "binary_little_endian":
                raise HeaderParseError(f"Unsupported PLY format: '{line}'")
        elif tokens[0] == "element" and len(tokens) >= 2 and tokens[1] == "vertex":
            if len(tokens) != 3:
                raise HeaderParseError(f"Malformed element line: '{line}'")
            try:
                vertex_count = int(tokens[2])
            except ValueError:
                raise HeaderParseError(f"Malformed vertex count: '{tokens[2]}'") from None
            if vertex_count < 0:
                raise HeaderParseError(f"Negative vertex count: {vertex_count}")
        elif tokens[0] == "property":
            if len(tokens) != 3 or tokens[1] not in PROPERTY_SIZES:
                raise HeaderParseError(f"Unsupported PLY property: '{line}'")
            vertex_stride += PROPERTY_SIZES[tokens[1]]
            attr_names.append(tokens[2])

    return PlyHeader(
        vertex_count=vertex_count,
        vertex_stride=vertex_stride,
        attribute_names=attr_names,
        header_size=offset,
    )


def read_ply_file(ply_path: Path, max_size: int = MAX_FILE_SIZE) -> tuple[PlyHeader, bytes]:
    """Read a PLY file and split it into header and raw vertex bytes.

    Returns:
        (header, body) where ``len(body) == vertex_count * vertex_stride``.
    """
    ply_path = Path(ply_path)
    if not ply_path.is_file():
        raise SourceNotFound(f"Did not find {ply_path} file")

    file_size = ply_path.stat().st_size
    if file_size >= max_size:
        raise SourceTooLarge(f"PLY read error: {ply_path.name} is {file_size} bytes, limit is {max_size}")

    data = ply_path.read_bytes()
    header = parse_ply_header(data)
    body = data[header.header_size:]

    expected = header.vertex_count * header.vertex_stride
    if len(body) != expected:
        raise RecordSizeMismatch(f"PLY read error, expected {expected} data bytes got {len(body)}")
    return header, body


# ── Asset dump ───────────────────────────────────────────────────────

def write_asset(asset: OutputAsset, output_dir: Path, asset_name: str) -> dict[str, Path]:
    """Write the four buffers as ``.bytes`` files plus a JSON descriptor."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    buffers = {
        "pos": asset.positions,
        "oth": asset.other,
        "col": asset.color,
        "shs": asset.sh,
    }
    paths: dict[str, Path] = {}
    for key, data in buffers.items():
        path = output_dir / f"{asset_name}_{key}.bytes"
        path.write_bytes(data)
        paths[key] = path
        logger.debug(f"Wrote {len(data)} bytes -> {path}")

    descriptor = asset.model_dump(mode="json", exclude={"positions", "other", "color", "sh"})
    descriptor["files"] = {key: path.name for key, path in paths.items()}
    descriptor_path = output_dir / f"{asset_name}.json"
    with open(descriptor_path, "w", encoding="utf-8") as f:
        json.dump(descriptor, f, indent=2)
    paths["descriptor"] = descriptor_path

    logger.info(f"Saved asset '{asset_name}' ({asset.splat_count} splats) -> {output_dir}")
    return paths
