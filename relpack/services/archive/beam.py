"""Read and strip compiled BEAM modules.

A BEAM file is an IFF container:

    "FOR1" <u32 size> "BEAM" { <4-byte id> <u32 size> <data> <pad to 4> }*

All integers are big-endian and `size` counts everything after itself.
Stripping keeps the chunks the loader needs and drops debug info, docs,
abstract code and compile info. Files written by the compiler may be gzip
compressed; they are inflated before parsing and written back uncompressed.
"""

from __future__ import annotations

import gzip
import struct
import zlib
from dataclasses import dataclass
from pathlib import Path

from relpack.core.result import Err, Ok, Result

__all__ = [
    "BeamChunk",
    "BeamError",
    "SIGNIFICANT_CHUNKS",
    "build_beam",
    "parse_beam",
    "strip_beam",
    "strip_beam_file",
    "strip_beam_tree",
]

SIGNIFICANT_CHUNKS = frozenset(
    {"Atom", "AtU8", "Code", "StrT", "ImpT", "ExpT", "FunT", "LitT", "Line", "Type", "Meta"}
)

_GZIP_MAGIC = b"\x1f\x8b"
_HEADER = struct.Struct(">4sI4s")
_CHUNK_HEADER = struct.Struct(">4sI")


@dataclass(frozen=True, slots=True)
class BeamChunk:
    id: str
    data: bytes


@dataclass(frozen=True, slots=True)
class BeamError:
    path: Path | None
    reason: str

    def __str__(self) -> str:
        if self.path is None:
            return self.reason
        return f"{self.path}: {self.reason}"


def _pad4(n: int) -> int:
    return (4 - n % 4) % 4


def parse_beam(blob: bytes) -> Result[list[BeamChunk], BeamError]:
    """Split a BEAM container into its chunks, in file order."""
    if blob[:2] == _GZIP_MAGIC:
        try:
            blob = gzip.decompress(blob)
        except (OSError, EOFError, zlib.error) as e:
            return Err(BeamError(None, f"bad gzip data: {e}"))

    if len(blob) < _HEADER.size:
        return Err(BeamError(None, "not a beam file"))
    form, size, kind = _HEADER.unpack_from(blob, 0)
    if form != b"FOR1" or kind != b"BEAM":
        return Err(BeamError(None, "not a beam file"))

    end = 8 + size
    if end > len(blob):
        return Err(BeamError(None, f"truncated file (header says {end} bytes, got {len(blob)})"))

    chunks: list[BeamChunk] = []
    off = _HEADER.size
    while off < end:
        if off + _CHUNK_HEADER.size > end:
            return Err(BeamError(None, f"truncated chunk header at offset {off}"))
        raw_id, chunk_size = _CHUNK_HEADER.unpack_from(blob, off)
        off += _CHUNK_HEADER.size
        if off + chunk_size > end:
            return Err(BeamError(None, f"chunk {raw_id!r} overruns file at offset {off}"))
        try:
            chunk_id = raw_id.decode("ascii")
        except UnicodeDecodeError:
            return Err(BeamError(None, f"invalid chunk id {raw_id!r} at offset {off}"))
        chunks.append(BeamChunk(chunk_id, blob[off : off + chunk_size]))
        off += chunk_size + _pad4(chunk_size)

    return Ok(chunks)


def build_beam(chunks: list[BeamChunk]) -> bytes:
    """Serialize chunks back into a BEAM container."""
    body = bytearray(b"BEAM")
    for chunk in chunks:
        body += _CHUNK_HEADER.pack(chunk.id.encode("ascii"), len(chunk.data))
        body += chunk.data
        body += b"\0" * _pad4(len(chunk.data))
    return b"FOR1" + struct.pack(">I", len(body)) + bytes(body)


def strip_beam(blob: bytes) -> Result[bytes, BeamError]:
    """Return `blob` with only the significant chunks."""
    parsed = parse_beam(blob)
    if isinstance(parsed, Err):
        return parsed
    kept = [c for c in parsed.value if c.id in SIGNIFICANT_CHUNKS]
    if not any(c.id == "Code" for c in kept):
        return Err(BeamError(None, "missing Code chunk"))
    return Ok(build_beam(kept))


def strip_beam_file(path: Path) -> Result[Path, BeamError]:
    """Strip one module file in place."""
    try:
        blob = path.read_bytes()
    except OSError as e:
        return Err(BeamError(path, str(e)))

    stripped = strip_beam(blob)
    if isinstance(stripped, Err):
        return Err(BeamError(path, stripped.error.reason))

    try:
        path.write_bytes(stripped.value)
    except OSError as e:
        return Err(BeamError(path, str(e)))
    return Ok(path)


def strip_beam_tree(root: Path) -> Result[list[Path], BeamError]:
    """Strip every `lib/*/ebin/*.beam` under a release root.

    Stops at the first file that cannot be stripped; files already handled
    stay stripped.
    """
    if not root.is_dir():
        return Err(BeamError(root, "not a directory"))

    stripped: list[Path] = []
    for beam in sorted(root.glob("lib/*/ebin/*.beam")):
        if not beam.is_file():
            continue
        result = strip_beam_file(beam)
        if isinstance(result, Err):
            return result
        stripped.append(result.value)
    return Ok(stripped)
