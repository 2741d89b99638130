"""Release tarball packaging."""

from relpack.services.archive.archiver import ArchiveEnv, archive
from relpack.services.archive.codec import ArchiveCodec, TarCodec
from relpack.services.archive.runtime import RuntimeInfo, detect_runtime

__all__ = [
    "ArchiveCodec",
    "ArchiveEnv",
    "RuntimeInfo",
    "TarCodec",
    "archive",
    "detect_runtime",
]
