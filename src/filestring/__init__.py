"""File-backed byte strings with chunked, bounded-memory file access."""

from .core import (
    BLOCK_SIZE,
    ChunkedFileEditor,
    FileStringLock,
    NormalizedRange,
    locked_edit,
    normalize_index,
)
from .filestring import FileString

__version__ = "0.1.0"

__all__ = [
    # Public handle
    "FileString",
    # Core
    "BLOCK_SIZE",
    "ChunkedFileEditor",
    "NormalizedRange",
    "normalize_index",
    # Opt-in locking
    "FileStringLock",
    "locked_edit",
]
