"""Core chunked file access modules."""

from .chunked_editor import BLOCK_SIZE, ChunkedFileEditor
from .fallback import read_whole, stream, transform, transform_inplace, write_whole
from .normalize import NormalizedRange, normalize_index
from .safety import FileStringLock, locked_edit

__all__ = [
    # Chunked access
    'BLOCK_SIZE',
    'ChunkedFileEditor',

    # Index normalization
    'NormalizedRange',
    'normalize_index',

    # Whole-file fallback
    'read_whole',
    'write_whole',
    'transform',
    'transform_inplace',
    'stream',

    # Opt-in locking
    'FileStringLock',
    'locked_edit',
]
