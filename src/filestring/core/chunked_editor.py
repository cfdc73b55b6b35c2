"""Chunked file editor for bounded-memory access to file-backed byte sequences."""
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from io import BytesIO
from itertools import zip_longest
from pathlib import Path
from re import Pattern
from typing import BinaryIO, Optional, Union

from .fallback import read_whole, write_whole

logger = logging.getLogger(__name__)

# Chunk unit for streaming scans; search windows use a multiple of it.
BLOCK_SIZE = 4096

BytesLike = Union[bytes, bytearray, memoryview]
BYTES_LIKE_TYPES = (bytes, bytearray, memoryview)
Needle = Union[BytesLike, int, Pattern]


def as_bytes(value: Union[BytesLike, int]) -> bytes:
    """Coerce a bytes-like object or a single byte value to ``bytes``."""
    if isinstance(value, int) and not isinstance(value, bool):
        return bytes([value])
    if isinstance(value, BYTES_LIKE_TYPES):
        return bytes(value)
    raise TypeError(f"a bytes-like object is required, not '{type(value).__name__}'")


def _scan_forward(f: BinaryIO, needle: bytes, read_size: int) -> Optional[int]:
    """Find ``needle`` from the current position using a two-chunk window.

    Returns the match offset relative to the starting position.
    """
    window = b""
    base = 0

    while True:
        chunk = f.read(read_size)
        if not chunk:
            return None

        window += chunk
        pos = window.find(needle)
        if pos != -1:
            return base + pos

        # Keep one chunk as the previous half of the window
        excess = len(window) - read_size
        if excess > 0:
            window = window[excess:]
            base += excess


def _scan_backward(f: BinaryIO, needle: bytes, read_size: int, end: int) -> Optional[int]:
    """Find the last ``needle`` inside ``[0, end)`` stepping toward the start."""
    window = b""
    start = end

    while start > 0:
        step = min(read_size, start)
        start -= step
        f.seek(start)
        window = f.read(step) + window

        pos = window.rfind(needle)
        if pos != -1:
            return start + pos

        window = window[:read_size]

    return None


def _last_match(pattern: Pattern, data: bytes) -> Optional[int]:
    """Start offset of the last position where ``pattern`` matches."""
    last = None
    pos = 0
    while pos <= len(data):
        match = pattern.search(data, pos)
        if match is None:
            break
        last = match.start()
        pos = last + 1
    return last


def _iter_chunks(f: BinaryIO, size: int) -> Iterator[bytes]:
    while True:
        chunk = f.read(size)
        if not chunk:
            return
        yield chunk


def _iter_slices(view: memoryview, size: int) -> Iterator[bytes]:
    for offset in range(0, len(view), size):
        yield view[offset : offset + size].tobytes()


class ChunkedFileEditor:
    """Byte-range editor over a file, working in bounded chunks.

    The editor keeps no state about the file content: every call stats
    the file, opens it, acts and closes it again. A missing file behaves
    as an empty sequence for reads and is created on the first write.

    No locking is performed. Callers that need several edits to be atomic
    must coordinate access themselves (see ``filestring.core.safety``).
    """

    def __init__(self, file_path: Union[str, Path], block_size: int = BLOCK_SIZE):
        """Initialize chunked editor.

        Args:
            file_path: Path to the file; resolved to an absolute path once
            block_size: Chunk unit for streaming operations
        """
        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")

        self.file_path = Path(os.path.abspath(os.path.expanduser(file_path)))
        self.block_size = block_size

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.file_path)!r}, block_size={self.block_size})"

    @contextmanager
    def _open_for_read(self) -> Iterator[BinaryIO]:
        """Open the file for reading; a missing file reads as empty."""
        try:
            f = open(self.file_path, "rb")
        except FileNotFoundError:
            f = BytesIO()

        with f:
            yield f

    @contextmanager
    def _open_for_update(self) -> Iterator[BinaryIO]:
        """Open the file for in-place writes, creating it if needed."""
        try:
            f = open(self.file_path, "r+b")
        except FileNotFoundError:
            f = open(self.file_path, "w+b")
            logger.info(f"Created {self.file_path}")

        with f:
            yield f

    def read_size(self, needle_length: int) -> int:
        """Smallest multiple of the block size that holds the needle."""
        blocks, remainder = divmod(needle_length, self.block_size)
        if remainder:
            blocks += 1
        return max(blocks, 1) * self.block_size

    def exists(self) -> bool:
        """Check whether the backing file exists."""
        return self.file_path.exists()

    def size(self) -> int:
        """Get file size (0 for a missing file)."""
        try:
            return self.file_path.stat().st_size
        except FileNotFoundError:
            return 0

    def delete(self) -> bool:
        """Remove the backing file.

        Returns:
            True if a file was deleted, False if there was none
        """
        try:
            os.remove(self.file_path)
        except FileNotFoundError:
            return False

        logger.info(f"Deleted {self.file_path}")
        return True

    def read_all(self) -> bytes:
        """Read the whole file (empty for a missing file)."""
        return read_whole(self.file_path)

    def write_all(self, data: BytesLike):
        """Replace the whole file content, creating the file if needed."""
        write_whole(self.file_path, as_bytes(data))

    def read(self, offset: int, length: int) -> Optional[bytes]:
        """Read bytes at a specific offset.

        Args:
            offset: Starting offset
            length: Number of bytes to read; fewer are returned at EOF

        Returns:
            Bytes read, ``b""`` at the end of the file, or None if the
            offset lies outside the file
        """
        file_size = self.size()

        if offset < 0 or length < 0 or offset > file_size:
            return None
        if offset == file_size:
            return b""

        with self._open_for_read() as f:
            f.seek(offset)
            return f.read(length)

    def write_range(self, offset: int, length: int, data: BytesLike):
        """Replace ``length`` bytes at ``offset`` with ``data``.

        Same-size replacements are written in place. Otherwise the bytes
        after the replaced span are buffered, rewritten after ``data`` and
        the file is truncated if it shrank.

        Args:
            offset: Start of the replaced span
            length: Number of bytes replaced
            data: Replacement bytes

        Raises:
            IndexError: If the offset lies outside the file
        """
        data = as_bytes(data)
        file_size = self.size()

        if offset < 0 or offset > file_size:
            raise IndexError(f"index {offset} out of file")
        if length < 0:
            raise IndexError(f"negative length {length}")

        length = min(length, file_size - offset)

        if len(data) == length:
            with self._open_for_update() as f:
                f.seek(offset)
                f.write(data)
            return

        with self._open_for_update() as f:
            f.seek(offset + length)
            tail = f.read()
            f.seek(offset)
            f.write(data)
            f.write(tail)
            if len(data) < length:
                f.truncate(file_size - length + len(data))

        logger.debug(
            f"Resized {self.file_path} at {offset}: {length} -> {len(data)} bytes, "
            f"rewrote {len(tail)} trailing bytes"
        )

    def append(self, data: Union[BytesLike, int]):
        """Append data to the end of the file, creating it if needed."""
        with open(self.file_path, "ab") as f:
            f.write(as_bytes(data))

    def count(self, sub: Union[BytesLike, int]) -> int:
        """Count non-overlapping occurrences of ``sub``."""
        return self.read_all().count(as_bytes(sub))

    def index(self, needle: Needle, offset: Optional[int] = None) -> Optional[int]:
        """Find the first occurrence of ``needle`` at or after ``offset``.

        Args:
            needle: Bytes, a single byte value or a compiled bytes pattern
            offset: Starting offset; negative values count from the end

        Returns:
            Absolute offset of the match, or None if not found
        """
        file_size = self.size()

        if offset is None:
            offset = 0
        elif offset < 0:
            offset += file_size
            if offset < 0:
                return None
        if offset > file_size:
            return None

        # Patterns cannot be split across chunks
        if isinstance(needle, Pattern):
            match = needle.search(read_whole(self.file_path, offset))
            return offset + match.start() if match else None

        needle = as_bytes(needle)
        if not needle:
            return offset

        read_size = self.read_size(len(needle))
        if file_size - offset <= read_size:
            pos = read_whole(self.file_path, offset).find(needle)
            return offset + pos if pos != -1 else None

        logger.debug(f"Chunked forward search in {self.file_path} from {offset}, window {read_size}")
        with self._open_for_read() as f:
            f.seek(offset)
            pos = _scan_forward(f, needle, read_size)

        return offset + pos if pos is not None else None

    def rindex(self, needle: Needle, upper_bound: Optional[int] = None) -> Optional[int]:
        """Find the last occurrence of ``needle`` lying within ``[0, upper_bound)``.

        Args:
            needle: Bytes, a single byte value or a compiled bytes pattern
            upper_bound: End of the searched region (None for end of file)

        Returns:
            Absolute offset of the match, or None if not found
        """
        file_size = self.size()

        if upper_bound is None or upper_bound > file_size:
            end = file_size
        elif upper_bound < 0:
            end = file_size + upper_bound
            if end < 0:
                return None
        else:
            end = upper_bound

        if isinstance(needle, Pattern):
            return _last_match(needle, read_whole(self.file_path, 0, end))

        needle = as_bytes(needle)
        if not needle:
            return end

        read_size = self.read_size(len(needle))
        if end <= 2 * read_size:
            pos = read_whole(self.file_path, 0, end).rfind(needle)
            return pos if pos != -1 else None

        logger.debug(f"Chunked backward search in {self.file_path} below {end}, window {read_size}")
        with self._open_for_read() as f:
            return _scan_backward(f, needle, read_size, end)

    def contains(self, needle: Needle) -> bool:
        """Check whether ``needle`` occurs anywhere in the file."""
        if isinstance(needle, Pattern):
            return needle.search(self.read_all()) is not None

        needle = as_bytes(needle)
        if not needle:
            return True

        read_size = self.read_size(len(needle))
        if self.size() <= read_size:
            return needle in self.read_all()

        with self._open_for_read() as f:
            return _scan_forward(f, needle, read_size) is not None

    def startswith(self, candidates: Union[BytesLike, tuple]) -> bool:
        """Check whether the file starts with any of ``candidates``.

        The head of the file is read lazily: the buffer only grows when a
        longer candidate still agrees with what has been read so far.
        """
        if not isinstance(candidates, tuple):
            candidates = (candidates,)
        candidates = [as_bytes(c) for c in candidates]

        file_size = self.size()
        if file_size == 0:
            return False

        with self._open_for_read() as f:
            buffer = b""
            for candidate in candidates:
                if (
                    len(buffer) < min(len(candidate), file_size)
                    and candidate.startswith(buffer)
                ):
                    buffer += f.read(len(candidate) - len(buffer))
                if buffer.startswith(candidate):
                    return True

        return False

    def endswith(self, candidates: Union[BytesLike, tuple]) -> bool:
        """Check whether the file ends with any of ``candidates``."""
        if not isinstance(candidates, tuple):
            candidates = (candidates,)
        candidates = [as_bytes(c) for c in candidates]

        file_size = self.size()
        if file_size == 0:
            return False

        with self._open_for_read() as f:
            buffer = b""
            for candidate in candidates:
                needed = min(len(candidate), file_size)
                if len(buffer) < needed and candidate.endswith(buffer):
                    f.seek(file_size - needed)
                    buffer = f.read(needed - len(buffer)) + buffer
                if buffer.endswith(candidate):
                    return True

        return False

    def compare(self, other: Union["ChunkedFileEditor", BytesLike]) -> int:
        """Compare lexicographically against another file or a bytes-like object.

        Both sides are streamed one block at a time and the first differing
        chunk pair decides.

        Returns:
            -1, 0 or 1
        """
        with self._open_for_read() as f:
            ours = _iter_chunks(f, self.block_size)

            if isinstance(other, ChunkedFileEditor):
                with other._open_for_read() as g:
                    return self._compare_chunks(ours, _iter_chunks(g, self.block_size))

            view = memoryview(other).cast("B")
            return self._compare_chunks(ours, _iter_slices(view, self.block_size))

    @staticmethod
    def _compare_chunks(ours: Iterator[bytes], theirs: Iterator[bytes]) -> int:
        for a, b in zip_longest(ours, theirs, fillvalue=b""):
            if a != b:
                return -1 if a < b else 1
        return 0

    def iter_chunks(self, size: Optional[int] = None) -> Iterator[bytes]:
        """Iterate over the file in chunks of ``size`` bytes (default block size)."""
        with self._open_for_read() as f:
            yield from _iter_chunks(f, size or self.block_size)
