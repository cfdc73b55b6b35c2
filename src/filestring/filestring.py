"""File-backed byte string.

A ``FileString`` behaves like a mutable ``bytes`` object whose storage is
a file on disk::

    fs = FileString.with_default("greeting.txt", b"hello world!")
    fs[6:11]                # b"world"
    fs[6:11] = b"dude"
    fs.upper_inplace()
    bytes(fs)               # b"HELLO DUDE!"

Every operation goes straight to the file: nothing is cached between
calls, so the file may change underneath the handle at any time. A
missing file behaves as ``b""`` and is created by the first write.
No locking is done; see ``filestring.core.safety.locked_edit``.
"""
import logging
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Optional, Union

from .core import fallback
from .core.chunked_editor import BLOCK_SIZE, BYTES_LIKE_TYPES, BytesLike, ChunkedFileEditor, Needle
from .core.normalize import Index, normalize_index

logger = logging.getLogger(__name__)


def _chomp(data: bytes, suffix: Optional[bytes] = None) -> bytes:
    if suffix is not None:
        return data[: -len(suffix)] if suffix and data.endswith(suffix) else data

    for ending in (b"\r\n", b"\n", b"\r"):
        if data.endswith(ending):
            return data[: -len(ending)]
    return data


def _chop(data: bytes) -> bytes:
    if data.endswith(b"\r\n"):
        return data[:-2]
    return data[:-1]


def _reverse(data: bytes) -> bytes:
    return data[::-1]


def _sub(data: bytes, pattern, repl, count: int = 0) -> bytes:
    return re.sub(pattern, repl, data, count=count)


class FileString:
    """Mutable byte string stored in a file."""

    def __init__(self, path: Union[str, Path], block_size: int = BLOCK_SIZE):
        """Initialize file string.

        The file does not need to exist. The path is made absolute here and
        never re-resolved, even if the working directory changes.

        Args:
            path: Path of the backing file
            block_size: Chunk unit for streaming operations
        """
        self.editor = ChunkedFileEditor(path, block_size)

    @classmethod
    def force(cls, path: Union[str, Path], content: Optional[BytesLike] = None, **kwargs):
        """Create a file string whose file holds exactly ``content``.

        Any existing file is replaced. With ``content=None`` this is the
        same as the plain constructor.
        """
        file_string = cls(path, **kwargs)
        if content is not None:
            file_string.overwrite(content)
        return file_string

    @classmethod
    def with_default(cls, path: Union[str, Path], content: Optional[BytesLike] = None, **kwargs):
        """Create a file string, writing ``content`` only if the file is missing."""
        file_string = cls(path, **kwargs)
        if content is not None and not file_string.exists():
            file_string.overwrite(content)
            logger.info(f"Initialized {file_string.path} with {len(content)} default bytes")
        return file_string

    @property
    def path(self) -> Path:
        """Absolute path of the backing file."""
        return self.editor.file_path

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {str(self.path)!r}>"

    # File level

    def exists(self) -> bool:
        """Check whether the backing file exists."""
        return self.editor.exists()

    def delete_file(self) -> bool:
        """Remove the backing file; returns whether one was deleted."""
        return self.editor.delete()

    def size(self) -> int:
        """Size of the file in bytes; 0 when it does not exist."""
        return self.editor.size()

    def __len__(self) -> int:
        return self.editor.size()

    def empty(self) -> bool:
        """Check whether the file is missing or has no content."""
        return self.editor.size() == 0

    def read_all(self) -> bytes:
        """Read the whole file."""
        return self.editor.read_all()

    def write_all(self, data: BytesLike):
        """Replace the whole file content, creating the file if needed."""
        self.editor.write_all(data)

    def to_bytes(self) -> bytes:
        """Whole content as ``bytes``."""
        return self.editor.read_all()

    __bytes__ = to_bytes

    def overwrite(self, data: BytesLike) -> "FileString":
        """Replace the whole content of the file."""
        self.editor.write_all(data)
        return self

    # Indexing

    def _absolute_index(self, index: int) -> int:
        file_size = self.editor.size()
        position = index + file_size if index < 0 else index
        if not 0 <= position < file_size:
            raise IndexError("index out of range")
        return position

    def _slice_span(self, key: slice) -> tuple[int, int]:
        if key.step not in (None, 1):
            raise ValueError(f"slice step must be 1, got {key.step}")
        start, stop, _ = key.indices(self.editor.size())
        return start, max(stop - start, 0)

    def __getitem__(self, key: Union[int, slice]) -> Union[int, bytes]:
        if isinstance(key, slice):
            if key.step not in (None, 1):
                return self.editor.read_all()[key]
            return self.editor.read(*self._slice_span(key))

        if isinstance(key, int):
            return self.editor.read(self._absolute_index(key), 1)[0]

        raise TypeError(f"indices must be integers or slices, not {type(key).__name__}")

    def __setitem__(self, key: Union[int, slice], value: Union[BytesLike, int]):
        if isinstance(key, slice):
            self.editor.write_range(*self._slice_span(key), value)
        elif isinstance(key, int):
            self.editor.write_range(self._absolute_index(key), 1, value)
        else:
            raise TypeError(f"indices must be integers or slices, not {type(key).__name__}")

    def __delitem__(self, key: Union[int, slice]):
        self[key] = b""

    def read(self, index: Index, length: Optional[int] = None) -> Optional[bytes]:
        """Read a span addressed by offset/length or by a range.

        Unlike slicing, offsets are not clamped: an offset beyond the end
        of the file returns None.

        Args:
            index: Offset (negative counts from the end), ``slice`` or ``range``
            length: Number of bytes (default: up to the end of the file)

        Returns:
            The bytes read, or None if the span starts outside the file
        """
        offset, length = normalize_index(self.editor.size(), index, length)
        return self.editor.read(offset, length)

    def splice(self, *args) -> "FileString":
        """Replace a span with new data.

        Called as ``splice(index, data)`` or ``splice(offset, length, data)``
        where ``index`` is anything ``read`` accepts. A bare offset replaces
        everything up to the end of the file.

        Raises:
            TypeError: If called with the wrong number of arguments
            IndexError: If the span starts beyond the end of the file
        """
        if not 2 <= len(args) <= 3:
            raise TypeError(f"wrong number of arguments ({len(args)} for 2..3)")

        *index_args, data = args
        offset, length = normalize_index(self.editor.size(), *index_args)
        self.editor.write_range(offset, length, data)
        return self

    def insert(self, index: int, data: BytesLike) -> "FileString":
        """Insert ``data`` before ``index``; ``-1`` inserts at the very end."""
        if index < 0:
            index += self.editor.size() + 1
        return self.splice(index, 0, data)

    def append(self, data: Union[BytesLike, int]) -> "FileString":
        """Append bytes (or a single byte value) to the file."""
        self.editor.append(data)
        return self

    concat = append

    def __iadd__(self, data: Union[BytesLike, int]) -> "FileString":
        return self.append(data)

    def __add__(self, other: BytesLike) -> bytes:
        if not isinstance(other, BYTES_LIKE_TYPES):
            return NotImplemented
        return self.editor.read_all() + bytes(other)

    def __mul__(self, times: int) -> bytes:
        if not isinstance(times, int):
            return NotImplemented
        return self.editor.read_all() * times

    # Searching

    def index(self, needle: Needle, offset: Optional[int] = None) -> Optional[int]:
        """Offset of the first ``needle`` at or after ``offset``, or None."""
        return self.editor.index(needle, offset)

    def rindex(self, needle: Needle, upper_bound: Optional[int] = None) -> Optional[int]:
        """Offset of the last ``needle`` lying before ``upper_bound``, or None."""
        return self.editor.rindex(needle, upper_bound)

    def contains(self, needle: Needle) -> bool:
        """Check whether ``needle`` (bytes, a byte value or a compiled pattern) occurs."""
        return self.editor.contains(needle)

    __contains__ = contains

    def startswith(self, prefix: Union[BytesLike, tuple]) -> bool:
        """Check for any of the prefixes; an empty file never matches."""
        return self.editor.startswith(prefix)

    def endswith(self, suffix: Union[BytesLike, tuple]) -> bool:
        """Check for any of the suffixes; an empty file never matches."""
        return self.editor.endswith(suffix)

    def count(self, sub: Union[BytesLike, int]) -> int:
        """Count non-overlapping occurrences of ``sub``.

        Args:
            sub: Bytes or a single byte value

        Returns:
            Number of matches; the whole file is read
        """
        return self.editor.count(sub)

    # Comparison

    def compare(self, other: Union["FileString", BytesLike]) -> int:
        """Compare lexicographically; returns -1, 0 or 1."""
        if isinstance(other, FileString):
            return self.editor.compare(other.editor)
        return self.editor.compare(other)

    def _compare_or_none(self, other) -> Optional[int]:
        if isinstance(other, (FileString,) + BYTES_LIKE_TYPES):
            return self.compare(other)
        return None

    def __eq__(self, other) -> bool:
        if isinstance(other, FileString):
            if other.path == self.path:
                return True
            other_size = other.size()
        elif isinstance(other, BYTES_LIKE_TYPES):
            other_size = memoryview(other).nbytes
        else:
            return NotImplemented

        if self.editor.size() != other_size:
            return False
        return self.compare(other) == 0

    def __lt__(self, other) -> bool:
        cmp = self._compare_or_none(other)
        return NotImplemented if cmp is None else cmp < 0

    def __le__(self, other) -> bool:
        cmp = self._compare_or_none(other)
        return NotImplemented if cmp is None else cmp <= 0

    def __gt__(self, other) -> bool:
        cmp = self._compare_or_none(other)
        return NotImplemented if cmp is None else cmp > 0

    def __ge__(self, other) -> bool:
        cmp = self._compare_or_none(other)
        return NotImplemented if cmp is None else cmp >= 0

    # Content changes on every edit
    __hash__ = None

    # Iteration

    def lines(self, keepends: bool = True) -> Iterator[bytes]:
        """Iterate over lines, keeping the file open while iterating."""
        if keepends:
            return fallback.stream(self.path, iter)
        return fallback.stream(self.path, lambda f: (_chomp(line) for line in f))

    def chunks(self, size: Optional[int] = None) -> Iterator[bytes]:
        """Iterate over the content in chunks (default: the block size)."""
        return self.editor.iter_chunks(size)

    def iter_bytes(self) -> Iterator[int]:
        """Iterate over single byte values."""
        for chunk in self.editor.iter_chunks():
            yield from chunk

    def __iter__(self) -> Iterator[bytes]:
        return self.lines()

    # Transforms returning a new value; the file is left untouched

    def upper(self) -> bytes:
        """Content with ASCII letters uppercased."""
        return fallback.transform(self, bytes.upper)

    def lower(self) -> bytes:
        """Content with ASCII letters lowercased."""
        return fallback.transform(self, bytes.lower)

    def capitalize(self) -> bytes:
        """Content with the first byte uppercased and the rest lowercased."""
        return fallback.transform(self, bytes.capitalize)

    def swapcase(self) -> bytes:
        """Content with the case of ASCII letters swapped."""
        return fallback.transform(self, bytes.swapcase)

    def title(self) -> bytes:
        """Titlecased content."""
        return fallback.transform(self, bytes.title)

    def strip(self, chars: Optional[bytes] = None) -> bytes:
        """Content without leading and trailing ``chars`` (whitespace by default)."""
        return fallback.transform(self, bytes.strip, chars)

    def lstrip(self, chars: Optional[bytes] = None) -> bytes:
        """Content without leading ``chars``."""
        return fallback.transform(self, bytes.lstrip, chars)

    def rstrip(self, chars: Optional[bytes] = None) -> bytes:
        """Content without trailing ``chars``."""
        return fallback.transform(self, bytes.rstrip, chars)

    def chomp(self, suffix: Optional[bytes] = None) -> bytes:
        """Content without a trailing line ending (or ``suffix``)."""
        return fallback.transform(self, _chomp, suffix)

    def chop(self) -> bytes:
        """Content without its last byte (or trailing CRLF)."""
        return fallback.transform(self, _chop)

    def reverse(self) -> bytes:
        """Content with its bytes in reverse order."""
        return fallback.transform(self, _reverse)

    def translate(self, table: Optional[bytes], delete: bytes = b"") -> bytes:
        """Content mapped through ``table`` with ``delete`` bytes removed."""
        return fallback.transform(self, bytes.translate, table, delete)

    def replace(self, old: bytes, new: bytes, count: int = -1) -> bytes:
        """Content with ``old`` replaced by ``new``."""
        return fallback.transform(self, bytes.replace, old, new, count)

    def sub(self, pattern, repl, count: int = 0) -> bytes:
        """Content with regular expression matches substituted."""
        return fallback.transform(self, _sub, pattern, repl, count)

    def center(self, width: int, fillbyte: bytes = b" ") -> bytes:
        """Content centered in a field of ``width`` bytes."""
        return fallback.transform(self, bytes.center, width, fillbyte)

    def ljust(self, width: int, fillbyte: bytes = b" ") -> bytes:
        """Content left-justified in a field of ``width`` bytes."""
        return fallback.transform(self, bytes.ljust, width, fillbyte)

    def rjust(self, width: int, fillbyte: bytes = b" ") -> bytes:
        """Content right-justified in a field of ``width`` bytes."""
        return fallback.transform(self, bytes.rjust, width, fillbyte)

    def split(self, sep: Optional[bytes] = None, maxsplit: int = -1) -> list[bytes]:
        """Split the content on ``sep``."""
        return fallback.transform(self, bytes.split, sep, maxsplit)

    def rsplit(self, sep: Optional[bytes] = None, maxsplit: int = -1) -> list[bytes]:
        """Split the content on ``sep``, from the right."""
        return fallback.transform(self, bytes.rsplit, sep, maxsplit)

    def splitlines(self, keepends: bool = False) -> list[bytes]:
        """Content split into lines."""
        return fallback.transform(self, bytes.splitlines, keepends)

    def partition(self, sep: bytes) -> tuple[bytes, bytes, bytes]:
        """Split around the first ``sep``."""
        return fallback.transform(self, bytes.partition, sep)

    def rpartition(self, sep: bytes) -> tuple[bytes, bytes, bytes]:
        """Split around the last ``sep``."""
        return fallback.transform(self, bytes.rpartition, sep)

    def findall(self, pattern) -> list:
        """All matches of a regular expression over the content."""
        return fallback.transform(self, lambda data: re.findall(pattern, data))

    def match(self, pattern) -> Optional[re.Match]:
        """Match a regular expression at the start of the content."""
        return fallback.transform(self, lambda data: re.match(pattern, data))

    def search(self, pattern) -> Optional[re.Match]:
        """First match of a regular expression anywhere in the content."""
        return fallback.transform(self, lambda data: re.search(pattern, data))

    def hex(self) -> str:
        """Hexadecimal rendering of the content."""
        return fallback.transform(self, bytes.hex)

    def decode(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        """Content decoded to ``str``."""
        return fallback.transform(self, bytes.decode, encoding, errors)

    # In-place transforms: return self if the file changed, None otherwise

    def upper_inplace(self) -> Optional["FileString"]:
        """Uppercase the file."""
        return fallback.transform_inplace(self, bytes.upper)

    def lower_inplace(self) -> Optional["FileString"]:
        """Lowercase the file."""
        return fallback.transform_inplace(self, bytes.lower)

    def capitalize_inplace(self) -> Optional["FileString"]:
        """Capitalize the file."""
        return fallback.transform_inplace(self, bytes.capitalize)

    def swapcase_inplace(self) -> Optional["FileString"]:
        """Swap the case of the file."""
        return fallback.transform_inplace(self, bytes.swapcase)

    def title_inplace(self) -> Optional["FileString"]:
        """Titlecase the file."""
        return fallback.transform_inplace(self, bytes.title)

    def strip_inplace(self, chars: Optional[bytes] = None) -> Optional["FileString"]:
        """Strip the file at both ends."""
        return fallback.transform_inplace(self, bytes.strip, chars)

    def lstrip_inplace(self, chars: Optional[bytes] = None) -> Optional["FileString"]:
        """Strip the start of the file."""
        return fallback.transform_inplace(self, bytes.lstrip, chars)

    def rstrip_inplace(self, chars: Optional[bytes] = None) -> Optional["FileString"]:
        """Strip the end of the file."""
        return fallback.transform_inplace(self, bytes.rstrip, chars)

    def chomp_inplace(self, suffix: Optional[bytes] = None) -> Optional["FileString"]:
        """Remove a trailing line ending (or ``suffix``) from the file."""
        return fallback.transform_inplace(self, _chomp, suffix)

    def chop_inplace(self) -> Optional["FileString"]:
        """Remove the last byte (or trailing CRLF) from the file."""
        return fallback.transform_inplace(self, _chop)

    def reverse_inplace(self) -> Optional["FileString"]:
        """Reverse the bytes of the file."""
        return fallback.transform_inplace(self, _reverse)

    def translate_inplace(self, table: Optional[bytes], delete: bytes = b"") -> Optional["FileString"]:
        """Map the file through ``table``."""
        return fallback.transform_inplace(self, bytes.translate, table, delete)

    def replace_inplace(self, old: bytes, new: bytes, count: int = -1) -> Optional["FileString"]:
        """Replace ``old`` with ``new`` throughout the file.

        Args:
            old: Bytes to look for
            new: Replacement bytes
            count: Maximum number of replacements, -1 for all

        Returns:
            This file string if the file changed, None otherwise
        """
        return fallback.transform_inplace(self, bytes.replace, old, new, count)

    def sub_inplace(self, pattern, repl, count: int = 0) -> Optional["FileString"]:
        """Substitute regular expression matches in the file."""
        return fallback.transform_inplace(self, _sub, pattern, repl, count)
