"""Translation of sequence-style indices into absolute byte ranges."""
from typing import NamedTuple, Optional, Union

Index = Union[int, slice, range]


class NormalizedRange(NamedTuple):
    """Absolute ``(offset, length)`` pair derived from a sequence index."""

    offset: int
    length: int


def _absolute(file_size: int, position: int) -> int:
    return file_size + position if position < 0 else position


def normalize_index(
    file_size: int, index: Index, length: Optional[int] = None
) -> NormalizedRange:
    """Normalize an index against the current file size.

    Negative positions count from the end of the file. Ranges are
    half-open, so the closed range ``0..2`` is written ``slice(0, 3)``.
    Results are not clamped: an offset beyond the file is left for the
    calling operation to report.

    Args:
        file_size: Current size of the file in bytes
        index: Integer offset, ``slice`` or ``range``
        length: Explicit length (only valid with an integer offset)

    Returns:
        NormalizedRange for the requested span

    Raises:
        ValueError: If the range has a step other than 1
        TypeError: If the index type is not supported
    """
    if isinstance(index, (slice, range)):
        if length is not None:
            raise TypeError("explicit length is not allowed with a range index")
        if index.step not in (None, 1):
            raise ValueError(f"range step must be 1, got {index.step}")

        start = 0 if index.start is None else _absolute(file_size, index.start)
        stop = file_size if index.stop is None else _absolute(file_size, index.stop)
        return NormalizedRange(start, stop - start)

    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"index must be int, slice or range, not {type(index).__name__}")

    offset = _absolute(file_size, index)
    if length is None:
        length = file_size - offset
    return NormalizedRange(offset, length)
