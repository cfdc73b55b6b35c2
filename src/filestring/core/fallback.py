"""Whole-file fallback for small spans and delegated transforms.

Anything that cannot be expressed as a chunked scan reads the relevant
region into memory and hands it to the native ``bytes``/``re`` primitives.
"""
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, BinaryIO, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


def read_whole(path: Union[str, Path], offset: int = 0, length: Optional[int] = None) -> bytes:
    """Read a region of a file into memory.

    Args:
        path: File to read
        offset: Starting offset
        length: Number of bytes (None for the rest of the file)

    Returns:
        The bytes read; a missing file reads as empty
    """
    try:
        with open(path, "rb") as f:
            if offset:
                f.seek(offset)
            return f.read() if length is None else f.read(length)
    except FileNotFoundError:
        return b""


def write_whole(path: Union[str, Path], data: bytes):
    """Replace the whole content of a file, creating it if needed."""
    with open(path, "wb") as f:
        f.write(data)


def transform(source: Any, func: Callable[..., T], *args) -> T:
    """Read the whole file, apply ``func`` and return its result.

    Args:
        source: Object with a ``read_all()`` method
        func: Function called as ``func(content, *args)``
    """
    return func(source.read_all(), *args)


def transform_inplace(target: T, func: Callable[..., bytes], *args) -> Optional[T]:
    """Read the whole file, apply ``func`` and write the result back.

    Args:
        target: Object with ``read_all()`` and ``write_all()`` methods
        func: Function called as ``func(content, *args)`` returning bytes

    Returns:
        ``target`` if the content changed, otherwise None
    """
    data = target.read_all()
    result = func(data, *args)
    if result == data:
        return None

    target.write_all(result)
    logger.debug(f"Rewrote {len(data)} -> {len(result)} bytes via {getattr(func, '__name__', func)}")
    return target


def stream(path: Union[str, Path], func: Callable[[BinaryIO], Iterator[T]]) -> Iterator[T]:
    """Iterate over ``func(handle)`` while keeping the file open.

    The handle is closed when the iterator is exhausted or closed. A
    missing file yields nothing.

    Args:
        path: File to open in binary mode
        func: Function turning the open handle into an iterator
    """
    try:
        f = open(path, "rb")
    except FileNotFoundError:
        return

    with f:
        yield from func(f)
