#!/usr/bin/env python3
"""Basic usage examples for the filestring library."""

import os
import re
import tempfile

from filestring import FileString, locked_edit


def editing_example(workspace: str):
    """Demonstrate reads and resizing writes."""
    print("=== Editing Example ===")

    fs = FileString.with_default(os.path.join(workspace, "greeting.txt"), b"hello world!")
    print(f"Content: {bytes(fs)!r}")
    print(f"fs[6:11] = {fs[6:11]!r}")

    # Shorter replacement: the tail is moved and the file truncated
    fs[6:11] = b"dude"
    fs.upper_inplace()
    print(f"After edit: {bytes(fs)!r} ({len(fs)} bytes)")

    fs.insert(0, b">> ")
    fs += b"\n"
    print(f"After insert/append: {bytes(fs)!r}")


def search_example(workspace: str):
    """Demonstrate chunked search on a larger file."""
    print("\n=== Search Example ===")

    data = b"x" * 100_000 + b"needle" + b"y" * 100_000
    fs = FileString.force(os.path.join(workspace, "haystack.bin"), data)

    print(f"File size: {len(fs)} bytes")
    print(f"index(b'needle') = {fs.index(b'needle')}")
    print(f"rindex(b'xn') = {fs.rindex(b'xn')}")
    print(f"b'needle' in fs: {b'needle' in fs}")
    print(f"startswith(b'xxx'): {fs.startswith(b'xxx')}")
    print(f"endswith((b'z', b'yyy')): {fs.endswith((b'z', b'yyy'))}")
    print(f"Regex index: {fs.index(re.compile(rb'n[e]+dle'))}")


def comparison_example(workspace: str):
    """Demonstrate streamed comparison."""
    print("\n=== Comparison Example ===")

    a = FileString.force(os.path.join(workspace, "a.txt"), b"apple")
    b = FileString.force(os.path.join(workspace, "b.txt"), b"banana")

    print(f"a < b: {a < b}")
    print(f"a == b'apple': {a == b'apple'}")
    print(f"a.compare(b): {a.compare(b)}")


def locking_example(workspace: str):
    """Demonstrate an explicit lock around a read-modify-write."""
    print("\n=== Locked Edit Example ===")

    counter = FileString.force(os.path.join(workspace, "counter.txt"), b"41")

    with locked_edit(counter) as fs:
        fs.overwrite(str(int(bytes(fs)) + 1).encode())

    print(f"Counter: {bytes(counter)!r}")


def main():
    """Run all examples."""
    with tempfile.TemporaryDirectory() as workspace:
        editing_example(workspace)
        search_example(workspace)
        comparison_example(workspace)
        locking_example(workspace)


if __name__ == "__main__":
    main()
