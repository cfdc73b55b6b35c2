"""Tests for the FileString public handle."""
import os
import re
import tempfile
from pathlib import Path
from typing import Any

import pytest
from filestring import FileString
from hypothesis import given, settings
from hypothesis import strategies as st


class TestFileStringConstruction:
    """Test construction helpers and file-level operations."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = Path(self.temp_dir) / "string.txt"

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_new_performs_no_io(self) -> None:
        """Test that constructing a handle does not create the file."""
        fs = FileString(self.test_file)
        assert not self.test_file.exists()
        assert fs.path == self.test_file

    def test_path_resolved_once(self, monkeypatch: Any) -> None:
        """Test that a relative path is bound to the working directory at construction."""
        monkeypatch.chdir(self.temp_dir)
        fs = FileString("relative.txt")

        other_dir = Path(self.temp_dir) / "elsewhere"
        other_dir.mkdir()
        monkeypatch.chdir(other_dir)

        fs.overwrite(b"data")
        assert (Path(self.temp_dir) / "relative.txt").read_bytes() == b"data"
        assert not (other_dir / "relative.txt").exists()

    def test_force_replaces_content(self) -> None:
        """Test that force always writes the given content."""
        self.test_file.write_bytes(b"old content that is long")

        fs = FileString.force(self.test_file, b"new")
        assert self.test_file.read_bytes() == b"new"
        assert len(fs) == 3

    def test_force_without_content(self) -> None:
        """Test that force with no content is a plain handle."""
        fs = FileString.force(self.test_file)
        assert not fs.exists()

    def test_with_default(self) -> None:
        """Test that defaults are only written for missing files."""
        fs = FileString.with_default(self.test_file, b"default")
        assert self.test_file.read_bytes() == b"default"

        fs.overwrite(b"changed")
        FileString.with_default(self.test_file, b"default")
        assert self.test_file.read_bytes() == b"changed"

    def test_block_size_passed_through(self) -> None:
        """Test that configuration reaches the editor."""
        fs = FileString.force(self.test_file, b"x", block_size=16)
        assert fs.editor.block_size == 16

    def test_absent_file_behaves_as_empty(self) -> None:
        """Test absence-as-empty on the public handle."""
        fs = FileString(self.test_file)

        assert len(fs) == 0
        assert fs.empty()
        assert not fs
        assert fs.read(0) == b""
        assert fs.read(3) is None
        assert fs[0:10] == b""
        assert bytes(fs) == b""
        assert b"x" not in fs
        assert fs.delete_file() is False
        assert list(fs) == []
        assert fs == b""

    def test_delete_file(self) -> None:
        """Test deleting the backing file."""
        fs = FileString.force(self.test_file, b"data")

        assert fs.delete_file() is True
        assert not self.test_file.exists()
        assert fs.delete_file() is False

    def test_other_os_errors_propagate(self) -> None:
        """Test that errors other than a missing file are raised, not hidden."""
        directory = FileString(self.temp_dir)
        with pytest.raises(IsADirectoryError):
            bytes(directory)
        with pytest.raises(IsADirectoryError):
            directory.contains(b"x")
        with pytest.raises(OSError):
            directory.delete_file()
        assert Path(self.temp_dir).is_dir()

        self.test_file.write_bytes(b"data")
        nested = FileString(self.test_file / "child")
        with pytest.raises(NotADirectoryError):
            nested.size()
        with pytest.raises(NotADirectoryError):
            len(nested)

    def test_public_methods_documented(self) -> None:
        """Test that every public method carries a docstring."""
        undocumented = [
            name
            for name, member in vars(FileString).items()
            if not name.startswith("_") and callable(member) and not (member.__doc__ or "").strip()
        ]
        assert undocumented == []

    def test_repr(self) -> None:
        """Test the handle representation."""
        fs = FileString(self.test_file)
        assert repr(fs) == f"<FileString {str(self.test_file)!r}>"

    @given(content=st.binary(max_size=500))
    @settings(max_examples=50, deadline=None)
    def test_force_read_round_trip(self, content: bytes) -> None:
        """Property: force then read returns the same bytes."""
        fs = FileString.force(self.test_file, content)
        assert fs.read(0, len(content)) == content
        assert bytes(fs) == content


class TestFileStringIndexing:
    """Test reads, slice assignment and splicing."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = Path(self.temp_dir) / "string.txt"
        self.fs = FileString.force(self.test_file, b"HELLOWORLD!", block_size=4)

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_integer_index(self) -> None:
        """Test single byte access."""
        assert self.fs[0] == ord("H")
        assert self.fs[-1] == ord("!")

        with pytest.raises(IndexError):
            self.fs[11]
        with pytest.raises(IndexError):
            self.fs[-12]
        with pytest.raises(TypeError):
            self.fs["1"]

    def test_slices(self) -> None:
        """Test slice reads with bytes semantics."""
        assert self.fs[0:5] == b"HELLO"
        assert self.fs[5:] == b"WORLD!"
        assert self.fs[-6:-1] == b"WORLD"
        assert self.fs[:] == b"HELLOWORLD!"
        assert self.fs[20:30] == b""
        assert self.fs[5:2] == b""
        assert self.fs[::2] == b"HLOOL!"
        assert self.fs[::-1] == b"!DLROWOLLEH"

    def test_read_with_normalization(self) -> None:
        """Test read with offsets, lengths and ranges."""
        assert self.fs.read(5, 5) == b"WORLD"
        assert self.fs.read(5) == b"WORLD!"
        assert self.fs.read(-1) == b"!"
        assert self.fs.read(-6, 5) == b"WORLD"
        assert self.fs.read(slice(0, 3)) == b"HEL"
        assert self.fs.read(range(5, 10)) == b"WORLD"
        assert self.fs.read(11) == b""
        assert self.fs.read(12) is None

    def test_slice_assignment_shrink(self) -> None:
        """Test the HELLOWORLD! -> HELLODUDE! resize."""
        self.fs[5:10] = b"DUDE"
        assert self.test_file.read_bytes() == b"HELLODUDE!"
        assert len(self.fs) == 10

    def test_slice_assignment_grow(self) -> None:
        """Test a growing slice assignment."""
        fs = FileString.force(self.test_file, b"AB")
        fs[1:2] = b"XYZ"
        assert bytes(fs) == b"AXYZ"

    def test_slice_assignment_rules(self) -> None:
        """Test bytearray-like slice assignment edge cases."""
        self.fs[0] = b"J"
        assert bytes(self.fs) == b"JELLOWORLD!"

        self.fs[-1] = ord("?")
        assert bytes(self.fs) == b"JELLOWORLD?"

        # Reversed bounds insert at the start index
        self.fs[5:0] = b"_"
        assert bytes(self.fs) == b"JELLO_WORLD?"

        with pytest.raises(ValueError, match="step must be 1"):
            self.fs[::2] = b"x"

    def test_delitem(self) -> None:
        """Test deleting bytes and spans."""
        del self.fs[5:10]
        assert bytes(self.fs) == b"HELLO!"

        del self.fs[-1]
        assert bytes(self.fs) == b"HELLO"

    def test_splice(self) -> None:
        """Test splice with each accepted call shape."""
        self.fs.splice(5, 5, b"DUDE")
        assert bytes(self.fs) == b"HELLODUDE!"

        self.fs.splice(slice(0, 5), b"BYE")
        assert bytes(self.fs) == b"BYEDUDE!"

        # A bare offset replaces the rest of the file
        self.fs.splice(3, b".")
        assert bytes(self.fs) == b"BYE."

        self.fs.splice(-1, 1, b"!")
        assert bytes(self.fs) == b"BYE!"

    def test_splice_invalid_arguments(self) -> None:
        """Test that malformed splice calls fail before any I/O."""
        with pytest.raises(TypeError, match="wrong number of arguments"):
            self.fs.splice(b"x")
        with pytest.raises(TypeError, match=r"\(4 for 2..3\)"):
            self.fs.splice(0, 1, 2, b"x")

        assert bytes(self.fs) == b"HELLOWORLD!"

    def test_splice_out_of_bounds(self) -> None:
        """Test that splicing past the end fails."""
        with pytest.raises(IndexError, match="out of file"):
            self.fs.splice(12, 0, b"x")

    def test_insert(self) -> None:
        """Test insertion at start, middle and end."""
        self.fs.insert(5, b" ")
        assert bytes(self.fs) == b"HELLO WORLD!"

        self.fs.insert(0, b">")
        assert bytes(self.fs) == b">HELLO WORLD!"

        self.fs.insert(-1, b"<")
        assert bytes(self.fs) == b">HELLO WORLD!<"

        self.fs.insert(-2, b"!")
        assert bytes(self.fs) == b">HELLO WORLD!!<"

    def test_append(self) -> None:
        """Test append, concat and +=."""
        fs = FileString(Path(self.temp_dir) / "new.txt")

        fs.append(b"ab").concat(b"c")
        fs += ord("d")
        fs += b"ef"

        assert isinstance(fs, FileString)
        assert bytes(fs) == b"abcdef"

    def test_add_and_mul(self) -> None:
        """Test operators returning new bytes."""
        fs = FileString.force(self.test_file, b"ab")

        assert fs + b"cd" == b"abcd"
        assert fs * 3 == b"ababab"
        assert bytes(fs) == b"ab"


class TestFileStringSearch:
    """Test search delegation on the public handle."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = Path(self.temp_dir) / "search.txt"
        self.fs = FileString.force(
            self.test_file, b"one two three two one", block_size=4
        )

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_index_and_rindex(self) -> None:
        """Test forward and backward search."""
        assert self.fs.index(b"two") == 4
        assert self.fs.index(b"two", 5) == 14
        assert self.fs.index(b"four") is None
        assert self.fs.rindex(b"two") == 14
        assert self.fs.rindex(b"two", 14) == 4
        assert self.fs.rindex(b"one") == 18

    def test_contains(self) -> None:
        """Test membership."""
        assert b"three" in self.fs
        assert b"four" not in self.fs
        assert self.fs.contains(re.compile(rb"t\w+e"))

    def test_affixes(self) -> None:
        """Test startswith/endswith."""
        assert self.fs.startswith(b"one two")
        assert self.fs.startswith((b"two", b"one"))
        assert self.fs.endswith(b"two one")
        assert not self.fs.endswith(b"two")

    def test_count(self) -> None:
        """Test occurrence counting."""
        assert self.fs.count(b"two") == 2
        assert self.fs.count(b"o") == 4

    def test_large_file_search(self) -> None:
        """Test searches that take the chunked path with default blocks."""
        fs = FileString.force(
            Path(self.temp_dir) / "large.bin", b"a" * 10000 + b"XY" + b"b" * 10000
        )

        assert fs.index(b"XY") == 10000
        assert fs.rindex(b"XY") == 10000
        assert b"aXYb" in fs
        assert fs.startswith(b"a" * 5000)
        assert fs.endswith(b"Y" + b"b" * 10000)


class TestFileStringComparison:
    """Test comparison operators."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.file_a = Path(self.temp_dir) / "a.txt"
        self.file_b = Path(self.temp_dir) / "b.txt"

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_equality(self) -> None:
        """Test equality with files and bytes."""
        a = FileString.force(self.file_a, b"same")
        b = FileString.force(self.file_b, b"same")

        assert a == b
        assert a == b"same"
        assert a == bytearray(b"same")
        assert a == memoryview(b"same")
        assert a.compare(memoryview(b"samf")) == -1
        assert a + memoryview(b"!") == b"same!"
        assert a != b"other"
        assert a != b"sam"
        assert a == FileString(self.file_a)
        assert (a == "same") is False

    def test_ordering(self) -> None:
        """Test ordering operators."""
        a = FileString.force(self.file_a, b"apple")
        b = FileString.force(self.file_b, b"banana")

        assert a < b
        assert a <= b
        assert b > a
        assert b >= a
        assert a < b"apples"
        assert a > b"app"
        assert a >= b"apple"
        assert a.compare(b) == -1
        assert b.compare(a) == 1

        with pytest.raises(TypeError):
            a < "banana"

    def test_unhashable(self) -> None:
        """Test that file strings cannot be hashed."""
        a = FileString(self.file_a)
        with pytest.raises(TypeError):
            hash(a)

    @given(a=st.binary(max_size=50), b=st.binary(max_size=50))
    @settings(max_examples=100, deadline=None)
    def test_comparison_consistency(self, a: bytes, b: bytes) -> None:
        """Property: operators agree with in-memory bytes comparison."""
        fa = FileString.force(self.file_a, a, block_size=8)
        fb = FileString.force(self.file_b, b, block_size=8)

        assert (fa == fb) == (a == b)
        assert (fa < fb) == (a < b)
        assert (fa > b) == (a > b)
        assert fa.compare(b) == (a > b) - (a < b)


class TestFileStringTransforms:
    """Test delegated whole-file transforms."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = Path(self.temp_dir) / "transform.txt"
        self.fs = FileString.force(self.test_file, b"  hello World  \n")

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_read_only_transforms_leave_file(self) -> None:
        """Test that plain transforms return new bytes."""
        assert self.fs.upper() == b"  HELLO WORLD  \n"
        assert self.fs.lower() == b"  hello world  \n"
        assert self.fs.swapcase() == b"  HELLO wORLD  \n"
        assert self.fs.strip() == b"hello World"
        assert self.fs.lstrip() == b"hello World  \n"
        assert self.fs.rstrip() == b"  hello World"
        assert self.fs.chomp() == b"  hello World  "
        assert self.fs.chop() == b"  hello World  "
        assert self.fs.replace(b"o", b"0") == b"  hell0 W0rld  \n"
        assert self.fs.replace(b"o", b"0", 1) == b"  hell0 World  \n"
        assert self.fs.sub(rb"\s+", b" ") == b" hello World "
        assert self.fs.reverse() == b"\n  dlroW olleh  "
        assert self.fs.translate(None, b" ") == b"helloWorld\n"

        assert bytes(self.fs) == b"  hello World  \n"

    def test_inplace_transforms(self) -> None:
        """Test that in-place transforms write back and report changes."""
        assert self.fs.strip_inplace() is self.fs
        assert bytes(self.fs) == b"hello World"

        assert self.fs.upper_inplace() is self.fs
        assert bytes(self.fs) == b"HELLO WORLD"

        # No change reports None and leaves the file alone
        assert self.fs.upper_inplace() is None
        assert self.fs.strip_inplace() is None

        assert self.fs.capitalize_inplace() is self.fs
        assert bytes(self.fs) == b"Hello world"

        assert self.fs.replace_inplace(b"world", b"dude") is self.fs
        assert self.fs.sub_inplace(rb"^H", b"J") is self.fs
        assert bytes(self.fs) == b"Jello dude"

        assert self.fs.title_inplace() is self.fs
        assert self.fs.swapcase_inplace() is self.fs
        assert bytes(self.fs) == b"jELLO dUDE"

        assert self.fs.lower_inplace() is self.fs
        assert self.fs.reverse_inplace() is self.fs
        assert bytes(self.fs) == b"edud ollej"

    def test_inplace_line_endings(self) -> None:
        """Test chomp/chop/strip variants in place."""
        fs = FileString.force(self.test_file, b"xxline\r\n")

        assert fs.chomp_inplace() is fs
        assert bytes(fs) == b"xxline"
        assert fs.chomp_inplace() is None
        assert fs.chomp_inplace(b"ne") is fs
        assert fs.chop_inplace() is fs
        assert bytes(fs) == b"xxl"
        assert fs.lstrip_inplace(b"x") is fs
        assert fs.rstrip_inplace(b"l") is fs
        assert bytes(fs) == b""
        assert fs.translate_inplace(None, b"z") is None

    def test_chomp_variants(self) -> None:
        """Test the line-ending rules of chomp and chop."""
        for content, chomped in [
            (b"a\r\n", b"a"),
            (b"a\n", b"a"),
            (b"a\r", b"a"),
            (b"a\n\n", b"a\n"),
            (b"a", b"a"),
            (b"", b""),
        ]:
            self.fs.overwrite(content)
            assert self.fs.chomp() == chomped

        self.fs.overwrite(b"ab\r\n")
        assert self.fs.chop() == b"ab"
        self.fs.overwrite(b"")
        assert self.fs.chop() == b""

    def test_layout_and_split(self) -> None:
        """Test padding, splitting and partitioning."""
        fs = FileString.force(self.test_file, b"a,b,c")

        assert fs.center(9, b"*") == b"**a,b,c**"
        assert fs.ljust(7) == b"a,b,c  "
        assert fs.rjust(7, b"0") == b"00a,b,c"
        assert fs.split(b",") == [b"a", b"b", b"c"]
        assert fs.split(b",", 1) == [b"a", b"b,c"]
        assert fs.rsplit(b",", 1) == [b"a,b", b"c"]
        assert fs.partition(b",") == (b"a", b",", b"b,c")
        assert fs.rpartition(b",") == (b"a,b", b",", b"c")

    def test_patterns_and_conversions(self) -> None:
        """Test regular expression helpers and conversions."""
        fs = FileString.force(self.test_file, b"id=42 id=7\nend")

        assert fs.findall(rb"id=(\d+)") == [b"42", b"7"]
        assert fs.match(rb"id=(\d+)").group(1) == b"42"
        assert fs.match(rb"end") is None
        assert fs.search(rb"end").start() == 11
        assert fs.splitlines() == [b"id=42 id=7", b"end"]
        assert fs.hex() == b"id=42 id=7\nend".hex()
        assert fs.decode() == "id=42 id=7\nend"

    def test_transforms_on_missing_file(self) -> None:
        """Test transforms on a missing file."""
        fs = FileString(Path(self.temp_dir) / "missing.txt")

        assert fs.upper() == b""
        assert fs.split() == []
        assert fs.upper_inplace() is None
        assert not fs.exists()


class TestFileStringIteration:
    """Test streaming iteration."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = Path(self.temp_dir) / "lines.txt"
        self.fs = FileString.force(self.test_file, b"one\ntwo\r\nthree", block_size=4)

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_lines(self) -> None:
        """Test line iteration with and without line endings."""
        assert list(self.fs) == [b"one\n", b"two\r\n", b"three"]
        assert list(self.fs.lines(keepends=False)) == [b"one", b"two", b"three"]

    def test_lazy_iteration_keeps_file_open(self) -> None:
        """Test that a partially consumed iterator still works."""
        lines = self.fs.lines()
        assert next(lines) == b"one\n"
        assert next(lines) == b"two\r\n"
        lines.close()

    def test_chunks_and_bytes(self) -> None:
        """Test chunk and byte iteration."""
        assert list(self.fs.chunks()) == [b"one\n", b"two\r", b"\nthr", b"ee"]
        assert list(self.fs.chunks(8)) == [b"one\ntwo\r", b"\nthree"]
        assert bytes(self.fs.iter_bytes()) == b"one\ntwo\r\nthree"

    def test_iteration_sees_latest_content(self) -> None:
        """Test that nothing is cached between iterations."""
        assert list(self.fs) == [b"one\n", b"two\r\n", b"three"]

        with open(self.test_file, "ab") as f:
            f.write(b"\nfour")

        assert list(self.fs)[-1] == b"four"
        assert len(self.fs) == os.path.getsize(self.test_file)
