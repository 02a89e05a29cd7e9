"""
Tests for source tree enumeration.
"""

import os
from pathlib import Path

import pytest

from flashpoint_packer.core.exceptions import SourceTreeError
from flashpoint_packer.packaging import SourceFileRef, list_tree


def build_tree(root: Path) -> None:
    (root / "b").mkdir(parents=True)
    (root / "b" / "inner.txt").write_text("inner")
    (root / "a.txt").write_text("a")
    (root / "c").mkdir()


class TestListTree:
    """Test depth-first listing."""

    def test_lexical_preorder(self, temp_dir: Path) -> None:
        """Test that directories precede their children in lexical order."""
        root = temp_dir / "root"
        build_tree(root)

        entries = list_tree(root)

        assert entries == [
            str(root) + os.sep,
            str(root / "a.txt"),
            str(root / "b") + os.sep,
            str(root / "b" / "inner.txt"),
            str(root / "c") + os.sep,
        ]

    def test_directories_marked(self, temp_dir: Path) -> None:
        """Test that directory entries parse as placeholders."""
        root = temp_dir / "root"
        build_tree(root)

        refs = [SourceFileRef.parse(e) for e in list_tree(root)]
        dirs = [Path(r.path).name for r in refs if r.is_dir]

        assert dirs == ["root", "b", "c"]

    def test_empty_root(self, temp_dir: Path) -> None:
        """Test that an empty root lists only itself."""
        root = temp_dir / "empty"
        root.mkdir()
        assert list_tree(root) == [str(root) + os.sep]

    def test_missing_root(self, temp_dir: Path) -> None:
        """Test that a missing root raises SourceTreeError."""
        with pytest.raises(SourceTreeError) as exc_info:
            list_tree(temp_dir / "nope")
        assert "does not exist" in exc_info.value.message
        assert exc_info.value.fatal

    def test_root_is_file(self, temp_dir: Path) -> None:
        """Test that a file root raises SourceTreeError."""
        path = temp_dir / "file.txt"
        path.write_text("x")
        with pytest.raises(SourceTreeError) as exc_info:
            list_tree(path)
        assert "not a directory" in exc_info.value.message


class TestSourceFileRef:
    """Test path string interpretation."""

    def test_plain_file(self) -> None:
        """Test a path without a trailing separator."""
        ref = SourceFileRef.parse("/data/file.txt")
        assert ref == SourceFileRef("/data/file.txt", is_dir=False)

    def test_directory_marker(self) -> None:
        """Test that a trailing separator marks a directory."""
        ref = SourceFileRef.parse("/data/dir/")
        assert ref.is_dir
        assert ref.path == "/data/dir"
