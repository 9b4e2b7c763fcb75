"""Filesystem abstraction for testability.

This module provides a filesystem abstraction that enables testing
without real I/O operations. The RealFileSystem implementation
wraps standard library operations.
"""

from __future__ import annotations

import shutil
import stat
from pathlib import Path


class RealFileSystem:
    """Production filesystem implementation.

    Wraps standard library Path and shutil operations.
    Satisfies the FileSystem protocol structurally.
    """

    def write_text(self, path: Path, content: str) -> None:
        """Write text content to a file."""
        path.write_text(content, encoding="utf-8")

    def read_bytes(self, path: Path, size: int = -1) -> bytes:
        """Read up to size bytes from a file (all if negative)."""
        with path.open("rb") as handle:
            return handle.read(size)

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def list_dir(self, path: Path) -> list[Path]:
        """List direct children of a directory, sorted by name."""
        return sorted(path.iterdir())

    def unlink(self, path: Path) -> None:
        """Remove a file."""
        path.unlink()

    def remove(self, path: Path) -> None:
        """Remove a file or directory tree."""
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()

    def copytree(self, src: Path, dst: Path) -> None:
        """Copy a directory tree."""
        shutil.copytree(src, dst)

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a single file with its metadata."""
        shutil.copy2(src, dst)

    def move(self, src: Path, dst: Path) -> None:
        """Move a file, across filesystems if needed."""
        shutil.move(str(src), str(dst))

    def make_executable(self, path: Path) -> None:
        """Add execute permission bits to a file."""
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
