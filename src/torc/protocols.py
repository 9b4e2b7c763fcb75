"""Protocol definitions for core abstractions.

This module defines abstract interfaces (Protocols) for the seams through
which torc touches the host. Designing to interfaces enables:
- Loose coupling between lifecycle logic and the OS
- Scripted test doubles for every failure branch
- Clear contracts for implementations

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from torc.types import CommandResult


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for running external programs.

    A nonzero exit is a normal result, never an exception.
    """

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        privileged: bool = False,
    ) -> CommandResult:
        """Run a program to completion.

        Args:
            args: Program and arguments.
            cwd: Working directory, or None for the current one.
            privileged: Escalate privileges for this invocation.

        Returns:
            Merged output and exit status.
        """
        ...

    def run_shell(self, line: str, cwd: Path | None = None) -> CommandResult:
        """Run a script line through the platform shell.

        Args:
            line: Shell command line.
            cwd: Working directory, or None for the current one.

        Returns:
            Merged output and exit status.
        """
        ...

    def which(self, program: str) -> Path | None:
        """Locate a program on the search path.

        Args:
            program: Executable name.

        Returns:
            Full path, or None if not found.
        """
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem operations.

    Implementations wrap pathlib/shutil so tests can substitute a double.
    """

    def write_text(self, path: Path, content: str) -> None:
        """Write text content to a file."""
        ...

    def read_bytes(self, path: Path, size: int = -1) -> bytes:
        """Read up to size bytes from a file (all if negative)."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        ...

    def list_dir(self, path: Path) -> list[Path]:
        """List direct children of a directory, sorted by name."""
        ...

    def unlink(self, path: Path) -> None:
        """Remove a file."""
        ...

    def remove(self, path: Path) -> None:
        """Remove a file or directory tree."""
        ...

    def copytree(self, src: Path, dst: Path) -> None:
        """Copy a directory tree."""
        ...

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a single file with its metadata."""
        ...

    def move(self, src: Path, dst: Path) -> None:
        """Move a file, across filesystems if needed."""
        ...

    def make_executable(self, path: Path) -> None:
        """Add execute permission bits to a file."""
        ...


@runtime_checkable
class SourceRepository(Protocol):
    """Protocol for git repository operations."""

    def clone_fresh(self, url: str, dest: Path) -> Path:
        """Clone a repository, replacing any stale copy at dest.

        Args:
            url: Git repository URL.
            dest: Directory to clone into.

        Returns:
            Path to the clone.
        """
        ...

    def pull(self, path: Path) -> None:
        """Fetch and fast-forward an existing checkout.

        Args:
            path: Path to the local repository.
        """
        ...


@runtime_checkable
class ReleaseSource(Protocol):
    """Protocol for published CLI releases."""

    def latest_version(self) -> str | None:
        """Get the tag of the latest release.

        Returns:
            Tag name, or None if it could not be determined.
        """
        ...

    def asset_url(self, version: str, asset_name: str) -> str:
        """Build the download URL of a release asset."""
        ...

    def download(self, url: str, dest: Path) -> None:
        """Download a URL to a local file.

        Args:
            url: Asset URL.
            dest: Destination file path.
        """
        ...


@runtime_checkable
class Reporter(Protocol):
    """Protocol for user-facing progress output."""

    def show_info(self, message: str) -> None:
        """Report a step in progress."""
        ...

    def show_success(self, message: str) -> None:
        """Report a completed step."""
        ...

    def show_warning(self, message: str) -> None:
        """Report a non-fatal problem."""
        ...
