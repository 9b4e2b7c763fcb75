"""Compiles the server binary with the Go toolchain."""

from __future__ import annotations

import logging
from pathlib import Path

from torc.errors import BuildFailed, BuildSourceMissing, ToolchainNotFound
from torc.protocols import CommandRunner, FileSystem
from torc.types import CommandResult, PlatformProfile

logger = logging.getLogger(__name__)


class Builder:
    """Builds the server entry point into the profile's binary path."""

    def __init__(
        self,
        profile: PlatformProfile,
        runner: CommandRunner,
        filesystem: FileSystem,
        toolchain: str = "go",
        marker: str = "main.go",
    ) -> None:
        self.profile = profile
        self.runner = runner
        self.fs = filesystem
        self.toolchain = toolchain
        self.marker = marker

    def check_toolchain(self) -> Path:
        """Locate the toolchain on PATH.

        Raises:
            ToolchainNotFound: If the toolchain is not installed.
        """
        found = self.runner.which(self.toolchain)
        if found is None:
            raise ToolchainNotFound(
                f"{self.toolchain} is not installed or not in PATH. "
                "Install Go from https://go.dev/dl/"
            )
        return found

    def build(self, project_root: Path) -> CommandResult:
        """Compile the server.

        Args:
            project_root: Directory containing the build-entry marker.

        Returns:
            Result of the successful toolchain run.

        Raises:
            BuildSourceMissing: If the marker is not in project_root.
            ToolchainNotFound: If the toolchain is not installed.
            BuildFailed: If the toolchain exits nonzero. Its output is kept whole.
        """
        entry = project_root / self.marker
        if not self.fs.exists(entry):
            raise BuildSourceMissing(
                f"{self.marker} not found in project root (looked for {entry})"
            )

        toolchain = self.check_toolchain()
        args = [str(toolchain), "build", "-o", str(self.profile.binary_path), self.marker]
        logger.info("Building %s from %s", self.profile.binary_path, project_root)
        result = self.runner.run(args, cwd=project_root)
        if not result.ok:
            raise BuildFailed(
                f"{self.toolchain} build exited with status {result.exit_code}",
                output=result.output,
            )
        return result
