"""CLI self-update with backup, swap and restore.

The installed CLI is only ever renamed aside, never deleted, until its
replacement is in place. A failed swap moves the backup back, so the host
always keeps a working binary.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from torc.errors import DownloadFailed, SwapFailed, VerificationFailed
from torc.profile import release_platform
from torc.protocols import CommandRunner, FileSystem, ReleaseSource
from torc.types import PlatformProfile

logger = logging.getLogger(__name__)

# Leading bytes of ELF and Mach-O (thin and universal) executables
EXECUTABLE_MAGIC = (
    b"\x7fELF",
    b"\xfe\xed\xfa\xce",
    b"\xce\xfa\xed\xfe",
    b"\xfe\xed\xfa\xcf",
    b"\xcf\xfa\xed\xfe",
    b"\xca\xfe\xba\xbe",
)


def is_executable_image(header: bytes) -> bool:
    """Check whether file header bytes look like a native executable.

    Args:
        header: At least the first four bytes of the file.

    Returns:
        True for ELF or Mach-O images.
    """
    return any(header.startswith(magic) for magic in EXECUTABLE_MAGIC)


class CliUpdater:
    """Replaces the installed torc CLI with the latest release."""

    def __init__(
        self,
        profile: PlatformProfile,
        runner: CommandRunner,
        filesystem: FileSystem,
        releases: ReleaseSource,
        scratch_dir: Path,
        machine: str | None = None,
    ) -> None:
        self.profile = profile
        self.runner = runner
        self.fs = filesystem
        self.releases = releases
        self.scratch_dir = scratch_dir
        self.machine = machine

    @property
    def target(self) -> Path:
        """Installed CLI binary."""
        return self.profile.cli_binary_path

    @property
    def backup_path(self) -> Path:
        """Where the installed CLI is parked during the swap."""
        return self.target.with_name(f"{self.target.name}.backup")

    @property
    def asset_name(self) -> str:
        """Release asset for this host."""
        return f"torc-{release_platform(self.profile, self.machine)}"

    def update(self) -> str:
        """Download, verify and install the latest CLI.

        Returns:
            The installed release tag.

        Raises:
            DownloadFailed: If the release cannot be found or fetched.
            VerificationFailed: If the download is not an executable image.
            SwapFailed: If the new binary cannot be put in place. The previous
                binary has been restored when this is raised.
        """
        version = self.releases.latest_version()
        if not version:
            raise DownloadFailed("Could not determine latest version")

        url = self.releases.asset_url(version, self.asset_name)
        logger.info("Latest version %s, downloading %s", version, url)

        self.fs.mkdir(self.scratch_dir, parents=True, exist_ok=True)
        candidate = self.scratch_dir / f"torc-update-{uuid.uuid4().hex}"
        try:
            self.releases.download(url, candidate)
            self._verify(candidate)
            self._swap(candidate)
        finally:
            self._discard(candidate)
        return version

    def _verify(self, candidate: Path) -> None:
        try:
            self.fs.make_executable(candidate)
            header = self.fs.read_bytes(candidate, 4)
        except OSError as e:
            raise VerificationFailed(f"Cannot inspect downloaded file: {e}") from e
        if not is_executable_image(header):
            raise VerificationFailed("Downloaded file doesn't appear to be a valid binary")

    def _swap(self, candidate: Path) -> None:
        backup: Path | None = None
        if self.fs.exists(self.target):
            self._discard(self.backup_path)
            self._move(self.target, self.backup_path)
            backup = self.backup_path

        try:
            self._move(candidate, self.target)
        except SwapFailed as e:
            if backup is not None:
                self._restore(backup, e)
            raise

        if backup is not None:
            self._discard(backup)

    def _restore(self, backup: Path, cause: SwapFailed) -> None:
        try:
            self._move(backup, self.target)
        except SwapFailed as restore_error:
            raise SwapFailed(
                f"{cause} Restoring the previous binary also failed; "
                f"it is still at {backup}",
                output="\n".join(filter(None, [cause.output, restore_error.output])),
            ) from restore_error
        logger.info("Restored previous CLI from %s", backup)

    def _move(self, src: Path, dst: Path) -> None:
        """Move without privileges first, escalating only on failure."""
        try:
            self.fs.move(src, dst)
            return
        except OSError as e:
            logger.debug("Unprivileged move %s -> %s failed: %s", src, dst, e)

        result = self.runner.run(["mv", str(src), str(dst)], privileged=True)
        if not result.ok:
            raise SwapFailed(
                f"Failed to move {src} to {dst} (may need sudo).",
                output=result.output,
            )

    def _discard(self, path: Path) -> None:
        if not self.fs.exists(path):
            return
        try:
            self.fs.unlink(path)
        except OSError as e:
            logger.debug("Unprivileged removal of %s failed: %s", path, e)
            result = self.runner.run(["rm", "-f", str(path)], privileged=True)
            if not result.ok:
                logger.warning("Could not remove %s: %s", path, result.output)
