"""Runtime asset deployment and install-root cleanup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from torc.errors import DeployFailed
from torc.protocols import FileSystem

logger = logging.getLogger(__name__)

# (source relative to project root, destination relative to install root)
ASSETS: list[tuple[str, str]] = [
    ("web", "web"),
    ("admin", "admin"),
    ("menu.txt", "menu.txt"),
]

# Install-root entries holding user data; never deleted by cleanup
SESSIONS_DIR = "Sessions"
POPULAR_STATS = "popular.json"
PRESERVED_ASSETS = frozenset({SESSIONS_DIR, POPULAR_STATS})


@dataclass
class DeployResult:
    """Outcome of a deploy pass."""

    deployed: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    kept: list[Path] = field(default_factory=list)


class Deployer:
    """Copies web, admin and menu assets into the install root."""

    def __init__(
        self,
        install_root: Path,
        filesystem: FileSystem,
        assets: list[tuple[str, str]] | None = None,
    ) -> None:
        self.install_root = install_root
        self.fs = filesystem
        self.assets = assets if assets is not None else ASSETS

    def deploy(
        self, project_root: Path, keep_existing: frozenset[str] = frozenset()
    ) -> DeployResult:
        """Copy every asset, replacing what is already deployed.

        Missing sources are skipped. Entries of the install root that are not
        in the asset list are left alone.

        Args:
            project_root: Source tree to copy from.
            keep_existing: Destination names left untouched if already present.

        Returns:
            DeployResult listing deployed and kept destinations and skipped
            (missing) sources.

        Raises:
            DeployFailed: If any asset cannot be copied.
        """
        result = DeployResult()
        for source_name, dest_name in self.assets:
            source = project_root / source_name
            dest = self.install_root / dest_name

            if not self.fs.exists(source):
                logger.warning("Asset %s not found in %s, skipping", source_name, project_root)
                result.skipped.append(source_name)
                continue

            if dest_name in keep_existing and self.fs.exists(dest):
                logger.debug("Keeping existing %s", dest)
                result.kept.append(dest)
                continue

            try:
                if self.fs.is_dir(source):
                    self._copy_dir(source, dest)
                else:
                    self._copy_file(source, dest)
            except OSError as e:
                raise DeployFailed(f"Failed to copy {source_name}: {e}") from e

            logger.debug("Deployed %s -> %s", source, dest)
            result.deployed.append(dest)
        return result

    def _copy_dir(self, source: Path, dest: Path) -> None:
        if self.fs.exists(dest):
            self.fs.remove(dest)
        self.fs.copytree(source, dest)

    def _copy_file(self, source: Path, dest: Path) -> None:
        if self.fs.exists(dest):
            self.fs.remove(dest)
        self.fs.mkdir(dest.parent, parents=True, exist_ok=True)
        self.fs.copy_file(source, dest)


@dataclass
class CleanupResult:
    """Outcome of clearing the install root."""

    removed: list[str] = field(default_factory=list)
    kept: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def clear_install_root(root: Path, filesystem: FileSystem) -> CleanupResult:
    """Delete every direct child of root except the preserved assets.

    The root directory itself is kept because the preserved assets live in it.
    A failed deletion does not stop the pass; it is recorded in `failed`.

    Args:
        root: Install root.
        filesystem: Filesystem to operate on.

    Returns:
        CleanupResult with removed, kept and failed entry names.
    """
    result = CleanupResult()
    if not filesystem.exists(root):
        return result

    for entry in filesystem.list_dir(root):
        if entry.name in PRESERVED_ASSETS:
            result.kept.append(entry.name)
            continue
        try:
            filesystem.remove(entry)
            result.removed.append(entry.name)
        except OSError as e:
            logger.debug("Could not remove %s: %s", entry, e)
            result.failed.append(f"{entry.name}: {e}")
    return result
