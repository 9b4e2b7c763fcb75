"""Source checkout location and git operations."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from torc.errors import SourceUnavailable

logger = logging.getLogger(__name__)

# Default branches to try when cloning
DEFAULT_BRANCHES = ["main", "master"]

# File whose presence marks a directory as the server's source root
BUILD_MARKER = "main.go"


class GitOpsError(Exception):
    """Error during git operations."""

    pass


def find_project_root(start_path: Path | None = None, marker: str = BUILD_MARKER) -> Path | None:
    """Find nearest directory containing the build-entry marker.

    Args:
        start_path: Starting directory. Defaults to cwd.
        marker: File name identifying the source root.

    Returns:
        Path to project root or None if no ancestor has the marker.
    """
    path = start_path or Path.cwd()
    # Resolve to handle symlinks and get absolute path
    path = path.resolve()
    while path != path.parent:
        if (path / marker).is_file():
            return path
        path = path.parent
    # Check root directory as well
    if (path / marker).is_file():
        return path
    return None


class GitOps:
    """Clones and refreshes server source checkouts."""

    def __init__(self, branches: list[str] | None = None) -> None:
        """Initialize git operations manager.

        Args:
            branches: Branches to try, in order, when cloning.
        """
        self.branches = branches or DEFAULT_BRANCHES.copy()

    def clone_fresh(self, url: str, dest: Path) -> Path:
        """Clone a repository into dest, replacing any stale copy.

        A leftover directory from an earlier failed attempt is removed first
        so retries start clean.

        Args:
            url: Git repository URL.
            dest: Directory to clone into.

        Returns:
            Path to the clone.

        Raises:
            SourceUnavailable: If every branch attempt fails.
        """
        self._cleanup(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)

        last_error: GitCommandError | None = None
        for branch in self.branches:
            try:
                return self._try_clone(url, dest, branch)
            except GitCommandError as e:
                last_error = e
                logger.debug("Clone failed with branch '%s': %s", branch, e)
                self._cleanup(dest)

        output = str(last_error) if last_error else ""
        raise SourceUnavailable(f"Failed to clone {url}", output=output)

    def _try_clone(self, url: str, path: Path, ref: str) -> Path:
        """Attempt to clone with a specific branch.

        Args:
            url: Git repository URL.
            path: Local path for the clone.
            ref: Branch to checkout.

        Returns:
            Path to the clone.
        """
        Repo.clone_from(url, path, branch=ref, depth=1)
        logger.debug("Successfully cloned %s with branch '%s'", url, ref)
        return path

    def _cleanup(self, path: Path) -> None:
        """Remove a clone directory if present.

        Args:
            path: Path to clean up.
        """
        if path.exists():
            shutil.rmtree(path)

    def pull(self, path: Path) -> None:
        """Fetch and fast-forward the current branch.

        Args:
            path: Path to local repository.

        Raises:
            GitOpsError: If the path is not a repository or the pull fails.
        """
        try:
            repo = Repo(path)
            repo.remotes.origin.pull()
        except (GitCommandError, InvalidGitRepositoryError, NoSuchPathError, AttributeError) as e:
            raise GitOpsError(f"Git pull failed in {path}: {e}") from e
