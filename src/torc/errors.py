"""Error taxonomy for lifecycle operations.

Every failure that should stop an operation derives from TorcError. The
captured subprocess output travels with the error so the CLI can show it
verbatim; it is the operator's main diagnostic.
"""

from __future__ import annotations

from torc.types import InstallStep


class TorcError(Exception):
    """Base class for lifecycle failures.

    Attributes:
        output: Captured subprocess output, if any.
        step: Install step that failed, set by the orchestrator.
    """

    def __init__(
        self,
        message: str,
        *,
        output: str = "",
        step: InstallStep | None = None,
    ) -> None:
        super().__init__(message)
        self.output = output
        self.step = step


class ConfigError(TorcError):
    """Configuration file could not be read or validated."""


class UnsupportedPlatform(TorcError):
    """Host OS has no supported supervisor."""


class PrerequisiteMissing(TorcError):
    """A required tool is not installed."""


class ToolchainNotFound(PrerequisiteMissing):
    """The Go toolchain is not on PATH."""


class SourceUnavailable(TorcError):
    """No local checkout and the clone failed."""


class BuildSourceMissing(TorcError):
    """Project root lacks the build-entry marker."""


class BuildFailed(TorcError):
    """Toolchain exited nonzero."""


class DeployFailed(TorcError):
    """Copying a runtime asset failed."""


class RegistrationFailed(TorcError):
    """Writing the descriptor or registering it with the supervisor failed."""


class StartFailed(TorcError):
    """Supervisor refused to start the service."""


class UpdateFailed(TorcError):
    """CLI self-update failed."""


class DownloadFailed(UpdateFailed):
    """Release lookup or download failed."""


class VerificationFailed(UpdateFailed):
    """Downloaded file is not an executable image."""


class SwapFailed(UpdateFailed):
    """New binary could not be moved into place."""


class RemovalFailed(TorcError):
    """A file or service registration could not be removed."""
