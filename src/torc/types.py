"""Shared data types for torc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = [
    "CommandResult",
    "InstallReport",
    "InstallStep",
    "PlatformProfile",
    "StatusReport",
    "SupervisorFamily",
    "UninstallReport",
    "UpdateReport",
]


class SupervisorFamily(str, Enum):
    """Which kind of process supervisor the host runs."""

    USER_SUPERVISOR = "launchd"
    SYSTEM_SUPERVISOR = "systemd"


class InstallStep(str, Enum):
    """Ordered steps of the install workflow."""

    CHECK_PREREQUISITES = "check prerequisites"
    LOCATE_SOURCE = "locate source"
    BUILD = "build"
    ENSURE_INSTALL_ROOT = "create install root"
    DEPLOY = "deploy assets"
    REGISTER_SERVICE = "register service"
    START_SERVICE = "start service"
    DONE = "done"


@dataclass(frozen=True)
class PlatformProfile:
    """Fixed installation paths for the host.

    Attributes:
        family: Supervisor family of the host.
        binary_path: Where the server binary is built to.
        cli_binary_path: Where the torc CLI itself lives.
        install_root: Directory holding runtime assets and persisted data.
        service_path: Location of the supervisor descriptor.
    """

    family: SupervisorFamily
    binary_path: Path
    cli_binary_path: Path
    install_root: Path
    service_path: Path

    @property
    def stdout_log(self) -> Path:
        """Server standard output log."""
        return self.install_root / "torc-server.log"

    @property
    def stderr_log(self) -> Path:
        """Server standard error log."""
        return self.install_root / "torc-server.error.log"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external invocation.

    Attributes:
        output: Standard output and standard error, merged and stripped.
        exit_code: Process exit status (synthetic 1 if it never started).
    """

    output: str
    exit_code: int

    @property
    def ok(self) -> bool:
        """True if the process exited with status 0."""
        return self.exit_code == 0


@dataclass
class InstallReport:
    """Result of a completed install."""

    project_root: Path
    service_started: bool
    warnings: list[str] = field(default_factory=list)


@dataclass
class UpdateReport:
    """Result of an update run.

    Attributes:
        cli_updated: True if the CLI binary was replaced.
        server_installed: False when there was no server to update.
        server_updated: True if the server was rebuilt.
        warnings: Non-fatal problems hit along the way.
    """

    cli_updated: bool = False
    server_installed: bool = False
    server_updated: bool = False
    warnings: list[str] = field(default_factory=list)


@dataclass
class UninstallReport:
    """Result of an uninstall run."""

    installed: bool
    confirmed: bool = False
    removed: list[str] = field(default_factory=list)
    preserved: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class StatusReport:
    """Snapshot of the service state."""

    running: bool
    service_path: Path
    logs: list[str] = field(default_factory=list)
    addresses: list[str] = field(default_factory=list)
