"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from torc.config import Settings
from torc.filesystem import RealFileSystem
from torc.types import CommandResult, PlatformProfile, SupervisorFamily


@dataclass
class Call:
    """One recorded runner invocation."""

    args: list[str]
    cwd: Path | None
    privileged: bool


class FakeRunner:
    """Scripted CommandRunner double.

    Responses are matched on the longest scripted prefix of the command's
    words. Unscripted commands succeed with no output.
    """

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self.shell_lines: list[str] = []
        self.responses: dict[tuple[str, ...], CommandResult] = {}
        self.programs: dict[str, Path] = {}

    def script(self, prefix: str, output: str = "", exit_code: int = 0) -> None:
        """Set the result for commands starting with the given words."""
        self.responses[tuple(prefix.split())] = CommandResult(output, exit_code)

    def _lookup(self, words: Sequence[str]) -> CommandResult:
        for n in range(len(words), 0, -1):
            key = tuple(words[:n])
            if key in self.responses:
                return self.responses[key]
        return CommandResult("", 0)

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        privileged: bool = False,
    ) -> CommandResult:
        command = list(args)
        self.calls.append(Call(command, cwd, privileged))
        return self._lookup(command)

    def run_shell(self, line: str, cwd: Path | None = None) -> CommandResult:
        self.shell_lines.append(line)
        return self._lookup(line.split())

    def which(self, program: str) -> Path | None:
        return self.programs.get(program)

    @property
    def commands(self) -> list[list[str]]:
        """Argument lists of every run() call, in order."""
        return [call.args for call in self.calls]


@pytest.fixture
def runner() -> FakeRunner:
    """Create a scripted command runner."""
    return FakeRunner()


@pytest.fixture
def real_fs() -> RealFileSystem:
    """Real filesystem; tests point it at tmp_path."""
    return RealFileSystem()


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileSystem for testing.

    The mock tracks all filesystem operations without touching real files.
    """
    mock = MagicMock()
    mock.exists.return_value = False
    mock.is_dir.return_value = False
    return mock


@pytest.fixture
def reporter() -> MagicMock:
    """Create a mock progress reporter."""
    return MagicMock()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Default settings with scratch space under tmp_path."""
    return Settings(scratch_dir=tmp_path / "scratch")


# ============================================================================
# Host Profile Fixtures
# ============================================================================


@pytest.fixture
def mac_profile(tmp_path: Path) -> PlatformProfile:
    """launchd host profile rooted in tmp_path."""
    return PlatformProfile(
        family=SupervisorFamily.USER_SUPERVISOR,
        binary_path=tmp_path / "usr" / "local" / "bin" / "torc-server",
        cli_binary_path=tmp_path / "usr" / "local" / "bin" / "torc",
        install_root=tmp_path / "usr" / "local" / "torc-server",
        service_path=tmp_path / "Library" / "LaunchAgents" / "com.teacoffee.torc.plist",
    )


@pytest.fixture
def linux_profile(tmp_path: Path) -> PlatformProfile:
    """systemd host profile rooted in tmp_path."""
    return PlatformProfile(
        family=SupervisorFamily.SYSTEM_SUPERVISOR,
        binary_path=tmp_path / "usr" / "local" / "bin" / "torc-server",
        cli_binary_path=tmp_path / "usr" / "local" / "bin" / "torc",
        install_root=tmp_path / "opt" / "torc-server",
        service_path=tmp_path / "etc" / "systemd" / "system" / "torc-server.service",
    )


# ============================================================================
# Sample Content Fixtures
# ============================================================================


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Server source tree with a build entry point and all runtime assets."""
    root = tmp_path / "src" / "tea-or-coffee"
    (root / "web").mkdir(parents=True)
    (root / "web" / "index.html").write_text("<h1>Order</h1>")
    (root / "admin").mkdir()
    (root / "admin" / "index.html").write_text("<h1>Admin</h1>")
    (root / "main.go").write_text("package main\n")
    (root / "menu.txt").write_text('"Latte",\n"Mocha",\n')
    return root
