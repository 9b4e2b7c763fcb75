"""External command execution.

Every interaction with the host's tools (toolchain, supervisor, sudo) goes
through SubprocessRunner, so lifecycle logic can be exercised against a
scripted fake instead of a real OS.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from torc.types import CommandResult

logger = logging.getLogger(__name__)

# Exit status reported when a process could not be started at all
LAUNCH_FAILURE_CODE = 1


def default_shell() -> str:
    """Get the shell used for script lines on this host."""
    return "/bin/zsh" if sys.platform == "darwin" else "/bin/bash"


def is_root() -> bool:
    """Check whether the current process already has root privileges."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


class SubprocessRunner:
    """Production command runner.

    Satisfies the CommandRunner protocol structurally.
    """

    def __init__(self, shell: str | None = None, sudo: str = "sudo") -> None:
        """Initialize the runner.

        Args:
            shell: Shell for run_shell(). Defaults to the platform shell.
            sudo: Program used to escalate privileges.
        """
        self.shell = shell or default_shell()
        self.sudo = sudo

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        privileged: bool = False,
    ) -> CommandResult:
        """Run a program to completion, merging stdout and stderr.

        Args:
            args: Program and arguments.
            cwd: Working directory, or None for the current one.
            privileged: Prefix with sudo unless already root.

        Returns:
            CommandResult. A process that cannot be started yields exit code 1
            and an "Error: ..." output instead of raising.
        """
        command = list(args)
        if privileged and not is_root():
            command = [self.sudo, *command]

        logger.debug("Running %s (cwd=%s)", command, cwd)
        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as e:
            logger.debug("Could not start %s: %s", command[0], e)
            return CommandResult(output=f"Error: {e}", exit_code=LAUNCH_FAILURE_CODE)

        output = (completed.stdout or "").strip()
        logger.debug("%s exited with %d", command[0], completed.returncode)
        return CommandResult(output=output, exit_code=completed.returncode)

    def run_shell(self, line: str, cwd: Path | None = None) -> CommandResult:
        """Run a script line through the platform shell."""
        return self.run([self.shell, "-c", line], cwd=cwd)

    def which(self, program: str) -> Path | None:
        """Locate a program on PATH."""
        found = shutil.which(program)
        return Path(found) if found else None
