"""systemd (Linux system unit) registrar."""

from __future__ import annotations

import logging
import textwrap

from torc.errors import RegistrationFailed, RemovalFailed, StartFailed
from torc.platforms.base import BaseRegistrar

logger = logging.getLogger(__name__)

UNIT_TEMPLATE = textwrap.dedent(
    """\
    [Unit]
    Description=Tea or Coffee Server
    After=network.target

    [Service]
    Type=simple
    ExecStart={binary}
    WorkingDirectory={workdir}
    Restart=always
    RestartSec=5
    StandardOutput=append:{stdout_log}
    StandardError=append:{stderr_log}

    [Install]
    WantedBy=multi-user.target
    """
)


class SystemdRegistrar(BaseRegistrar):
    """Registers the server as a system-wide systemd unit.

    The unit is rendered to a scratch file without privileges, then copied
    into the unit directory with sudo.
    """

    name = "systemd"

    @property
    def unit(self) -> str:
        """Unit name without the .service suffix."""
        return self.settings.unit_name

    def render_descriptor(self) -> str:
        """Render the unit file."""
        return UNIT_TEMPLATE.format(
            binary=self.profile.binary_path,
            workdir=self.profile.install_root,
            stdout_log=self.profile.stdout_log,
            stderr_log=self.profile.stderr_log,
        )

    def register(self) -> None:
        """Install the unit file and reload systemd."""
        scratch = self.settings.scratch_dir / f"{self.unit}.service"
        target = self.profile.service_path
        try:
            self.fs.mkdir(scratch.parent, parents=True, exist_ok=True)
            self.fs.write_text(scratch, self.render_descriptor())
        except OSError as e:
            raise RegistrationFailed(f"Failed to write temporary unit file {scratch}: {e}") from e

        for args in (
            ["cp", str(scratch), str(target)],
            ["chmod", "644", str(target)],
        ):
            result = self.runner.run(args, privileged=True)
            if not result.ok:
                raise RegistrationFailed(
                    f"Failed to install systemd unit {target}. "
                    "You may need to run with sudo or copy the unit file manually.",
                    output=result.output,
                )

        self._daemon_reload()
        logger.info("Installed systemd unit %s", target)

    def _daemon_reload(self) -> bool:
        result = self.runner.run(["systemctl", "daemon-reload"], privileged=True)
        if not result.ok:
            logger.warning("systemctl daemon-reload failed: %s", result.output)
        return result.ok

    def start(self) -> bool:
        """Enable the unit and start it now."""
        result = self.runner.run(["systemctl", "enable", "--now", self.unit], privileged=True)
        if not result.ok:
            raise StartFailed(
                f"Failed to start {self.unit}. "
                f"You may need to run: sudo systemctl enable --now {self.unit}",
                output=result.output,
            )
        return True

    def stop(self) -> None:
        """Stop and disable the unit, ignoring failures."""
        for action in ("stop", "disable"):
            result = self.runner.run(["systemctl", action, self.unit], privileged=True)
            if not result.ok:
                logger.debug("systemctl %s failed: %s", action, result.output)

    def restart(self) -> None:
        """Restart the unit."""
        result = self.runner.run(["systemctl", "restart", self.unit], privileged=True)
        if not result.ok:
            raise StartFailed(f"Failed to restart {self.unit}", output=result.output)

    def remove(self) -> None:
        """Delete the unit file and reload systemd."""
        target = self.profile.service_path
        if not self.fs.exists(target):
            return
        result = self.runner.run(["rm", "-f", str(target)], privileged=True)
        if not result.ok:
            raise RemovalFailed(
                f"Failed to remove systemd unit {target} (may need sudo)",
                output=result.output,
            )
        self._daemon_reload()

    def is_active(self) -> bool:
        """Ask `systemctl is-active` for the unit state."""
        result = self.runner.run(["systemctl", "is-active", self.unit])
        return result.output.strip() == "active"

    def recent_logs(self, lines: int) -> list[str]:
        """Tail the unit's journal."""
        if lines <= 0:
            return []
        result = self.runner.run(
            ["journalctl", "-u", self.unit, "--no-pager", "-n", str(lines)],
            privileged=True,
        )
        if not result.ok:
            logger.debug("journalctl failed: %s", result.output)
            return []
        return result.output.splitlines()

    def management_hints(self) -> list[tuple[str, str]]:
        """systemctl commands for the unit."""
        return [
            ("Status", f"sudo systemctl status {self.unit}"),
            ("Stop", f"sudo systemctl stop {self.unit}"),
            ("Start", f"sudo systemctl start {self.unit}"),
            ("Logs", f"sudo journalctl -u {self.unit} -f"),
        ]
