"""launchd (macOS user agent) registrar."""

from __future__ import annotations

import logging
import plistlib

from torc.errors import RegistrationFailed, RemovalFailed
from torc.platforms.base import BaseRegistrar

logger = logging.getLogger(__name__)


class LaunchdRegistrar(BaseRegistrar):
    """Registers the server as a per-user launchd agent."""

    name = "launchd"

    @property
    def label(self) -> str:
        """launchd job label."""
        return self.settings.service_label

    def descriptor_data(self) -> dict[str, object]:
        """Property list contents for the agent."""
        return {
            "Label": self.label,
            "ProgramArguments": [str(self.profile.binary_path)],
            "WorkingDirectory": str(self.profile.install_root),
            "RunAtLoad": True,
            "KeepAlive": True,
            "StandardOutPath": str(self.profile.stdout_log),
            "StandardErrorPath": str(self.profile.stderr_log),
        }

    def render_descriptor(self) -> str:
        """Render the agent property list as XML."""
        return plistlib.dumps(self.descriptor_data(), sort_keys=False).decode("utf-8")

    def register(self) -> None:
        """Write the plist into ~/Library/LaunchAgents."""
        path = self.profile.service_path
        try:
            self.fs.mkdir(path.parent, parents=True, exist_ok=True)
            self.fs.write_text(path, self.render_descriptor())
        except OSError as e:
            raise RegistrationFailed(f"Failed to write launchd plist {path}: {e}") from e
        logger.info("Wrote launchd agent %s", path)

    def start(self) -> bool:
        """Load the agent.

        A load failure usually means the agent is already loaded from an
        earlier run, so it is reported as False rather than raised.
        """
        result = self.runner.run(["launchctl", "load", "-w", str(self.profile.service_path)])
        if not result.ok:
            logger.warning("launchctl load failed: %s", result.output)
            return False
        return True

    def stop(self) -> None:
        """Unload the agent if its plist exists."""
        if not self.is_registered():
            return
        result = self.runner.run(["launchctl", "unload", str(self.profile.service_path)])
        if not result.ok:
            logger.debug("launchctl unload failed: %s", result.output)

    def restart(self) -> None:
        """Unload and reload the agent so it picks up a new binary."""
        if not self.is_registered():
            return
        self.stop()
        if not self.start():
            logger.warning("launchd agent %s did not reload cleanly", self.label)

    def remove(self) -> None:
        """Delete the plist."""
        path = self.profile.service_path
        if not self.fs.exists(path):
            return
        try:
            self.fs.unlink(path)
        except OSError as e:
            raise RemovalFailed(f"Failed to remove launchd plist {path}: {e}") from e

    def is_active(self) -> bool:
        """Check `launchctl list` for the agent label."""
        result = self.runner.run(["launchctl", "list"])
        if not result.ok:
            return False
        return any(
            line.split()[-1] == self.label
            for line in result.output.splitlines()
            if line.strip()
        )

    def management_hints(self) -> list[tuple[str, str]]:
        """launchctl commands for the agent."""
        plist = self.profile.service_path
        return [
            ("Status", f"launchctl list | grep {self.label}"),
            ("Stop", f"launchctl unload {plist}"),
            ("Start", f"launchctl load {plist}"),
        ]
