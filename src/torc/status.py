"""Service status inspection."""

from __future__ import annotations

import logging

from torc.platforms import ServiceRegistrar
from torc.protocols import CommandRunner
from torc.types import PlatformProfile, StatusReport, SupervisorFamily

logger = logging.getLogger(__name__)

ADDRESS_COMMANDS = {
    SupervisorFamily.USER_SUPERVISOR: (
        "ifconfig | grep 'inet ' | grep -v 127.0.0.1 | awk '{print $2}'"
    ),
    SupervisorFamily.SYSTEM_SUPERVISOR: (
        "ip -4 addr show | grep 'inet ' | grep -v 127.0.0.1 "
        "| awk '{print $2}' | cut -d/ -f1"
    ),
}


def network_addresses(profile: PlatformProfile, runner: CommandRunner) -> list[str]:
    """List the host's non-loopback IPv4 addresses.

    Args:
        profile: Host profile (selects the query command).
        runner: Command runner.

    Returns:
        Addresses in the order the OS reports them. Empty on failure.
    """
    result = runner.run_shell(ADDRESS_COMMANDS[profile.family])
    if not result.ok:
        logger.debug("Address query failed: %s", result.output)
        return []
    return [line.strip() for line in result.output.splitlines() if line.strip()]


class StatusInspector:
    """Asks the supervisor whether the server is running."""

    def __init__(
        self,
        profile: PlatformProfile,
        registrar: ServiceRegistrar,
        runner: CommandRunner,
        log_lines: int = 10,
    ) -> None:
        self.profile = profile
        self.registrar = registrar
        self.runner = runner
        self.log_lines = log_lines

    def is_running(self) -> bool:
        """Check whether the supervisor reports the service active."""
        return self.registrar.is_active()

    def addresses(self) -> list[str]:
        return network_addresses(self.profile, self.runner)

    def inspect(self) -> StatusReport:
        """Collect a fresh status snapshot.

        Log lines are only fetched for a running service, and only where the
        supervisor keeps a journal.
        """
        running = self.is_running()
        logs = self.registrar.recent_logs(self.log_lines) if running else []
        return StatusReport(
            running=running,
            service_path=self.profile.service_path,
            logs=logs,
            addresses=self.addresses(),
        )
