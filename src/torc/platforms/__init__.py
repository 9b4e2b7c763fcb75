"""Supervisor-specific service registrars."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from torc.config import Settings
from torc.protocols import CommandRunner, FileSystem
from torc.types import PlatformProfile, SupervisorFamily

from .base import BaseRegistrar
from .launchd import LaunchdRegistrar
from .systemd import SystemdRegistrar


@runtime_checkable
class ServiceRegistrar(Protocol):
    """Protocol defining the interface for supervisor registrars.

    One implementation per supervisor family, chosen once at startup, so
    lifecycle code never branches on the host OS.
    """

    name: str

    def render_descriptor(self) -> str:
        """Render the supervisor descriptor for the server."""
        raise NotImplementedError

    def register(self) -> None:
        """Write the descriptor and make the supervisor aware of it.

        Raises:
            RegistrationFailed: If the descriptor cannot be put in place.
        """
        raise NotImplementedError

    def start(self) -> bool:
        """Start the service.

        Returns:
            True on a clean start, False on a tolerable failure.

        Raises:
            StartFailed: If the failure is fatal.
        """
        raise NotImplementedError

    def stop(self) -> None:
        """Stop the service (best effort)."""
        raise NotImplementedError

    def restart(self) -> None:
        """Restart the service.

        Raises:
            StartFailed: If the supervisor refuses.
        """
        raise NotImplementedError

    def remove(self) -> None:
        """Delete the descriptor and unregister the service.

        Raises:
            RemovalFailed: If the descriptor cannot be removed.
        """
        raise NotImplementedError

    def is_registered(self) -> bool:
        """Check whether the descriptor exists."""
        raise NotImplementedError

    def is_active(self) -> bool:
        """Check whether the supervisor reports the service running."""
        raise NotImplementedError

    def recent_logs(self, lines: int) -> list[str]:
        """Get recent log lines, if the supervisor keeps them."""
        raise NotImplementedError

    def management_hints(self) -> list[tuple[str, str]]:
        """Get (action, command) pairs for manual service management."""
        raise NotImplementedError


__all__ = [
    "BaseRegistrar",
    "LaunchdRegistrar",
    "ServiceRegistrar",
    "SystemdRegistrar",
    "get_registrar",
]


REGISTRARS: dict[SupervisorFamily, type[BaseRegistrar]] = {
    SupervisorFamily.USER_SUPERVISOR: LaunchdRegistrar,
    SupervisorFamily.SYSTEM_SUPERVISOR: SystemdRegistrar,
}


def get_registrar(
    profile: PlatformProfile,
    runner: CommandRunner,
    filesystem: FileSystem,
    settings: Settings | None = None,
) -> ServiceRegistrar:
    """Get the registrar for the profile's supervisor family.

    Args:
        profile: Host installation profile.
        runner: Command runner.
        filesystem: Filesystem abstraction.
        settings: Settings supplying label and unit names.

    Returns:
        Registrar instance.

    Raises:
        ValueError: If the family has no registrar.
    """
    if profile.family not in REGISTRARS:
        raise ValueError(f"No registrar for supervisor family: {profile.family}")
    registrar_class = REGISTRARS[profile.family]
    return registrar_class(profile, runner, filesystem, settings)
