"""Host detection and installation paths."""

from __future__ import annotations

import platform as host_platform
import sys
from pathlib import Path

from torc.config import Settings
from torc.errors import UnsupportedPlatform
from torc.types import PlatformProfile, SupervisorFamily

BINARY_PATH = Path("/usr/local/bin/torc-server")
CLI_BINARY_PATH = Path("/usr/local/bin/torc")

INSTALL_ROOTS = {
    SupervisorFamily.USER_SUPERVISOR: Path("/usr/local/torc-server"),
    SupervisorFamily.SYSTEM_SUPERVISOR: Path("/opt/torc-server"),
}

SYSTEMD_UNIT_DIR = Path("/etc/systemd/system")


def detect_family(system: str | None = None) -> SupervisorFamily:
    """Map a sys.platform value to a supervisor family.

    Args:
        system: Platform string. Defaults to sys.platform.

    Returns:
        SupervisorFamily for the host.

    Raises:
        UnsupportedPlatform: If the host is neither macOS nor Linux.
    """
    system = system or sys.platform
    if system == "darwin":
        return SupervisorFamily.USER_SUPERVISOR
    if system.startswith("linux"):
        return SupervisorFamily.SYSTEM_SUPERVISOR
    raise UnsupportedPlatform(
        f"Unsupported platform: {system}. torc supports macOS and Linux."
    )


def resolve_profile(
    settings: Settings | None = None,
    system: str | None = None,
    home: Path | None = None,
) -> PlatformProfile:
    """Build the installation profile for the host.

    Args:
        settings: Settings carrying optional path overrides.
        system: Platform string. Defaults to sys.platform.
        home: Home directory. Defaults to Path.home().

    Returns:
        Immutable PlatformProfile.
    """
    settings = settings or Settings()
    family = detect_family(system)

    if family is SupervisorFamily.USER_SUPERVISOR:
        home = home or Path.home()
        default_service = (
            home / "Library" / "LaunchAgents" / f"{settings.service_label}.plist"
        )
    else:
        default_service = SYSTEMD_UNIT_DIR / f"{settings.unit_name}.service"

    return PlatformProfile(
        family=family,
        binary_path=BINARY_PATH,
        cli_binary_path=CLI_BINARY_PATH,
        install_root=settings.install_root or INSTALL_ROOTS[family],
        service_path=settings.service_path or default_service,
    )


def release_platform(profile: PlatformProfile, machine: str | None = None) -> str:
    """Get the release asset suffix for the host.

    Args:
        profile: Host profile.
        machine: CPU architecture. Defaults to platform.machine().

    Returns:
        One of macos-arm64, macos-x86_64, linux-amd64.
    """
    if profile.family is SupervisorFamily.USER_SUPERVISOR:
        machine = machine or host_platform.machine()
        return "macos-arm64" if machine == "arm64" else "macos-x86_64"
    return "linux-amd64"
