"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
and reducing coupling in CLI commands.

The host profile is resolved once here and handed to every component; no
component looks up host paths on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from torc.config import Settings
from torc.lifecycle import LifecycleManager
from torc.platforms import ServiceRegistrar
from torc.protocols import Reporter
from torc.status import StatusInspector
from torc.types import PlatformProfile


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for all services used by CLI commands.
    For tests, construct AppContext directly with test doubles.
    """

    settings: Settings
    profile: PlatformProfile
    registrar: ServiceRegistrar
    lifecycle: LifecycleManager
    inspector: StatusInspector


def create_context(
    reporter: Reporter,
    config_file: Path | None = None,
    system: str | None = None,
) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.

    Args:
        reporter: Where lifecycle progress is reported.
        config_file: Override config file location.
        system: Override sys.platform (for testing).

    Returns:
        Configured AppContext with all dependencies.

    Raises:
        ConfigError: If the config file is invalid.
        UnsupportedPlatform: If the host is neither macOS nor Linux.
    """
    from torc.builder import Builder
    from torc.config import load_settings
    from torc.deploy import Deployer
    from torc.filesystem import RealFileSystem
    from torc.gitops import GitOps
    from torc.platforms import get_registrar
    from torc.profile import resolve_profile
    from torc.releases import GitHubReleases
    from torc.runner import SubprocessRunner
    from torc.update import CliUpdater

    settings = load_settings(config_file)
    profile = resolve_profile(settings, system=system)
    runner = SubprocessRunner()
    filesystem = RealFileSystem()
    registrar = get_registrar(profile, runner, filesystem, settings)

    builder = Builder(
        profile,
        runner,
        filesystem,
        toolchain=settings.toolchain,
        marker=settings.build_marker,
    )
    deployer = Deployer(profile.install_root, filesystem)
    releases = GitHubReleases(settings.releases_api_url, settings.release_download_url)
    cli_updater = CliUpdater(profile, runner, filesystem, releases, settings.scratch_dir)

    lifecycle = LifecycleManager(
        profile=profile,
        settings=settings,
        runner=runner,
        filesystem=filesystem,
        gitops=GitOps(),
        registrar=registrar,
        builder=builder,
        deployer=deployer,
        cli_updater=cli_updater,
        reporter=reporter,
    )
    inspector = StatusInspector(profile, registrar, runner, log_lines=settings.log_lines)

    return AppContext(
        settings=settings,
        profile=profile,
        registrar=registrar,
        lifecycle=lifecycle,
        inspector=inspector,
    )
