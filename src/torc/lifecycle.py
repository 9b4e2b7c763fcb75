"""Install, update and uninstall workflows.

Each workflow re-derives what is installed from the filesystem and the
supervisor instead of trusting any stored state. Every step is idempotent,
so a failed run is recovered by running the same command again; nothing is
rolled back automatically.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from torc.builder import Builder
from torc.config import Settings
from torc.deploy import Deployer, clear_install_root
from torc.errors import DeployFailed, RemovalFailed, StartFailed, TorcError
from torc.gitops import GitOpsError, find_project_root
from torc.platforms import ServiceRegistrar
from torc.protocols import CommandRunner, FileSystem, Reporter, SourceRepository
from torc.types import (
    InstallReport,
    InstallStep,
    PlatformProfile,
    UninstallReport,
    UpdateReport,
)
from torc.update import CliUpdater

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Assets an update leaves alone when they already exist (operator edits)
UPDATE_KEEPS = frozenset({"menu.txt"})


class LifecycleManager:
    """Sequences the components into the top-level workflows.

    Follows Separate Use from Creation: constructor requires all dependencies.
    Wiring for production happens in torc.context.create_context().
    """

    def __init__(
        self,
        profile: PlatformProfile,
        settings: Settings,
        runner: CommandRunner,
        filesystem: FileSystem,
        gitops: SourceRepository,
        registrar: ServiceRegistrar,
        builder: Builder,
        deployer: Deployer,
        cli_updater: CliUpdater,
        reporter: Reporter,
    ) -> None:
        self.profile = profile
        self.settings = settings
        self.runner = runner
        self.fs = filesystem
        self.gitops = gitops
        self.registrar = registrar
        self.builder = builder
        self.deployer = deployer
        self.cli_updater = cli_updater
        self.reporter = reporter

    # ------------------------------------------------------------------
    # Installation state
    # ------------------------------------------------------------------

    def is_installed(self) -> bool:
        """Any of descriptor, binary or install root counts as installed."""
        return (
            self.registrar.is_registered()
            or self.fs.exists(self.profile.binary_path)
            or self.fs.exists(self.profile.install_root)
        )

    def is_server_installed(self) -> bool:
        """Whether there is a server for update to rebuild."""
        return self.registrar.is_registered() or self.fs.exists(self.profile.binary_path)

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    def install(self, start_path: Path | None = None) -> InstallReport:
        """Build, deploy, register and start the server.

        Args:
            start_path: Directory to start the source search from.

        Returns:
            InstallReport for the completed run.

        Raises:
            TorcError: The first failing step; its `step` names which one.
        """
        self._step(InstallStep.CHECK_PREREQUISITES, self._check_prerequisites)
        project_root = self._step(InstallStep.LOCATE_SOURCE, self.locate_source, start_path)
        self._step(InstallStep.BUILD, self._build, project_root)
        self._step(InstallStep.ENSURE_INSTALL_ROOT, self._ensure_install_root)
        warnings = self._step(InstallStep.DEPLOY, self._deploy, project_root)
        self._step(InstallStep.REGISTER_SERVICE, self._register)
        started = self._step(InstallStep.START_SERVICE, self._start)
        if not started:
            warnings.append("Service did not start cleanly (it may already be loaded)")

        logger.info("Install finished from %s", project_root)
        return InstallReport(project_root=project_root, service_started=started, warnings=warnings)

    def _step(self, step: InstallStep, action: Callable[..., T], *args: object) -> T:
        """Run one install step, tagging any failure with the step."""
        logger.debug("Install step: %s", step.value)
        try:
            return action(*args)
        except TorcError as e:
            if e.step is None:
                e.step = step
            raise

    def _check_prerequisites(self) -> None:
        self.reporter.show_info("Checking prerequisites...")
        toolchain = self.builder.check_toolchain()
        self.reporter.show_success(f"{self.settings.toolchain} found at {toolchain}")

    def locate_source(self, start_path: Path | None = None) -> Path:
        """Find a local checkout or clone a fresh one.

        Raises:
            SourceUnavailable: If there is no checkout and the clone fails.
        """
        project_root = find_project_root(start_path, self.settings.build_marker)
        if project_root is not None:
            self.reporter.show_info(f"Using project at {project_root}")
            return project_root

        self.reporter.show_info("Project not found. Cloning repository...")
        clone = self.gitops.clone_fresh(self.settings.repo_url, self.settings.clone_dir)
        self.reporter.show_success("Repository cloned")
        return clone

    def _build(self, project_root: Path) -> None:
        self.reporter.show_info("Building server...")
        self.builder.build(project_root)
        self.reporter.show_success("Server built successfully")

    def _ensure_install_root(self) -> None:
        root = self.profile.install_root
        self.reporter.show_info("Creating installation directory...")
        try:
            self.fs.mkdir(root, parents=True, exist_ok=True)
        except OSError as e:
            raise DeployFailed(f"Failed to create directory {root}: {e}") from e

    def _deploy(self, project_root: Path) -> list[str]:
        self.reporter.show_info("Copying files...")
        result = self.deployer.deploy(project_root)
        warnings = [f"{name} not found, skipped" for name in result.skipped]
        for warning in warnings:
            self.reporter.show_warning(warning)
        self.reporter.show_success("Files copied successfully")
        return warnings

    def _register(self) -> None:
        self.reporter.show_info("Setting up service...")
        self.registrar.register()
        self.reporter.show_success(f"{self.registrar.name} service created")

    def _start(self) -> bool:
        self.reporter.show_info("Starting service...")
        started = self.registrar.start()
        if started:
            self.reporter.show_success("Service started")
        else:
            self.reporter.show_warning(
                f"Failed to load {self.registrar.name} service (it may already be loaded)"
            )
        return started

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(self, start_path: Path | None = None) -> UpdateReport:
        """Update the CLI and, if installed, the server.

        The two halves are independent: a failure in one is reported as a
        warning and the other still runs.

        Args:
            start_path: Directory to start the source search from.

        Returns:
            UpdateReport describing both halves.
        """
        report = UpdateReport()

        self.reporter.show_info("Updating CLI...")
        try:
            version = self.cli_updater.update()
        except (TorcError, OSError) as e:
            self._warn(report, f"CLI update failed: {e}")
        else:
            report.cli_updated = True
            self.reporter.show_success(f"CLI updated to {version}")

        if not self.is_server_installed():
            self.reporter.show_info("Server not installed. Run 'torc install' to install it.")
            return report

        report.server_installed = True
        self.reporter.show_info("Updating server...")
        try:
            self._update_server(report, start_path)
        except (TorcError, OSError) as e:
            message = f"Server update failed: {e}"
            if isinstance(e, TorcError) and e.output:
                message = f"{message}\n{e.output}"
            self._warn(report, message)
        else:
            report.server_updated = True
            self.reporter.show_success("Server updated successfully")
        return report

    def _update_server(self, report: UpdateReport, start_path: Path | None) -> None:
        project_root = self._update_source_root(report, start_path)

        self.reporter.show_info("Building server...")
        self.builder.build(project_root)

        self.reporter.show_info("Syncing files...")
        self.deployer.deploy(project_root, keep_existing=UPDATE_KEEPS)

        self.reporter.show_info("Restarting service...")
        try:
            self.registrar.restart()
        except StartFailed as e:
            self._warn(report, f"Service restart failed: {e}")

    def _update_source_root(self, report: UpdateReport, start_path: Path | None) -> Path:
        marker = self.settings.build_marker
        bundled = self.profile.install_root / self.settings.clone_dir_name
        if self.fs.exists(bundled / marker):
            project_root: Path | None = bundled
        else:
            project_root = find_project_root(start_path, marker)

        if project_root is None:
            self.reporter.show_info("Cloning repository...")
            return self.gitops.clone_fresh(self.settings.repo_url, self.settings.update_clone_dir)

        self.reporter.show_info(f"Updating repository at {project_root}...")
        try:
            self.gitops.pull(project_root)
        except GitOpsError as e:
            self._warn(report, f"Failed to pull latest changes: {e}")
        return project_root

    def _warn(self, report: UpdateReport | UninstallReport, message: str) -> None:
        logger.info(message)
        report.warnings.append(message)
        self.reporter.show_warning(message)

    # ------------------------------------------------------------------
    # Uninstall
    # ------------------------------------------------------------------

    def uninstall(self, confirm: Callable[[], bool]) -> UninstallReport:
        """Stop and remove the service, binary and installation files.

        The sessions directory and popularity stats in the install root are
        preserved. Removal problems become warnings; uninstall goes as far
        as it can.

        Args:
            confirm: Asked once before anything is touched; False cancels.

        Returns:
            UninstallReport. `confirmed` is False if nothing was done.
        """
        report = UninstallReport(installed=self.is_installed())
        if not report.installed:
            return report
        if not confirm():
            return report
        report.confirmed = True

        self.reporter.show_info("Stopping service...")
        self.registrar.stop()

        self.reporter.show_info("Removing service...")
        had_descriptor = self.registrar.is_registered()
        try:
            self.registrar.remove()
        except RemovalFailed as e:
            self._warn(report, str(e))
        else:
            if had_descriptor:
                report.removed.append(str(self.profile.service_path))
                self.reporter.show_success(f"{self.registrar.name} service removed")

        self.reporter.show_info("Removing binary...")
        self._remove_binary(report)

        self.reporter.show_info("Removing installation files...")
        cleanup = clear_install_root(self.profile.install_root, self.fs)
        report.removed.extend(
            str(self.profile.install_root / name) for name in cleanup.removed
        )
        report.preserved.extend(cleanup.kept)
        for failure in cleanup.failed:
            self._warn(report, f"Failed to remove {failure}")
        if not cleanup.failed:
            self.reporter.show_success("Installation files removed")
        return report

    def _remove_binary(self, report: UninstallReport) -> None:
        binary = self.profile.binary_path
        if not self.fs.exists(binary):
            return
        try:
            self.fs.unlink(binary)
        except OSError as e:
            logger.debug("Unprivileged removal of %s failed: %s", binary, e)
            result = self.runner.run(["rm", "-f", str(binary)], privileged=True)
            if not result.ok:
                self._warn(report, f"Failed to remove binary {binary}: {result.output or e}")
                return
        report.removed.append(str(binary))
        self.reporter.show_success("Binary removed")
