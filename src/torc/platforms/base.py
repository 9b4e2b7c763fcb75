"""Base registrar implementation with shared behavior.

Both supervisors share the same registration skeleton (render a descriptor,
put it in place, tell the supervisor); they vary in descriptor format, in
where the descriptor lives and in which commands drive the supervisor.

Pattern: Template Method - base class defines the skeleton, subclasses
provide the supervisor-specific steps.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from torc.config import Settings
from torc.protocols import CommandRunner, FileSystem
from torc.types import PlatformProfile

logger = logging.getLogger(__name__)


class BaseRegistrar(ABC):
    """Base class for supervisor registrars."""

    name: str

    def __init__(
        self,
        profile: PlatformProfile,
        runner: CommandRunner,
        filesystem: FileSystem,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the registrar.

        Args:
            profile: Host installation paths.
            runner: Command runner for supervisor calls.
            filesystem: Filesystem abstraction.
            settings: Settings supplying label and unit names.
        """
        self.profile = profile
        self.runner = runner
        self.fs = filesystem
        self.settings = settings or Settings()

    @abstractmethod
    def render_descriptor(self) -> str:
        """Render the supervisor descriptor for the server."""
        ...

    @abstractmethod
    def register(self) -> None:
        """Write the descriptor and make the supervisor aware of it.

        Raises:
            RegistrationFailed: If the descriptor cannot be put in place.
        """
        ...

    @abstractmethod
    def start(self) -> bool:
        """Start the service.

        Returns:
            True if the supervisor accepted the start, False if it reported a
            tolerable problem.

        Raises:
            StartFailed: If the failure is fatal for this supervisor.
        """
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop the service (best effort)."""
        ...

    @abstractmethod
    def restart(self) -> None:
        """Restart a registered service.

        Raises:
            StartFailed: If the supervisor refuses.
        """
        ...

    @abstractmethod
    def remove(self) -> None:
        """Delete the descriptor and unregister the service.

        Raises:
            RemovalFailed: If the descriptor cannot be removed.
        """
        ...

    @abstractmethod
    def is_active(self) -> bool:
        """Ask the supervisor whether the service is running."""
        ...

    @abstractmethod
    def management_hints(self) -> list[tuple[str, str]]:
        """Commands an operator can use to manage the service by hand.

        Returns:
            List of (action, command) pairs.
        """
        ...

    def is_registered(self) -> bool:
        """Check whether the descriptor exists on disk."""
        return self.fs.exists(self.profile.service_path)

    def recent_logs(self, lines: int) -> list[str]:
        """Get the last log lines known to the supervisor.

        Override in subclasses whose supervisor keeps a journal.

        Args:
            lines: Maximum number of lines.

        Returns:
            Log lines, oldest first. Empty if the supervisor keeps none.
        """
        return []
