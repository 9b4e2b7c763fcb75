"""Service lifecycle manager for the Tea or Coffee server."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from torc.protocols import (
    CommandRunner,
    FileSystem,
    ReleaseSource,
    Reporter,
    SourceRepository,
)

__all__ = [
    "__version__",
    "CommandRunner",
    "FileSystem",
    "ReleaseSource",
    "Reporter",
    "SourceRepository",
]
