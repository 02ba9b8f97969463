"""Error taxonomy for native dependency resolution and materialization."""

from pathlib import Path
from typing import Optional


class NativeDepsError(Exception):
    """Base class for all errors raised by nativedeps."""

    pass


class ConfigurationError(NativeDepsError):
    """Raised when a binary, scope or registry is configured inconsistently.

    Configuration errors are fatal and are reported before any resolution
    happens.
    """

    pass


class ResolutionError(NativeDepsError):
    """Raised when no (or more than one) compatible variant can be selected."""

    def __init__(self, component: str, message: str) -> None:
        super().__init__(f"Could not resolve '{component}': {message}")
        self.component = component


class MaterializationError(NativeDepsError):
    """Raised when an archive artifact cannot be extracted.

    Attributes:
        archive: Archive that was being extracted.
        destination: Directory the extraction was targeting.
    """

    def __init__(
        self,
        archive: Path,
        destination: Optional[Path],
        reason: str,
    ) -> None:
        target = destination if destination is not None else "<unallocated>"
        super().__init__(
            f"Failed to materialize {archive} into {target}: {reason}"
        )
        self.archive = archive
        self.destination = destination


__all__ = [
    "ConfigurationError",
    "MaterializationError",
    "NativeDepsError",
    "ResolutionError",
]
