"""Configuration schema definitions using Pydantic for validation.

Using Pydantic ensures configuration errors are caught early with clear
error messages.
"""

from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator


class NativeDepsConfig(BaseModel):
    """Build-wide configuration.

    Attributes:
        cache_dir: Root of the build cache. Transform outputs live under
            ``<cache_dir>/transforms``.
        verify_member_paths: Whether archive members are checked for path
            traversal before extraction.
        max_workers: Maximum number of binaries resolved in parallel by the
            command line interface.
    """

    cache_dir: Path = Path(".nativedeps_cache")
    verify_member_paths: bool = True
    max_workers: int = Field(default=4, ge=1, le=64)

    model_config = {"extra": "forbid"}

    @field_validator("cache_dir")
    @classmethod
    def validate_cache_dir(cls, v: Path) -> Path:
        """Reject an empty cache directory."""
        if not str(v).strip():
            raise ValueError("cache_dir must not be empty")
        return v

    @property
    def transforms_dir(self) -> Path:
        return self.cache_dir / "transforms"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NativeDepsConfig":
        """Build a config from a mapping, accepting a ``[nativedeps]`` table."""
        if "nativedeps" in data and isinstance(data["nativedeps"], dict):
            data = data["nativedeps"]
        return cls.model_validate(data)
