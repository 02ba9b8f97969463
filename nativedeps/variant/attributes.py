"""Attribute sets used to filter dependency scopes and published variants."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError

from nativedeps.errors import ConfigurationError
from nativedeps.variant.identity import (
    MachineArchitecture,
    OperatingSystemFamily,
    Usage,
    VariantIdentity,
)


class AttributeSet(BaseModel):
    """Fixed-schema attribute record attached to scopes and published variants.

    ``None`` on a published variant means the variant does not constrain
    that dimension (e.g. header packages are usually published without
    debuggable/optimized values). Scopes always carry all five values.
    """

    model_config = ConfigDict(frozen=True)

    usage: Usage
    debuggable: Optional[StrictBool] = None
    optimized: Optional[StrictBool] = None
    operating_system_family: Optional[OperatingSystemFamily] = None
    architecture: Optional[MachineArchitecture] = None

    def with_usage(self, usage: Usage) -> "AttributeSet":
        """Return a copy of this set with only the usage tag replaced."""
        return self.model_copy(update={"usage": Usage(usage)})

    def matches(self, candidate: "AttributeSet") -> bool:
        """Return True if ``candidate`` is compatible with this requested set.

        Usage must be equal. Every other dimension matches when either side
        leaves it unset or both carry the same value.
        """
        if candidate.usage != self.usage:
            return False
        for field in (
            "debuggable",
            "optimized",
            "operating_system_family",
            "architecture",
        ):
            wanted = getattr(self, field)
            offered = getattr(candidate, field)
            if wanted is not None and offered is not None and wanted != offered:
                return False
        return True

    def describe(self) -> str:
        parts = [f"usage={self.usage.value}"]
        if self.debuggable is not None:
            parts.append(f"debuggable={self.debuggable}")
        if self.optimized is not None:
            parts.append(f"optimized={self.optimized}")
        if self.operating_system_family is not None:
            parts.append(f"os={self.operating_system_family.value}")
        if self.architecture is not None:
            parts.append(f"arch={self.architecture.value}")
        return ", ".join(parts)


def match_attributes(identity: VariantIdentity, usage: Usage) -> AttributeSet:
    """Build the complete filter attribute set for one scope of a binary.

    Args:
        identity: Variant identity of the binary owning the scope.
        usage: Usage tag of the scope.

    Returns:
        AttributeSet carrying the usage plus the identity's four filter
        attributes.

    Raises:
        ConfigurationError: If the identity is missing or the usage is not a
            known usage tag.
    """
    if identity is None:
        raise ConfigurationError("A variant identity is required to build scope attributes")
    try:
        return AttributeSet(
            usage=usage,
            debuggable=identity.is_debuggable(),
            optimized=identity.is_optimized(),
            operating_system_family=identity.target_machine.operating_system_family,
            architecture=identity.target_machine.architecture,
        )
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid attributes for variant '{identity.name}': {exc}"
        ) from exc


__all__ = ["AttributeSet", "match_attributes"]
