"""Variant identity and attribute matching."""

from nativedeps.variant.attributes import AttributeSet, match_attributes
from nativedeps.variant.identity import (
    SCOPE_USAGES,
    MachineArchitecture,
    OperatingSystemFamily,
    TargetMachine,
    Usage,
    VariantIdentity,
)

__all__ = [
    "AttributeSet",
    "MachineArchitecture",
    "OperatingSystemFamily",
    "SCOPE_USAGES",
    "TargetMachine",
    "Usage",
    "VariantIdentity",
    "match_attributes",
]
