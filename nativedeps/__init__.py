"""Dependency scopes and header materialization for native binaries."""

from nativedeps.binary import CppBinary, DependencyScopeBuilder, MaterializedIncludePath
from nativedeps.config import NativeDepsConfig, load_config
from nativedeps.context import BuildContext, create_build_context
from nativedeps.errors import (
    ConfigurationError,
    MaterializationError,
    NativeDepsError,
    ResolutionError,
)
from nativedeps.materialize import UnzipTransform
from nativedeps.resolution import PublishedVariant, ResolutionEngine
from nativedeps.variant import (
    AttributeSet,
    MachineArchitecture,
    OperatingSystemFamily,
    TargetMachine,
    Usage,
    VariantIdentity,
    match_attributes,
)

__version__ = "0.1.0"

__all__ = [
    "AttributeSet",
    "BuildContext",
    "ConfigurationError",
    "CppBinary",
    "DependencyScopeBuilder",
    "MachineArchitecture",
    "MaterializationError",
    "MaterializedIncludePath",
    "NativeDepsConfig",
    "NativeDepsError",
    "OperatingSystemFamily",
    "PublishedVariant",
    "ResolutionEngine",
    "ResolutionError",
    "TargetMachine",
    "Usage",
    "UnzipTransform",
    "VariantIdentity",
    "create_build_context",
    "load_config",
    "match_attributes",
]
