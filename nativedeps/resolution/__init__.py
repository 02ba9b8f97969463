"""Dependency resolution engine and artifact transforms."""

from nativedeps.resolution.engine import (
    DependencyScope,
    PublishedVariant,
    ResolutionEngine,
    ScopeDefinition,
)
from nativedeps.resolution.transforms import (
    ArtifactTransform,
    TransformCache,
    TransformRegistration,
    TransformRegistry,
)

__all__ = [
    "ArtifactTransform",
    "DependencyScope",
    "PublishedVariant",
    "ResolutionEngine",
    "ScopeDefinition",
    "TransformCache",
    "TransformRegistration",
    "TransformRegistry",
]
