"""Build manifest loading.

A manifest describes published components and the binaries to resolve::

    [[components]]
    name = "zlib"

    [[components.variants]]
    name = "api"
    usage = "c-plus-plus-api"
    artifacts = ["repo/zlib-headers.zip"]

    [[binaries]]
    name = "debug"
    debuggable = true
    optimized = false
    os = "linux"
    arch = "x86-64"
    header_dirs = ["include"]
    dependencies = ["zlib"]

Relative paths are resolved against the manifest's directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from nativedeps.binary.cpp_binary import CppBinary
from nativedeps.context import BuildContext
from nativedeps.errors import ConfigurationError
from nativedeps.resolution.engine import PublishedVariant
from nativedeps.variant.attributes import AttributeSet
from nativedeps.variant.identity import (
    MachineArchitecture,
    OperatingSystemFamily,
    TargetMachine,
    Usage,
    VariantIdentity,
)

logger = logging.getLogger("nativedeps.cli.manifest")


class VariantEntry(BaseModel):
    name: str
    usage: Usage
    debuggable: Optional[bool] = None
    optimized: Optional[bool] = None
    os: Optional[OperatingSystemFamily] = None
    arch: Optional[MachineArchitecture] = None
    artifacts: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class ComponentEntry(BaseModel):
    name: str
    variants: List[VariantEntry] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class BinaryEntry(BaseModel):
    name: str
    debuggable: bool
    optimized: bool
    os: OperatingSystemFamily
    arch: MachineArchitecture
    header_dirs: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class Manifest(BaseModel):
    components: List[ComponentEntry] = Field(default_factory=list)
    binaries: List[BinaryEntry] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


def parse_manifest(data: Dict[str, Any]) -> Manifest:
    """Validate a parsed manifest mapping."""
    try:
        return Manifest.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid build manifest: {exc}") from exc


def _resolve_path(base_dir: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base_dir / path


def load_binaries(
    manifest: Manifest, context: BuildContext, base_dir: Path
) -> List[CppBinary]:
    """Publish the manifest's components and create its binaries."""
    engine = context.engine
    for component in manifest.components:
        engine.publish(
            component.name,
            [
                PublishedVariant(
                    name=variant.name,
                    attributes=AttributeSet(
                        usage=variant.usage,
                        debuggable=variant.debuggable,
                        optimized=variant.optimized,
                        operating_system_family=variant.os,
                        architecture=variant.arch,
                    ),
                    artifacts=tuple(
                        _resolve_path(base_dir, artifact) for artifact in variant.artifacts
                    ),
                    dependencies=tuple(variant.dependencies),
                )
                for variant in component.variants
            ],
        )

    binaries = []
    for entry in manifest.binaries:
        try:
            identity = VariantIdentity(
                name=entry.name,
                debuggable=entry.debuggable,
                optimized=entry.optimized,
                target_machine=TargetMachine(
                    operating_system_family=entry.os, architecture=entry.arch
                ),
            )
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid identity for binary '{entry.name}': {exc}"
            ) from exc
        implementation = engine.create_scope(f"{entry.name}Implementation")
        implementation.declare(*entry.dependencies)
        binaries.append(
            CppBinary(
                entry.name,
                engine,
                identity,
                implementation=implementation,
                header_dirs=[_resolve_path(base_dir, d) for d in entry.header_dirs],
                scope_builder=context.scope_builder,
            )
        )
    logger.info(
        "Loaded %d component(s) and %d binary(ies)",
        len(manifest.components),
        len(binaries),
    )
    return binaries
