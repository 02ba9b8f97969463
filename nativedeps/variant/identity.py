"""Variant identity model for native binaries.

A VariantIdentity captures the build coordinates of one binary variant
(debug/release x operating system x architecture) together with references
to the toolchain used to build it. It is the single source of filter
attributes for the compile, link and runtime dependency scopes of that
binary.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class Usage(str, Enum):
    """Usage tags attached to dependency scopes and published variants.

    The first three values are the scope usages of a native binary. They
    are mutually exclusive and exhaustive. ``C_PLUS_PLUS_API_DIRS`` is a
    synthetic tag only ever requested through an artifact view, to obtain
    header packages in their extracted directory form.
    """

    C_PLUS_PLUS_API = "c-plus-plus-api"
    NATIVE_LINK = "native-link"
    NATIVE_RUNTIME = "native-runtime"
    C_PLUS_PLUS_API_DIRS = "cplusplus-api-dirs"


SCOPE_USAGES = (Usage.C_PLUS_PLUS_API, Usage.NATIVE_LINK, Usage.NATIVE_RUNTIME)


class OperatingSystemFamily(str, Enum):
    """Operating system family of a target machine."""

    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"


class MachineArchitecture(str, Enum):
    """Instruction set architecture of a target machine."""

    X86 = "x86"
    X86_64 = "x86-64"
    ARM64 = "aarch64"


class TargetMachine(BaseModel):
    """Operating system family and architecture a binary is built for."""

    model_config = ConfigDict(frozen=True)

    operating_system_family: OperatingSystemFamily
    architecture: MachineArchitecture

    def __str__(self) -> str:
        return f"{self.operating_system_family.value}:{self.architecture.value}"


class VariantIdentity(BaseModel):
    """Immutable build coordinates of a single binary variant.

    Equality and hashing only consider the filter attributes (debuggable,
    optimized and the target machine). Name, toolchain, platform and
    platform tool provider are references owned by the caller.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    debuggable: StrictBool
    optimized: StrictBool
    target_machine: TargetMachine
    platform: Optional[Any] = None
    toolchain: Optional[Any] = None
    platform_tool_provider: Optional[Any] = None

    def is_debuggable(self) -> bool:
        return self.debuggable

    def is_optimized(self) -> bool:
        return self.optimized

    @property
    def operating_system_family(self) -> OperatingSystemFamily:
        return self.target_machine.operating_system_family

    @property
    def architecture(self) -> MachineArchitecture:
        return self.target_machine.architecture

    def _key(self) -> tuple:
        return (self.debuggable, self.optimized, self.target_machine)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VariantIdentity):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


__all__ = [
    "MachineArchitecture",
    "OperatingSystemFamily",
    "SCOPE_USAGES",
    "TargetMachine",
    "Usage",
    "VariantIdentity",
]
