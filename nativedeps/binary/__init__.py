"""Native binary variants and their dependency scopes."""

from nativedeps.binary.cpp_binary import CppBinary
from nativedeps.binary.include_path import MaterializedIncludePath
from nativedeps.binary.names import Names
from nativedeps.binary.scopes import BinaryScopes, DependencyScopeBuilder

__all__ = [
    "BinaryScopes",
    "CppBinary",
    "DependencyScopeBuilder",
    "MaterializedIncludePath",
    "Names",
]
