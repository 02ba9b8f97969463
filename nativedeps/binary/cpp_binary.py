"""C++ binary variant.

A CppBinary is one buildable variant of a C++ component. It owns the three
dependency scopes of the variant and exposes the lazily resolved compile
include path, link libraries and runtime libraries to the tasks that
compile and link it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from nativedeps.binary.include_path import MaterializedIncludePath
from nativedeps.binary.names import Names
from nativedeps.binary.scopes import DependencyScopeBuilder
from nativedeps.errors import ConfigurationError
from nativedeps.files import FileCollection, FixedFileCollection
from nativedeps.resolution.engine import DependencyScope, ResolutionEngine
from nativedeps.variant.identity import TargetMachine, VariantIdentity

logger = logging.getLogger("nativedeps.binary.cpp_binary")

Files = Union[FileCollection, Iterable[Union[str, Path]]]


def _as_collection(files: Optional[Files]) -> FileCollection:
    if files is None:
        return FixedFileCollection()
    if isinstance(files, FileCollection):
        return files
    return FixedFileCollection(files)


class CppBinary:
    """One variant of a C++ component.

    Args:
        name: Binary name, e.g. ``debug`` or ``releaseLinux``.
        engine: Resolution engine the scopes are registered with.
        identity: Variant identity of this binary.
        implementation: Component-level declaration scope the binary's
            scopes extend.
        base_name: Output base name of the binary.
        sources: C++ source files.
        header_dirs: Header directories declared by the component.
        scope_builder: Builder used to create the scopes. Defaults to a
            builder over ``engine``.
    """

    def __init__(
        self,
        name: str,
        engine: ResolutionEngine,
        identity: VariantIdentity,
        implementation: Optional[DependencyScope] = None,
        base_name: Optional[str] = None,
        sources: Optional[Files] = None,
        header_dirs: Optional[Files] = None,
        scope_builder: Optional[DependencyScopeBuilder] = None,
    ) -> None:
        self.name = name
        self.names = Names(name)
        self.base_name = base_name or name
        self.identity = identity
        self._engine = engine
        self._cpp_source = _as_collection(sources)
        self._compile_task: Any = None

        builder = scope_builder or DependencyScopeBuilder(engine)
        base = (implementation,) if implementation is not None else ()
        scopes = builder.build(self.names, identity, base)

        self.include_path_scope = scopes.compile
        self.link_scope = scopes.link
        self.runtime_scope = scopes.runtime

        self._include_path = MaterializedIncludePath(
            _as_collection(header_dirs), engine, scopes.compile
        )
        self._link_libraries = engine.files(scopes.link)
        self._runtime_libraries = engine.files(scopes.runtime)

    def is_debuggable(self) -> bool:
        return self.identity.is_debuggable()

    def is_optimized(self) -> bool:
        return self.identity.is_optimized()

    @property
    def cpp_source(self) -> FileCollection:
        return self._cpp_source

    @property
    def compile_include_path(self) -> FileCollection:
        return self._include_path

    @property
    def link_libraries(self) -> FileCollection:
        return self._link_libraries

    @property
    def runtime_libraries(self) -> FileCollection:
        return self._runtime_libraries

    @property
    def target_machine(self) -> TargetMachine:
        return self.identity.target_machine

    @property
    def target_platform(self) -> Any:
        return self.identity.platform

    @property
    def toolchain(self) -> Any:
        return self.identity.toolchain

    @property
    def platform_tool_provider(self) -> Any:
        return self.identity.platform_tool_provider

    @property
    def compile_task(self) -> Any:
        return self._compile_task

    @compile_task.setter
    def compile_task(self, task: Any) -> None:
        if self._compile_task is not None:
            raise ConfigurationError(
                f"Compile task of binary '{self.name}' is already set"
            )
        self._compile_task = task

    def __repr__(self) -> str:
        return f"CppBinary(name={self.name!r}, target={self.target_machine})"
