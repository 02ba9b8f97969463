"""Compile include path of a native binary."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from nativedeps.files import FileCollection, LazyFileCollection, unique_paths
from nativedeps.resolution.engine import DependencyScope, ResolutionEngine
from nativedeps.variant.identity import Usage

logger = logging.getLogger("nativedeps.binary.include_path")


class MaterializedIncludePath(LazyFileCollection):
    """Union of declared header directories and resolved header directories.

    Header packages contribute their extracted directory, which lives in the
    transform cache at
    ``<cache-root>/unzip/<artifact-digest>/<archive name without extension>``.
    Nothing is resolved or extracted until the include path is first read.
    The first result is kept, so repeated reads observe the same stable,
    duplicate-free list.
    """

    def __init__(
        self,
        header_dirs: FileCollection,
        engine: ResolutionEngine,
        compile_scope: DependencyScope,
    ) -> None:
        self.header_dirs = header_dirs
        self.compile_scope = compile_scope
        self.dependency_dirs = engine.artifact_view(
            compile_scope, Usage.C_PLUS_PLUS_API_DIRS
        )
        super().__init__(
            self._compute,
            description=f"include path of {compile_scope.name}",
        )

    def _compute(self) -> List[Path]:
        merged = unique_paths(
            list(self.header_dirs.get_files()) + list(self.dependency_dirs.get_files())
        )
        logger.debug(
            "Include path for %s: %s",
            self.compile_scope.name,
            [str(p) for p in merged],
        )
        return merged
