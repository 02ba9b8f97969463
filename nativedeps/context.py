"""Build-wide resolution context."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from nativedeps.binary.scopes import DependencyScopeBuilder
from nativedeps.config.schema import NativeDepsConfig
from nativedeps.materialize.unzip import UncheckedUnzipTransform, UnzipTransform
from nativedeps.resolution.engine import ResolutionEngine
from nativedeps.resolution.transforms import TransformCache, TransformRegistry

logger = logging.getLogger("nativedeps.context")


@dataclass
class BuildContext:
    """Objects shared by every binary of one build.

    Attributes:
        config: Build configuration.
        engine: Resolution engine, owning the transform registry and cache.
        scope_builder: Builder creating per-binary scopes against ``engine``.
    """

    config: NativeDepsConfig
    engine: ResolutionEngine
    scope_builder: DependencyScopeBuilder


def create_build_context(config: Optional[NativeDepsConfig] = None) -> BuildContext:
    """Create the resolution context for one build."""
    config = config or NativeDepsConfig()
    cache = TransformCache(config.transforms_dir)
    engine = ResolutionEngine(cache, TransformRegistry())
    header_transform = (
        UnzipTransform if config.verify_member_paths else UncheckedUnzipTransform
    )
    logger.info("Build context created (transform cache: %s)", cache.root)
    return BuildContext(
        config=config,
        engine=engine,
        scope_builder=DependencyScopeBuilder(engine, header_transform),
    )
