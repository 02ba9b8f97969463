"""Creation of the compile, link and runtime scopes of a native binary.

All three scopes take their filter attributes from the same variant
identity and differ only in their usage tag. Each extends the component's
base implementation scope, so a dependency declared once is visible to all
three graphs. Creating the scopes also makes sure the header archive
transform is registered with the resolution engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Type

from nativedeps.binary.names import Names
from nativedeps.errors import ConfigurationError
from nativedeps.materialize.unzip import UnzipTransform
from nativedeps.resolution.engine import (
    DependencyScope,
    ResolutionEngine,
    ScopeDefinition,
)
from nativedeps.resolution.transforms import ArtifactTransform
from nativedeps.variant.attributes import match_attributes
from nativedeps.variant.identity import Usage, VariantIdentity

logger = logging.getLogger("nativedeps.binary.scopes")

# Scope name prefix per usage.
SCOPE_PREFIXES = {
    Usage.C_PLUS_PLUS_API: "cppCompile",
    Usage.NATIVE_LINK: "nativeLink",
    Usage.NATIVE_RUNTIME: "nativeRuntime",
}


@dataclass(frozen=True)
class BinaryScopes:
    """The three dependency scopes owned by one binary."""

    compile: DependencyScope
    link: DependencyScope
    runtime: DependencyScope

    def __iter__(self):
        return iter((self.compile, self.link, self.runtime))


class DependencyScopeBuilder:
    """Builds the dependency scopes of binaries against one engine.

    Args:
        engine: Resolution engine owning the scopes and transform registry.
        header_transform: Transform used to turn published header packages
            into directories.
    """

    def __init__(
        self,
        engine: ResolutionEngine,
        header_transform: Type[ArtifactTransform] = UnzipTransform,
    ) -> None:
        self.engine = engine
        self.header_transform = header_transform

    def build(
        self,
        names: Names,
        identity: VariantIdentity,
        base_scopes: Iterable[DependencyScope] = (),
    ) -> BinaryScopes:
        """Create the compile, link and runtime scopes for one binary.

        Args:
            names: Naming helper of the binary.
            identity: Variant identity the scopes are filtered by.
            base_scopes: Declaration scopes the new scopes extend.

        Returns:
            BinaryScopes holding the three new scopes.

        Raises:
            ConfigurationError: If the identity is missing or a scope name
                is already taken. No scope is created in that case.
        """
        if not isinstance(identity, VariantIdentity):
            raise ConfigurationError(
                f"Binary '{names.base_name}' requires a VariantIdentity, got {identity!r}"
            )
        base = tuple(base_scopes)

        definitions = [
            ScopeDefinition(
                name=names.with_prefix(SCOPE_PREFIXES[usage]),
                attributes=match_attributes(identity, usage),
                extends=base,
                consumable=False,
            )
            for usage in (Usage.C_PLUS_PLUS_API, Usage.NATIVE_LINK, Usage.NATIVE_RUNTIME)
        ]
        self.engine.transforms.register(
            Usage.C_PLUS_PLUS_API,
            Usage.C_PLUS_PLUS_API_DIRS,
            self.header_transform,
        )

        compile_scope, link_scope, runtime_scope = self.engine.create_scopes(definitions)
        logger.info(
            "Created scopes %s, %s, %s for %s (%s)",
            compile_scope.name,
            link_scope.name,
            runtime_scope.name,
            names.base_name,
            identity.target_machine,
        )
        return BinaryScopes(compile_scope, link_scope, runtime_scope)
