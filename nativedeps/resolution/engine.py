"""In-memory dependency resolution engine.

The engine keeps the published variants of every known component in a
networkx graph, owns the dependency scopes created by binaries and resolves
a scope into files. Resolution selects one compatible variant per declared
component, follows the variant's own dependencies transitively, and applies
registered transforms when an artifact view requests a usage the variant
was not published under.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import networkx as nx

from nativedeps.errors import ConfigurationError, ResolutionError
from nativedeps.files import LazyFileCollection, unique_paths
from nativedeps.resolution.transforms import (
    TransformCache,
    TransformRegistration,
    TransformRegistry,
)
from nativedeps.variant.attributes import AttributeSet
from nativedeps.variant.identity import Usage

logger = logging.getLogger("nativedeps.resolution.engine")


@dataclass(frozen=True)
class PublishedVariant:
    """One variant published by a component.

    Attributes:
        name: Variant name, unique within its component.
        attributes: Attributes the variant was published with.
        artifacts: Files (archives or directories) the variant provides.
        dependencies: Names of components this variant depends on.
    """

    name: str
    attributes: AttributeSet
    artifacts: Tuple[Path, ...] = ()
    dependencies: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "artifacts", tuple(Path(a) for a in self.artifacts))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))


@dataclass(frozen=True)
class ScopeDefinition:
    """Everything needed to create a dependency scope."""

    name: str
    attributes: Optional[AttributeSet] = None
    extends: Tuple["DependencyScope", ...] = ()
    consumable: bool = False


class DependencyScope:
    """Named set of dependency declarations resolved under fixed attributes.

    The filter attributes are fixed at creation and cannot be reassigned.
    A scope without attributes only collects declarations for other scopes
    to extend and cannot be resolved itself.
    """

    def __init__(self, definition: ScopeDefinition) -> None:
        self._name = definition.name
        self._attributes = definition.attributes
        self._extends = tuple(definition.extends)
        self._consumable = definition.consumable
        self._declared: List[str] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def attributes(self) -> Optional[AttributeSet]:
        return self._attributes

    @property
    def usage(self) -> Optional[Usage]:
        return self._attributes.usage if self._attributes is not None else None

    @property
    def extends(self) -> Tuple["DependencyScope", ...]:
        return self._extends

    @property
    def can_be_consumed(self) -> bool:
        return self._consumable

    def declare(self, *components: str) -> None:
        """Declare dependencies on the given components."""
        with self._lock:
            for component in components:
                if component not in self._declared:
                    self._declared.append(component)

    @property
    def declared(self) -> List[str]:
        """Components declared directly on this scope."""
        with self._lock:
            return list(self._declared)

    def all_declared(self) -> List[str]:
        """Components declared on this scope and every scope it extends."""
        result: List[str] = []
        seen_scopes = set()
        stack = [self]
        while stack:
            scope = stack.pop(0)
            if id(scope) in seen_scopes:
                continue
            seen_scopes.add(id(scope))
            for component in scope.declared:
                if component not in result:
                    result.append(component)
            stack.extend(scope.extends)
        return result

    def __repr__(self) -> str:
        usage = self.usage.value if self.usage else None
        return f"DependencyScope(name={self._name!r}, usage={usage!r})"


class ResolutionEngine:
    """Resolves dependency scopes against published component variants."""

    def __init__(
        self,
        transform_cache: TransformCache,
        transforms: Optional[TransformRegistry] = None,
    ) -> None:
        self.transform_cache = transform_cache
        self.transforms = transforms or TransformRegistry()
        # component name -> {"variants": [PublishedVariant, ...]}
        self._components = nx.DiGraph()
        self._scopes: Dict[str, DependencyScope] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def publish(self, component: str, variants: Sequence[PublishedVariant]) -> None:
        """Publish (or replace) the variants of ``component``."""
        names = [variant.name for variant in variants]
        if len(set(names)) != len(names):
            raise ConfigurationError(
                f"Component '{component}' publishes duplicate variant names: {names}"
            )
        with self._lock:
            if self._components.has_node(component):
                self._components.remove_edges_from(
                    list(self._components.out_edges(component))
                )
            self._components.add_node(component, variants=list(variants))
            for variant in variants:
                for dependency in variant.dependencies:
                    self._components.add_edge(component, dependency)
        logger.debug("Published %s with %d variant(s)", component, len(variants))

    def variants_of(self, component: str) -> List[PublishedVariant]:
        with self._lock:
            if not self._components.has_node(component):
                return []
            return list(self._components.nodes[component].get("variants", []))

    def has_component(self, component: str) -> bool:
        with self._lock:
            return "variants" in self._components.nodes.get(component, {})

    def dependency_cycles(self) -> List[List[str]]:
        """Return cycles in the published component dependency graph."""
        with self._lock:
            return [list(cycle) for cycle in nx.simple_cycles(self._components)]

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def create_scope(
        self,
        name: str,
        attributes: Optional[AttributeSet] = None,
        extends: Iterable[DependencyScope] = (),
        consumable: bool = False,
    ) -> DependencyScope:
        """Create a single dependency scope."""
        definition = ScopeDefinition(name, attributes, tuple(extends), consumable)
        return self.create_scopes([definition])[0]

    def create_scopes(self, definitions: Sequence[ScopeDefinition]) -> List[DependencyScope]:
        """Create several scopes atomically.

        Either every scope is created or, if any name is taken or repeated,
        none is.
        """
        names = [definition.name for definition in definitions]
        with self._lock:
            clashes = sorted(
                {name for name in names if name in self._scopes or names.count(name) > 1}
            )
            if clashes:
                raise ConfigurationError(
                    f"Dependency scope(s) already exist: {', '.join(clashes)}"
                )
            scopes = [DependencyScope(definition) for definition in definitions]
            for scope in scopes:
                self._scopes[scope.name] = scope
        for scope in scopes:
            logger.debug("Created scope %r", scope)
        return scopes

    def get_scope(self, name: str) -> Optional[DependencyScope]:
        with self._lock:
            return self._scopes.get(name)

    def has_scope(self, name: str) -> bool:
        with self._lock:
            return name in self._scopes

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _select(
        self, component: str, requested: AttributeSet
    ) -> Optional[Tuple[PublishedVariant, List[TransformRegistration]]]:
        """Pick the variant of ``component`` compatible with ``requested``.

        Returns None when the component publishes nothing usable under the
        requested usage, either directly or through a transform chain.
        """
        variants = self.variants_of(component)
        if not variants and not self.has_component(component):
            raise ResolutionError(component, "component is not published")

        direct = [v for v in variants if requested.matches(v.attributes)]
        if len(direct) == 1:
            return direct[0], []
        if len(direct) > 1:
            raise ResolutionError(
                component,
                f"ambiguous variants {[v.name for v in direct]} for "
                f"{requested.describe()}",
            )

        relevant = False
        convertible: List[Tuple[PublishedVariant, List[TransformRegistration]]] = []
        for variant in variants:
            source_usage = variant.attributes.usage
            if source_usage == requested.usage:
                relevant = True
                continue
            chain = self.transforms.find_chain(source_usage, requested.usage)
            if chain is None:
                continue
            relevant = True
            if requested.with_usage(source_usage).matches(variant.attributes):
                convertible.append((variant, chain))

        if len(convertible) == 1:
            return convertible[0]
        if len(convertible) > 1:
            raise ResolutionError(
                component,
                f"ambiguous variants {[v.name for v, _ in convertible]} for "
                f"{requested.describe()}",
            )
        if relevant:
            raise ResolutionError(
                component,
                f"no variant compatible with {requested.describe()}; published: "
                f"{[v.attributes.describe() for v in variants]}",
            )
        logger.debug(
            "Component %s has no variant with usage %s; skipped",
            component,
            requested.usage.value,
        )
        return None

    def resolve(self, scope: DependencyScope, usage: Optional[Usage] = None) -> List[Path]:
        """Resolve ``scope`` into files, optionally viewed under ``usage``.

        Args:
            scope: Scope to resolve. Must carry filter attributes.
            usage: Usage to request instead of the scope's own usage.

        Returns:
            Ordered, de-duplicated list of resolved files.

        Raises:
            ConfigurationError: If the scope has no attributes.
            ResolutionError: If a declared component cannot be resolved.
        """
        if scope.attributes is None:
            raise ConfigurationError(
                f"Scope '{scope.name}' has no attributes and cannot be resolved"
            )
        requested = scope.attributes if usage is None else scope.attributes.with_usage(usage)

        root = f"scope:{scope.name}"
        result_graph = nx.DiGraph()
        result_graph.add_node(root)
        selections: Dict[str, Tuple[PublishedVariant, List[TransformRegistration]]] = {}
        skipped = set()

        queue = [(root, component) for component in scope.all_declared()]
        while queue:
            parent, component = queue.pop(0)
            if component in skipped:
                continue
            if component not in selections:
                selection = self._select(component, requested)
                if selection is None:
                    skipped.add(component)
                    continue
                selections[component] = selection
                queue.extend(
                    (component, dependency) for dependency in selection[0].dependencies
                )
            result_graph.add_edge(parent, component)

        ordered = [node for node in nx.dfs_preorder_nodes(result_graph, root) if node != root]

        files: List[Path] = []
        for component in ordered:
            variant, chain = selections[component]
            for artifact in variant.artifacts:
                files.extend(self.transform_cache.apply_chain(chain, artifact))

        resolved = unique_paths(files)
        logger.debug(
            "Resolved %s (%s): %d component(s), %d file(s)",
            scope.name,
            requested.usage.value,
            len(ordered),
            len(resolved),
        )
        return resolved

    def files(self, scope: DependencyScope) -> LazyFileCollection:
        """Return a lazy view over the scope resolved under its own usage."""
        return LazyFileCollection(
            lambda: self.resolve(scope),
            description=f"{scope.name} files",
        )

    def artifact_view(self, scope: DependencyScope, usage: Usage) -> LazyFileCollection:
        """Return a lazy view over the scope resolved under ``usage``."""
        usage = Usage(usage)
        return LazyFileCollection(
            lambda: self.resolve(scope, usage),
            description=f"{scope.name} as {usage.value}",
        )


__all__ = [
    "DependencyScope",
    "PublishedVariant",
    "ResolutionEngine",
    "ScopeDefinition",
]
