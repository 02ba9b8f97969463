"""Artifact transform registry and transform output cache.

The registry maps a (from-usage, to-usage) pair to a transform type and is
owned by the resolution context of one build. The cache hands every
(transform, input artifact) pair an exclusive output directory, runs the
transform at most once per pair and memoises the result.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Type

import networkx as nx

from nativedeps.errors import ConfigurationError
from nativedeps.variant.identity import Usage

logger = logging.getLogger("nativedeps.resolution.transforms")


class ArtifactTransform(ABC):
    """Transform from one input artifact to a list of output files.

    Instances are created by the TransformCache with an output directory
    that belongs exclusively to one input artifact.
    """

    name: str = "transform"

    def __init__(self, output_directory: Path) -> None:
        self.output_directory = Path(output_directory)

    @abstractmethod
    def transform(self, artifact: Path) -> List[Path]:
        """Transform ``artifact`` and return the produced files."""
        pass


@dataclass(frozen=True)
class TransformRegistration:
    """One registered usage-to-usage transform."""

    from_usage: Usage
    to_usage: Usage
    transform_type: Type[ArtifactTransform]

    @property
    def name(self) -> str:
        return self.transform_type.name


class TransformRegistry:
    """Registry of usage transforms for one build.

    Registrations are stored as edges of a usage graph, so a chain of
    transforms between two usages can be found with a shortest path query.
    """

    def __init__(self) -> None:
        self._usage_graph = nx.DiGraph()
        self._lock = threading.Lock()

    def register(
        self,
        from_usage: Usage,
        to_usage: Usage,
        transform_type: Type[ArtifactTransform],
    ) -> TransformRegistration:
        """Register ``transform_type`` for the given usage pair.

        Registering the same transform for the same pair again is a no-op.

        Raises:
            ConfigurationError: If the pair is registered with a different
                transform, or maps a usage onto itself.
        """
        from_usage = Usage(from_usage)
        to_usage = Usage(to_usage)
        if from_usage == to_usage:
            raise ConfigurationError(
                f"Transform {transform_type.__name__} maps usage "
                f"'{from_usage.value}' onto itself"
            )

        with self._lock:
            if self._usage_graph.has_edge(from_usage, to_usage):
                existing: TransformRegistration = self._usage_graph.edges[
                    from_usage, to_usage
                ]["registration"]
                if existing.transform_type is not transform_type:
                    raise ConfigurationError(
                        f"Usage pair {from_usage.value} -> {to_usage.value} is already "
                        f"registered with {existing.transform_type.__name__}"
                    )
                logger.debug(
                    "Transform %s already registered for %s -> %s",
                    transform_type.__name__,
                    from_usage.value,
                    to_usage.value,
                )
                return existing

            registration = TransformRegistration(from_usage, to_usage, transform_type)
            self._usage_graph.add_edge(from_usage, to_usage, registration=registration)
            logger.info(
                "Registered transform %s for %s -> %s",
                transform_type.__name__,
                from_usage.value,
                to_usage.value,
            )
            return registration

    def get(self, from_usage: Usage, to_usage: Usage) -> Optional[TransformRegistration]:
        with self._lock:
            if not self._usage_graph.has_edge(from_usage, to_usage):
                return None
            return self._usage_graph.edges[from_usage, to_usage]["registration"]

    def find_chain(
        self, from_usage: Usage, to_usage: Usage
    ) -> Optional[List[TransformRegistration]]:
        """Return the shortest chain of transforms from one usage to another.

        Returns an empty list when the usages are equal and None when no
        chain exists.
        """
        if from_usage == to_usage:
            return []
        with self._lock:
            if from_usage not in self._usage_graph or to_usage not in self._usage_graph:
                return None
            try:
                path = nx.shortest_path(self._usage_graph, from_usage, to_usage)
            except nx.NetworkXNoPath:
                return None
            return [
                self._usage_graph.edges[src, dst]["registration"]
                for src, dst in zip(path, path[1:])
            ]

    def __len__(self) -> int:
        with self._lock:
            return self._usage_graph.number_of_edges()


class TransformCache:
    """Runs transforms into exclusive output directories and memoises results.

    Output layout: ``<root>/<transform-name>/<artifact-digest>/``. The digest
    covers the absolute input path and, for files, their content. Distinct
    artifacts never share an output directory, repeated requests for the same
    artifact land in the same place, and an artifact rewritten in place gets
    a fresh directory instead of the stale output of its previous content.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._results: Dict[Tuple[str, str], List[Path]] = {}
        self._key_locks: Dict[Tuple[str, str], threading.Lock] = {}
        self._lock = threading.Lock()
        self.executions = 0

    @staticmethod
    def artifact_digest(artifact: Path) -> str:
        """Digest of the artifact's absolute path plus the bytes of a file artifact."""
        artifact = Path(artifact).absolute()
        sha = hashlib.sha256(str(artifact).encode("utf-8"))
        if artifact.is_file():
            try:
                with open(artifact, "rb") as stream:
                    for chunk in iter(lambda: stream.read(1024 * 1024), b""):
                        sha.update(chunk)
            except OSError as exc:
                # The transform reads the artifact itself and reports the failure.
                logger.debug("Could not hash %s: %s", artifact, exc)
                return hashlib.sha256(str(artifact).encode("utf-8")).hexdigest()[:16]
        return sha.hexdigest()[:16]

    def output_directory_for(
        self, registration: TransformRegistration, artifact: Path
    ) -> Path:
        """Return the exclusive output directory for ``artifact``."""
        return self.root / registration.name / self.artifact_digest(artifact)

    def _key_lock(self, key: Tuple[str, str]) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock

    def apply(self, registration: TransformRegistration, artifact: Path) -> List[Path]:
        """Transform ``artifact`` once and return the (possibly cached) outputs.

        Failures propagate to the caller unchanged and are not cached.
        """
        artifact = Path(artifact).absolute()
        digest = self.artifact_digest(artifact)
        key = (registration.name, digest)

        cached = self._results.get(key)
        if cached is not None:
            logger.debug("Transform cache hit: %s(%s)", registration.name, artifact)
            return list(cached)

        with self._key_lock(key):
            cached = self._results.get(key)
            if cached is not None:
                logger.debug("Transform cache hit: %s(%s)", registration.name, artifact)
                return list(cached)

            output_directory = self.root / registration.name / digest
            transform = registration.transform_type(output_directory)
            outputs = [Path(p) for p in transform.transform(artifact)]
            with self._lock:
                self.executions += 1
                self._results[key] = outputs
            return list(outputs)

    def apply_chain(
        self, chain: List[TransformRegistration], artifact: Path
    ) -> List[Path]:
        """Run ``artifact`` through every transform of ``chain`` in order."""
        current = [Path(artifact)]
        for registration in chain:
            produced: List[Path] = []
            for item in current:
                produced.extend(self.apply(registration, item))
            current = produced
        return current


__all__ = [
    "ArtifactTransform",
    "TransformCache",
    "TransformRegistration",
    "TransformRegistry",
]
