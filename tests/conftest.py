"""Shared fixtures for nativedeps tests."""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Callable, Dict

import pytest

from nativedeps.resolution.engine import ResolutionEngine
from nativedeps.resolution.transforms import TransformCache
from nativedeps.variant.identity import (
    MachineArchitecture,
    OperatingSystemFamily,
    TargetMachine,
    VariantIdentity,
)

ZipFactory = Callable[..., Path]


@pytest.fixture
def make_zip(tmp_path: Path) -> ZipFactory:
    """Return a factory writing ZIP archives under ``tmp_path/repo``."""

    def _make(name: str, entries: Dict[str, bytes], dirs: tuple = ()) -> Path:
        repo = tmp_path / "repo"
        repo.mkdir(exist_ok=True)
        archive = repo / name
        with zipfile.ZipFile(archive, "w") as zf:
            for directory in dirs:
                zf.writestr(zipfile.ZipInfo(directory.rstrip("/") + "/"), b"")
            for entry, content in entries.items():
                zf.writestr(entry, content)
        return archive

    return _make


@pytest.fixture
def linux_debug() -> VariantIdentity:
    return VariantIdentity(
        name="debug",
        debuggable=True,
        optimized=False,
        target_machine=TargetMachine(
            operating_system_family=OperatingSystemFamily.LINUX,
            architecture=MachineArchitecture.X86_64,
        ),
    )


@pytest.fixture
def engine(tmp_path: Path) -> ResolutionEngine:
    return ResolutionEngine(TransformCache(tmp_path / "cache" / "transforms"))
