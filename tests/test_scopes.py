"""Tests for per-binary dependency scope creation."""

from __future__ import annotations

from pathlib import Path

import pytest

from nativedeps.binary.names import Names
from nativedeps.binary.scopes import DependencyScopeBuilder
from nativedeps.errors import ConfigurationError
from nativedeps.materialize.unzip import UncheckedUnzipTransform, UnzipTransform
from nativedeps.resolution.engine import PublishedVariant, ResolutionEngine
from nativedeps.variant.attributes import AttributeSet
from nativedeps.variant.identity import Usage, VariantIdentity


def test_names_with_prefix() -> None:
    assert Names("debug").with_prefix("cppCompile") == "cppCompileDebug"
    assert Names("releaseLinux").with_prefix("nativeLink") == "nativeLinkReleaseLinux"
    assert Names("").with_prefix("nativeRuntime") == "nativeRuntime"


def test_three_scopes_share_attributes(
    engine: ResolutionEngine, linux_debug: VariantIdentity
) -> None:
    """Scopes differ only in their usage tag and extend the base scope."""
    base = engine.create_scope("implementation")
    scopes = DependencyScopeBuilder(engine).build(Names("debug"), linux_debug, [base])

    assert [s.name for s in scopes] == ["cppCompileDebug", "nativeLinkDebug", "nativeRuntimeDebug"]
    assert [s.usage for s in scopes] == [
        Usage.C_PLUS_PLUS_API,
        Usage.NATIVE_LINK,
        Usage.NATIVE_RUNTIME,
    ]
    for scope in scopes:
        assert scope.extends == (base,)
        assert not scope.can_be_consumed
        assert scope.attributes.with_usage(Usage.C_PLUS_PLUS_API) == scopes.compile.attributes
        with pytest.raises(AttributeError):
            scope.attributes = None


def test_transform_registered_once(engine: ResolutionEngine, linux_debug: VariantIdentity) -> None:
    builder = DependencyScopeBuilder(engine)
    builder.build(Names("debug"), linux_debug)
    builder.build(Names("release"), linux_debug)

    assert len(engine.transforms) == 1
    registration = engine.transforms.get(Usage.C_PLUS_PLUS_API, Usage.C_PLUS_PLUS_API_DIRS)
    assert registration.transform_type is UnzipTransform


def test_missing_identity_fails_before_creating_scopes(engine: ResolutionEngine) -> None:
    with pytest.raises(ConfigurationError):
        DependencyScopeBuilder(engine).build(Names("debug"), None)

    assert not engine.has_scope("cppCompileDebug")
    assert len(engine.transforms) == 0


def test_name_clash_leaves_no_partial_scope_set(
    engine: ResolutionEngine, linux_debug: VariantIdentity
) -> None:
    engine.create_scope("nativeRuntimeDebug")

    with pytest.raises(ConfigurationError):
        DependencyScopeBuilder(engine).build(Names("debug"), linux_debug)

    assert not engine.has_scope("cppCompileDebug")
    assert not engine.has_scope("nativeLinkDebug")


def test_conflicting_header_transform_is_rejected(
    engine: ResolutionEngine, linux_debug: VariantIdentity
) -> None:
    DependencyScopeBuilder(engine).build(Names("debug"), linux_debug)

    with pytest.raises(ConfigurationError):
        DependencyScopeBuilder(engine, UncheckedUnzipTransform).build(
            Names("release"), linux_debug
        )
    assert not engine.has_scope("cppCompileRelease")


def test_usage_selects_variants_per_scope(
    engine: ResolutionEngine, linux_debug: VariantIdentity, tmp_path: Path
) -> None:
    """A link-only dependency shows up in the link scope alone."""
    base = engine.create_scope("implementation")
    base.declare("static-only")
    engine.publish(
        "static-only",
        [
            PublishedVariant(
                name="link",
                attributes=AttributeSet(usage=Usage.NATIVE_LINK),
                artifacts=(tmp_path / "libstatic.a",),
            )
        ],
    )
    scopes = DependencyScopeBuilder(engine).build(Names("debug"), linux_debug, [base])

    assert engine.resolve(scopes.link) == [tmp_path / "libstatic.a"]
    assert engine.resolve(scopes.compile) == []
    assert engine.resolve(scopes.compile, Usage.C_PLUS_PLUS_API_DIRS) == []
    assert engine.resolve(scopes.runtime) == []
