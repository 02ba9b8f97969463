"""Tests for the in-memory resolution engine."""

from __future__ import annotations

from pathlib import Path

import pytest

from nativedeps.errors import ConfigurationError, ResolutionError
from nativedeps.materialize.unzip import UnzipTransform
from nativedeps.resolution.engine import PublishedVariant, ResolutionEngine, ScopeDefinition
from nativedeps.variant.attributes import AttributeSet, match_attributes
from nativedeps.variant.identity import Usage, VariantIdentity


def _variant(name: str, usage: Usage, *artifacts: Path, deps=(), **attrs) -> PublishedVariant:
    return PublishedVariant(
        name=name,
        attributes=AttributeSet(usage=usage, **attrs),
        artifacts=artifacts,
        dependencies=tuple(deps),
    )


def test_scope_inherits_base_declarations(engine: ResolutionEngine, tmp_path: Path) -> None:
    base = engine.create_scope("implementation")
    base.declare("zlib")
    scope = engine.create_scope(
        "nativeLinkDebug",
        AttributeSet(usage=Usage.NATIVE_LINK),
        extends=[base],
    )
    scope.declare("ssl", "zlib")
    engine.publish("zlib", [_variant("link", Usage.NATIVE_LINK, tmp_path / "libz.a")])
    engine.publish("ssl", [_variant("link", Usage.NATIVE_LINK, tmp_path / "libssl.a")])

    assert not scope.can_be_consumed
    assert scope.all_declared() == ["ssl", "zlib"]
    assert engine.resolve(scope) == [tmp_path / "libssl.a", tmp_path / "libz.a"]


def test_duplicate_scope_names_create_nothing(engine: ResolutionEngine) -> None:
    engine.create_scope("taken")

    with pytest.raises(ConfigurationError):
        engine.create_scope("taken")
    with pytest.raises(ConfigurationError):
        engine.create_scopes([ScopeDefinition("fresh"), ScopeDefinition("taken")])
    assert not engine.has_scope("fresh")


def test_resolution_follows_transitive_dependencies(
    engine: ResolutionEngine, linux_debug: VariantIdentity, tmp_path: Path
) -> None:
    """Dependencies of selected variants are resolved with the same attributes."""
    scope = engine.create_scope("runtime", match_attributes(linux_debug, Usage.NATIVE_RUNTIME))
    scope.declare("app-lib")
    engine.publish(
        "app-lib",
        [_variant("rt", Usage.NATIVE_RUNTIME, tmp_path / "libapp.so", deps=["zlib"])],
    )
    engine.publish(
        "zlib",
        [
            _variant("rt-debug", Usage.NATIVE_RUNTIME, tmp_path / "libz-d.so", debuggable=True),
            _variant("rt-release", Usage.NATIVE_RUNTIME, tmp_path / "libz.so", debuggable=False),
        ],
    )

    assert engine.resolve(scope) == [tmp_path / "libapp.so", tmp_path / "libz-d.so"]


def test_dependency_cycles_terminate(engine: ResolutionEngine, tmp_path: Path) -> None:
    scope = engine.create_scope("link", AttributeSet(usage=Usage.NATIVE_LINK))
    scope.declare("a")
    engine.publish("a", [_variant("l", Usage.NATIVE_LINK, tmp_path / "a.a", deps=["b"])])
    engine.publish("b", [_variant("l", Usage.NATIVE_LINK, tmp_path / "b.a", deps=["a"])])

    assert engine.resolve(scope) == [tmp_path / "a.a", tmp_path / "b.a"]
    assert engine.dependency_cycles() in ([["a", "b"]], [["b", "a"]])


def test_incompatible_variant_is_a_resolution_error(
    engine: ResolutionEngine, linux_debug: VariantIdentity, tmp_path: Path
) -> None:
    scope = engine.create_scope("link", match_attributes(linux_debug, Usage.NATIVE_LINK))
    scope.declare("winlib")
    engine.publish(
        "winlib",
        [_variant("l", Usage.NATIVE_LINK, tmp_path / "w.lib", operating_system_family="windows")],
    )

    with pytest.raises(ResolutionError) as excinfo:
        engine.resolve(scope)
    assert excinfo.value.component == "winlib"


def test_ambiguous_and_unknown_components(engine: ResolutionEngine, tmp_path: Path) -> None:
    scope = engine.create_scope("link", AttributeSet(usage=Usage.NATIVE_LINK))
    scope.declare("dup")
    engine.publish(
        "dup",
        [
            _variant("one", Usage.NATIVE_LINK, tmp_path / "1.a"),
            _variant("two", Usage.NATIVE_LINK, tmp_path / "2.a"),
        ],
    )
    with pytest.raises(ResolutionError, match="ambiguous"):
        engine.resolve(scope)

    other = engine.create_scope("other", AttributeSet(usage=Usage.NATIVE_LINK))
    other.declare("ghost")
    with pytest.raises(ResolutionError, match="not published"):
        engine.resolve(other)


def test_attributeless_scope_cannot_be_resolved(engine: ResolutionEngine) -> None:
    with pytest.raises(ConfigurationError):
        engine.resolve(engine.create_scope("implementation"))


def test_artifact_view_applies_registered_transform(
    engine: ResolutionEngine, make_zip, tmp_path: Path
) -> None:
    """Archives published under the API usage are extracted for the dirs view."""
    registration = engine.transforms.register(
        Usage.C_PLUS_PLUS_API, Usage.C_PLUS_PLUS_API_DIRS, UnzipTransform
    )
    archive = make_zip("headers.zip", {"a.h": b"a"})
    exploded = tmp_path / "exploded"
    exploded.mkdir()
    scope = engine.create_scope("compile", AttributeSet(usage=Usage.C_PLUS_PLUS_API))
    scope.declare("zipped", "plain")
    engine.publish("zipped", [_variant("api", Usage.C_PLUS_PLUS_API, archive)])
    engine.publish("plain", [_variant("api", Usage.C_PLUS_PLUS_API, exploded)])

    view = engine.artifact_view(scope, Usage.C_PLUS_PLUS_API_DIRS)
    assert not view.is_resolved

    expected = engine.transform_cache.output_directory_for(registration, archive) / "headers"
    assert view.get_files() == [expected, exploded]
    assert (expected / "a.h").read_bytes() == b"a"
    assert engine.resolve(scope) == [archive, exploded]


def test_dirs_published_directly_are_preferred(engine: ResolutionEngine, tmp_path: Path) -> None:
    engine.transforms.register(Usage.C_PLUS_PLUS_API, Usage.C_PLUS_PLUS_API_DIRS, UnzipTransform)
    scope = engine.create_scope("compile", AttributeSet(usage=Usage.C_PLUS_PLUS_API))
    scope.declare("both")
    engine.publish(
        "both",
        [
            _variant("api", Usage.C_PLUS_PLUS_API, tmp_path / "both.zip"),
            _variant("dirs", Usage.C_PLUS_PLUS_API_DIRS, tmp_path / "both-include"),
        ],
    )

    assert engine.resolve(scope, Usage.C_PLUS_PLUS_API_DIRS) == [tmp_path / "both-include"]
