"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from nativedeps.config import NativeDepsConfig, load_config
from nativedeps.context import create_build_context
from nativedeps.errors import ConfigurationError
from nativedeps.materialize.unzip import UncheckedUnzipTransform, UnzipTransform


def test_defaults() -> None:
    config = load_config(None)

    assert config == NativeDepsConfig()
    assert config.cache_dir == Path(".nativedeps_cache")
    assert config.transforms_dir == Path(".nativedeps_cache") / "transforms"
    assert config.verify_member_paths is True
    assert config.max_workers == 4


def test_load_from_toml_file(tmp_path: Path) -> None:
    path = tmp_path / "nativedeps.toml"
    path.write_text('[nativedeps]\ncache_dir = "build/cache"\nmax_workers = 2\n')

    config = load_config(path)

    assert config.cache_dir == Path("build/cache")
    assert config.max_workers == 2


def test_load_from_json_and_inline_text(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"verify_member_paths": false}')

    assert load_config(path).verify_member_paths is False
    assert load_config('{"max_workers": 8}').max_workers == 8
    assert load_config("max_workers = 3").max_workers == 3
    assert load_config({"nativedeps": {"max_workers": 5}}).max_workers == 5


@pytest.mark.parametrize(
    "source",
    [
        {"max_workers": 0},
        {"unknown_option": True},
        {"cache_dir": "  "},
        "max_workers = = 3",
        "missing.toml",
    ],
)
def test_invalid_configuration(source) -> None:
    with pytest.raises(ConfigurationError):
        load_config(source)


def test_context_honours_member_path_verification(tmp_path: Path) -> None:
    checked = create_build_context(NativeDepsConfig(cache_dir=tmp_path))
    unchecked = create_build_context(
        NativeDepsConfig(cache_dir=tmp_path, verify_member_paths=False)
    )

    assert checked.scope_builder.header_transform is UnzipTransform
    assert unchecked.scope_builder.header_transform is UncheckedUnzipTransform
    assert checked.engine.transform_cache.root == tmp_path / "transforms"
