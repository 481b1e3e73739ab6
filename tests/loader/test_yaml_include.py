"""Tests for YAML loading, include: directives and templates."""

import sys
from pathlib import Path

import pytest

from culprit.core.config import State
from culprit.core.yaml_settings import (
    YamlWithIncludesSettingsSource,
    _cli_includes,
)


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def bare_argv(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["culprit"])


def _load(path):
    return YamlWithIncludesSettingsSource(State, yaml_file=str(path))()


def test_package_defaults_always_load(fixtures_dir, bare_argv):
    data = _load(fixtures_dir / "minimal.yaml")

    commands = data["config"]["host"]["commands"]
    assert commands["disable"] == "wp plugin deactivate {slug}"
    assert "mu-plugins/" in data["config"]["protected"]["path_fragments"]


def test_project_file_overrides_defaults(fixtures_dir, bare_argv):
    data = _load(fixtures_dir / "minimal.yaml")

    assert data["config"]["session_name"] == "minimal"
    assert data["config"]["host"]["timeout"] == 30
    # Sibling keys from the defaults survive the deep merge
    assert data["config"]["host"]["commands"]["enable"] == (
        "wp plugin activate {slug}"
    )


def test_include_merges_underneath_including_file(fixtures_dir, bare_argv):
    data = _load(fixtures_dir / "with_include.yaml")

    commands = data["config"]["host"]["commands"]
    assert commands["list"] == "cat enabled.txt"
    assert commands["name"] == "grep -h Name {unit}"
    assert data["config"]["session_name"] == "with-include"


def test_nested_includes(fixtures_dir, bare_argv):
    """nested_include -> with_include -> extra_commands."""
    data = _load(fixtures_dir / "nested_include.yaml")

    assert data["config"]["host"]["commands"]["list"] == "cat enabled.txt"
    assert data["config"]["session_name"] == "nested"


def test_circular_include_is_an_error(fixtures_dir, bare_argv):
    with pytest.raises(ValueError, match="Circular include"):
        _load(fixtures_dir / "circular_a.yaml")


def test_missing_project_file_is_skipped(tmp_path, bare_argv):
    data = _load(tmp_path / "absent.yaml")

    assert data["config"]["host"]["timeout"] == 120


def test_cli_include_wins(fixtures_dir, monkeypatch):
    monkeypatch.setattr(sys, "argv", [
        "culprit", "--include", str(fixtures_dir / "extra_commands.yaml"),
        "search",
    ])

    data = _load(fixtures_dir / "minimal.yaml")

    assert data["config"]["host"]["commands"]["list"] == "cat enabled.txt"


def test_cli_includes_parsing():
    argv = ["culprit", "--include", "a.yaml", "scan", "--include", "b.yaml",
            "--include"]

    assert _cli_includes(argv) == ["a.yaml", "b.yaml"]


def test_templates_substituted_but_unit_placeholders_kept(
    tmp_path, monkeypatch, bare_argv
):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "culprit.yaml").write_text(
        "config:\n"
        "  session_name: templated\n"
        f"  log_root: {tmp_path}/logs/{{config.session_name}}\n"
    )

    state = State()

    assert state.config.log_root == tmp_path / "logs" / "templated"
    assert state.config.host.commands["disable"] == (
        "wp plugin deactivate {slug}"
    )
