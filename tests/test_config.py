"""Tests for the catalog configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from patdoc.config import (
    DEFAULT_SEVERITIES,
    Config,
    config_from_dict,
    find_config_file,
    load_config,
)
from patdoc.parser import Category, SectionKind


def test_defaults_describe_the_guide(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    assert config == Config()
    assert config.expected_total == 21
    assert config.required_sections == list(SectionKind)
    assert config.severity("broken-link") == "error"
    assert config.severity("external-link") == "warning"


def test_load_config_from_yaml(tmp_path: Path) -> None:
    (tmp_path / "patdoc.yaml").write_text(
        "index_file: README.md\n"
        "expected_counts:\n"
        "  design-patterns: 23\n"
        "required_sections:\n"
        "  - Definition\n"
        "  - 💻 Code Example\n"
        "rules:\n"
        "  missing-section: error\n"
        "  catalog-size: off\n"
        "external_timeout: 3\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)
    assert config.index_file == "README.md"
    assert config.expected_counts == {Category.DESIGN_PATTERN: 23}
    assert config.expected_total == 23
    assert config.required_sections == [
        SectionKind.DEFINITION,
        SectionKind.WORKED_EXAMPLE,
    ]
    assert config.severity("missing-section") == "error"
    assert config.severity("catalog-size") == "off"
    assert config.severity("broken-link") == "error"
    assert config.external_timeout == 3.0


def test_empty_counts_disable_size_check() -> None:
    config = config_from_dict({"expected_counts": None})
    assert config.expected_counts == {}
    assert config.expected_total is None


@pytest.mark.parametrize(
    "data",
    [
        {"colour": "blue"},
        {"rules": {"no-such-rule": "error"}},
        {"rules": {"broken-link": "fatal"}},
        {"required_sections": ["Further reading"]},
        {"expected_counts": {"recipes": 3}},
    ],
)
def test_invalid_configuration(data: dict) -> None:
    with pytest.raises(ValueError):
        config_from_dict(data)


def test_configuration_must_be_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "patdoc.yaml"
    path.write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(tmp_path)


def test_find_config_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    assert find_config_file(tmp_path) is None

    hidden = tmp_path / ".patdoc.yml"
    hidden.write_text("{}\n", encoding="utf-8")
    assert find_config_file(tmp_path) == hidden

    other = tmp_path / "custom.yaml"
    monkeypatch.setenv("PATDOC_CONFIG", str(other))
    assert find_config_file(tmp_path) == other


def test_every_rule_has_a_default() -> None:
    assert set(Config().rules) == set(DEFAULT_SEVERITIES)
