# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the project configuration module."""

from pathlib import Path

import pytest

from apphostgen.compiler.renderer import RenderOptions
from apphostgen.schema.catalog import ASPIRE_VERSION
from apphostgen.workspace import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    ProjectConfig,
    ProjectConfigError,
    load_project_config,
    parse_project_config,
)

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a project config file and return its path."""
    config_file = tmp_path / CONFIG_FILE_NAME
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_full_config(tmp_path: Path) -> None:
    """Every key is read into the matching ProjectConfig field."""
    content = """\
aspire-version: "13.1.0"
indent-size: 2
include-comments: true
output-directory: out/apphost
"""
    config = load_project_config(_write_config(tmp_path, content))

    assert config == ProjectConfig(
        aspire_version="13.1.0",
        indent_size=2,
        include_comments=True,
        output_directory="out/apphost",
    )


def test_empty_config_gives_defaults() -> None:
    """An empty document yields the default configuration."""
    config = parse_project_config("")
    assert config == ProjectConfig()
    assert config.aspire_version == ASPIRE_VERSION


def test_partial_config_keeps_other_defaults() -> None:
    """Keys that are absent keep their default values."""
    config = parse_project_config("include-comments: true\n")
    assert config.include_comments is True
    assert config.indent_size == 4


def test_default_config_text_round_trips() -> None:
    """The file written by init parses back to the defaults."""
    assert parse_project_config(DEFAULT_CONFIG_TEXT) == ProjectConfig()


def test_to_render_options() -> None:
    """The config converts to renderer options field by field."""
    config = ProjectConfig(aspire_version="13.2.0", indent_size=8, include_comments=True)
    assert config.to_render_options() == RenderOptions(aspire_version="13.2.0", indent_size=8, include_comments=True)


# ###############
# Error Cases
# ###############


def test_missing_file_raises(tmp_path: Path) -> None:
    """A missing config file raises ProjectConfigError."""
    with pytest.raises(ProjectConfigError, match="not found"):
        load_project_config(tmp_path / "nope.yaml")


def test_invalid_yaml_raises() -> None:
    """Malformed YAML raises ProjectConfigError."""
    with pytest.raises(ProjectConfigError, match="Invalid YAML"):
        parse_project_config("indent-size: [4\n")


def test_non_mapping_raises() -> None:
    """A top-level list is not a valid config."""
    with pytest.raises(ProjectConfigError, match="must be a YAML mapping"):
        parse_project_config("- a\n- b\n")


@pytest.mark.parametrize("value", ["0", "-2", "two", "true", "2.5"])
def test_bad_indent_size_raises(value: str) -> None:
    """indent-size must be a positive integer."""
    with pytest.raises(ProjectConfigError, match="'indent-size' must be a positive integer"):
        parse_project_config(f"indent-size: {value}\n")


def test_bad_include_comments_raises() -> None:
    """include-comments must be a boolean."""
    with pytest.raises(ProjectConfigError, match="'include-comments' must be a boolean"):
        parse_project_config("include-comments: sometimes\n")


def test_numeric_version_raises() -> None:
    """An unquoted version that YAML reads as a number is rejected."""
    with pytest.raises(ProjectConfigError, match="'aspire-version' must be a string"):
        parse_project_config("aspire-version: 13.0\n")
