# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the AppHostGen project configuration file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from apphostgen.compiler.renderer import RenderOptions
from apphostgen.schema.catalog import ASPIRE_VERSION

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".apphostgen.yaml"

DEFAULT_OUTPUT_DIRECTORY = "generated"

DEFAULT_CONFIG_TEXT = (
    "# AppHostGen Project Configuration\n"
    "\n"
    f'aspire-version: "{ASPIRE_VERSION}"\n'
    "indent-size: 4\n"
    "include-comments: false\n"
    f"output-directory: {DEFAULT_OUTPUT_DIRECTORY}\n"
)


class ProjectConfigError(Exception):
    """Raised when a project configuration file is invalid or cannot be loaded."""


@dataclass
class ProjectConfig:
    """The parsed configuration for an AppHostGen project.

    Attributes:
        aspire_version: Version written into the SDK directive.
        indent_size: Number of spaces before each chained call.
        include_comments: Emit the display name as a comment above each declaration.
        output_directory: Default directory for generated files, relative to the working directory.
    """

    aspire_version: str = ASPIRE_VERSION
    indent_size: int = 4
    include_comments: bool = False
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY

    def to_render_options(self) -> RenderOptions:
        """Return the renderer options described by this configuration."""
        return RenderOptions(
            aspire_version=self.aspire_version,
            indent_size=self.indent_size,
            include_comments=self.include_comments,
        )


def load_project_config(path: Path) -> ProjectConfig:
    """Load and parse an AppHostGen project configuration file.

    Args:
        path: Path to the `.apphostgen.yaml` file.

    Returns:
        A ProjectConfig instance populated from the file.

    Raises:
        ProjectConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ProjectConfigError(f"Project config file not found: {path}") from None
    except OSError as exc:
        raise ProjectConfigError(f"Cannot read project config file: {exc}") from exc

    return parse_project_config(text, source_label=str(path))


def parse_project_config(text: str, source_label: str = "<string>") -> ProjectConfig:
    """Parse project config YAML text into a ProjectConfig.

    Every key is optional; an empty document yields the defaults.

    Raises:
        ProjectConfigError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ProjectConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return ProjectConfig()
    if not isinstance(data, dict):
        raise ProjectConfigError(f"{source_label}: project config must be a YAML mapping")

    config = ProjectConfig()
    if "aspire-version" in data:
        config.aspire_version = _require_string(data, "aspire-version", source_label)
    if "indent-size" in data:
        indent_size = data["indent-size"]
        if not isinstance(indent_size, int) or isinstance(indent_size, bool) or indent_size < 1:
            raise ProjectConfigError(f"{source_label}: 'indent-size' must be a positive integer")
        config.indent_size = indent_size
    if "include-comments" in data:
        include_comments = data["include-comments"]
        if not isinstance(include_comments, bool):
            raise ProjectConfigError(f"{source_label}: 'include-comments' must be a boolean")
        config.include_comments = include_comments
    if "output-directory" in data:
        config.output_directory = _require_string(data, "output-directory", source_label)
    return config


# ################
# Implementation
# ################


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a string field from a mapping, raising ProjectConfigError on a wrong type."""
    value = mapping[key]
    if not isinstance(value, str):
        raise ProjectConfigError(f"{source_label}: '{key}' must be a string")
    return value
