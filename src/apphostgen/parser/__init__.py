# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reverse parsers that reconstruct topologies from AppHost, compose and Dockerfile text."""

from apphostgen.parser.apphost import AppHostParser, parse_apphost
from apphostgen.parser.base import FIRST_IMPORTED_ID, IdAllocator, ImportResult, TopologyParser
from apphostgen.parser.compose import ComposeParser, parse_compose, resolve_image_type
from apphostgen.parser.dockerfile import DockerfileParser, instance_name_for, parse_dockerfile

__all__ = [
    "ImportResult",
    "TopologyParser",
    "IdAllocator",
    "FIRST_IMPORTED_ID",
    "AppHostParser",
    "parse_apphost",
    "ComposeParser",
    "parse_compose",
    "resolve_image_type",
    "DockerfileParser",
    "parse_dockerfile",
    "instance_name_for",
]
