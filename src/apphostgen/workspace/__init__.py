# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project configuration and topology document handling."""

from apphostgen.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    ProjectConfig,
    ProjectConfigError,
    load_project_config,
    parse_project_config,
)
from apphostgen.workspace.document import (
    DOCUMENT_VERSION,
    TopologyDocumentError,
    dump_topology,
    load_topology,
    parse_topology_document,
    topology_from_data,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG_TEXT",
    "ProjectConfig",
    "ProjectConfigError",
    "load_project_config",
    "parse_project_config",
    "DOCUMENT_VERSION",
    "TopologyDocumentError",
    "load_topology",
    "parse_topology_document",
    "topology_from_data",
    "dump_topology",
]
