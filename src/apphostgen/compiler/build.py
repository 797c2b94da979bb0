# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end compilation of a topology into generated artifacts.

The pipeline is validate, then sequence, then render. Validation gates
rendering: any error-severity issue replaces the AppHost with a placeholder
listing the blocking messages, and the companion artifacts are left empty.
The result is always a complete :class:`GeneratedArtifacts` bundle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from apphostgen.compiler.companions import build_file_text, deployment_commands, manifest_text, settings_text
from apphostgen.compiler.renderer import RenderOptions, render_apphost, render_error_placeholder
from apphostgen.compiler.sequencer import sequence
from apphostgen.model.entities import Topology
from apphostgen.schema.registry import SchemaRegistry
from apphostgen.validation.checks import validate

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class GeneratedArtifacts:
    """Everything produced for one topology.

    Attributes:
        apphost: The AppHost source, or the error placeholder when blocked.
        required_packages: ``Package@Version`` specs referenced by the AppHost.
        deployment_commands: Aspire CLI commands for running and deploying.
        settings: ``appsettings.json`` text.
        build_file: Dockerfile text.
        manifest: Azure Container Apps manifest text.
        blocking_errors: Messages of the errors that blocked rendering.
    """

    apphost: str
    required_packages: list[str] = field(default_factory=list)
    deployment_commands: list[str] = field(default_factory=list)
    settings: str = ""
    build_file: str = ""
    manifest: str = ""
    blocking_errors: list[str] = field(default_factory=list)

    @property
    def is_blocked(self) -> bool:
        """Return True if validation errors prevented rendering."""
        return bool(self.blocking_errors)


def compile_topology(
    topology: Topology,
    registry: SchemaRegistry,
    options: RenderOptions | None = None,
) -> GeneratedArtifacts:
    """Compile *topology* into an AppHost and its companion artifacts.

    Args:
        topology: The topology to compile.
        registry: Schema registry for type metadata.
        options: Formatting options for the AppHost.

    Returns:
        The generated bundle. When validation reports errors the bundle holds
        the placeholder AppHost and the blocking messages, with every other
        field empty.
    """
    opts = options or RenderOptions()
    result = validate(topology, registry)
    if not result.is_valid:
        messages = [issue.message for issue in result.errors]
        logger.debug("Rendering blocked by %d error(s)", len(messages))
        return GeneratedArtifacts(
            apphost=render_error_placeholder(messages, opts),
            blocking_errors=messages,
        )

    ordered = sequence(topology).ordered
    return GeneratedArtifacts(
        apphost=render_apphost(ordered, topology, registry, opts),
        required_packages=registry.required_packages(inst.resource_type for inst in ordered),
        deployment_commands=deployment_commands(),
        settings=settings_text(ordered, registry),
        build_file=build_file_text(ordered),
        manifest=manifest_text(ordered, registry),
    )
