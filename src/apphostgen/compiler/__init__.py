# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Topology compiler: sequencing, AppHost rendering and companion artifacts."""

from apphostgen.compiler.build import GeneratedArtifacts, compile_topology
from apphostgen.compiler.companions import (
    DEPLOYMENT_COMMANDS,
    build_file_text,
    deployment_commands,
    manifest_text,
    settings_text,
)
from apphostgen.compiler.renderer import (
    RENDER_STRATEGIES,
    BuilderShape,
    RenderOptions,
    RenderStrategy,
    render_apphost,
    render_declaration,
    render_error_placeholder,
    strategy_for,
)
from apphostgen.compiler.sequencer import CycleError, SequenceResult, sequence

__all__ = [
    "sequence",
    "SequenceResult",
    "CycleError",
    "RenderOptions",
    "RenderStrategy",
    "BuilderShape",
    "RENDER_STRATEGIES",
    "strategy_for",
    "render_declaration",
    "render_apphost",
    "render_error_placeholder",
    "DEPLOYMENT_COMMANDS",
    "deployment_commands",
    "settings_text",
    "build_file_text",
    "manifest_text",
    "compile_topology",
    "GeneratedArtifacts",
]
