# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Render sequenced resource instances as a single-file Aspire AppHost.

Each instance becomes one builder declaration followed by its chaining
calls. The shape of the builder call is chosen from :data:`RENDER_STRATEGIES`,
a closed table keyed by resource type id; types without an entry use the
generic ``builder.<Method>("name")`` shape.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from apphostgen.model.entities import ResourceInstance, Topology
from apphostgen.model.types import ResourceCategory, ResourceTypeDefinition
from apphostgen.schema.catalog import ASPIRE_VERSION
from apphostgen.schema.naming import capitalize_first, container_image_name, to_variable_name
from apphostgen.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

BUILDER_LINE = "var builder = DistributedApplication.CreateBuilder(args);"
RUN_LINE = "builder.Build().Run();"
EMPTY_PROMPT = "// Add resources by dragging them from the palette to the canvas"


@dataclass(frozen=True)
class RenderOptions:
    """Formatting options for the generated AppHost.

    Attributes:
        aspire_version: Version written into the ``#:sdk`` directive.
        indent_size: Number of spaces before each chaining call.
        include_comments: Emit a ``// <display name>`` line above each declaration.
    """

    aspire_version: str = ASPIRE_VERSION
    indent_size: int = 4
    include_comments: bool = False

    @property
    def indent(self) -> str:
        return " " * self.indent_size


class BuilderShape(Enum):
    """The distinct builder-call shapes a resource declaration can take."""

    GENERIC = "generic"
    PROJECT = "project"
    NODE_APP = "node-app"
    VITE_APP = "vite-app"
    PYTHON_APP = "python-app"
    CONTAINER = "container"


@dataclass(frozen=True)
class RenderStrategy:
    """How one resource type is declared.

    Attributes:
        shape: The builder-call shape.
        default_chains: Chaining calls always emitted after the builder call,
            before any configured ones.
    """

    shape: BuilderShape
    default_chains: tuple[str, ...] = ()


GENERIC_STRATEGY = RenderStrategy(BuilderShape.GENERIC)

RENDER_STRATEGIES: dict[str, RenderStrategy] = {
    "dotnet-project": RenderStrategy(BuilderShape.PROJECT),
    "node-app": RenderStrategy(BuilderShape.NODE_APP),
    "vite-app": RenderStrategy(BuilderShape.VITE_APP, ('.WithHttpEndpoint(env: "PORT")',)),
    "python-app": RenderStrategy(BuilderShape.PYTHON_APP),
    "container": RenderStrategy(BuilderShape.CONTAINER, (".WithHttpEndpoint(targetPort: 8080)",)),
}


def strategy_for(type_id: str) -> RenderStrategy:
    """Return the render strategy for *type_id*."""
    return RENDER_STRATEGIES.get(type_id, GENERIC_STRATEGY)


def render_declaration(
    instance: ResourceInstance,
    topology: Topology,
    registry: SchemaRegistry,
    options: RenderOptions | None = None,
) -> str | None:
    """Render the declaration statements for one instance.

    Args:
        instance: The instance to declare.
        topology: The full topology; incoming connections are looked up here.
        registry: Schema registry for type metadata.
        options: Formatting options.

    Returns:
        The newline-joined statements, each terminated with ``;``, or ``None``
        when the instance has no name or an unknown type.
    """
    opts = options or RenderOptions()
    if not instance.instance_name:
        return None
    definition = registry.definition(instance.resource_type)
    if definition is None:
        logger.debug("Skipping %s: unknown resource type %r", instance.id, instance.resource_type)
        return None

    var_name = to_variable_name(instance.instance_name)
    indent = opts.indent
    statements = [_builder_call(instance, definition, var_name)]

    for chain in _chaining_calls(instance, definition):
        statements[-1] += f"\n{indent}{chain}"

    if instance.database_name and registry.allows_database(instance.resource_type):
        statements[-1] += ";"
        db_var = to_variable_name(instance.database_name)
        statements.append(f'var {db_var} = {var_name}.AddDatabase("{instance.database_name}")')

    for chain in _reference_calls(instance, topology, registry):
        statements[-1] += f"\n{indent}{chain}"

    statements[-1] += ";"
    declaration = "\n".join(statements)
    if opts.include_comments:
        declaration = f"// {definition.display_name}\n{declaration}"
    return declaration


def render_apphost(
    ordered: Sequence[ResourceInstance],
    topology: Topology,
    registry: SchemaRegistry,
    options: RenderOptions | None = None,
) -> str:
    """Render the complete AppHost source for a sequenced instance list.

    Args:
        ordered: Instances in dependency order.
        topology: The full topology the instances come from.
        registry: Schema registry for type metadata.
        options: Formatting options.

    Returns:
        The AppHost file text.
    """
    opts = options or RenderOptions()
    declarations = [
        text for inst in ordered if (text := render_declaration(inst, topology, registry, opts)) is not None
    ]
    packages = registry.required_packages(inst.resource_type for inst in ordered)
    logger.debug("Rendered %d declaration(s) with %d package(s)", len(declarations), len(packages))

    lines = [f"#:sdk Aspire.AppHost.Sdk@{opts.aspire_version}"]
    lines.extend(f"#:package {pkg}" for pkg in packages)
    if packages:
        lines.append("")
    lines.append(BUILDER_LINE)
    lines.append("")
    if declarations:
        for declaration in declarations:
            lines.append(declaration)
            lines.append("")
    else:
        lines.append(EMPTY_PROMPT)
        lines.append("")
    lines.append(RUN_LINE)
    return "\n".join(lines)


def render_error_placeholder(messages: Sequence[str], options: RenderOptions | None = None) -> str:
    """Render the placeholder AppHost listing *messages* as blocking errors."""
    opts = options or RenderOptions()
    lines = [
        f"#:sdk Aspire.AppHost.Sdk@{opts.aspire_version}",
        "",
        "// ⚠️ VALIDATION ERRORS - Fix these issues before generating code:",
        "//",
    ]
    lines.extend(f"// {index}. {message}" for index, message in enumerate(messages, start=1))
    lines.extend(
        [
            "//",
            "// Fix the issues above and the code will be generated automatically.",
            "",
            BUILDER_LINE,
            "",
            "// Your resources will appear here",
            "",
            RUN_LINE,
        ]
    )
    return "\n".join(lines)


# ################
# Implementation
# ################


def _generic_call(instance: ResourceInstance, definition: ResourceTypeDefinition, var_name: str) -> str:
    return f'var {var_name} = builder.{definition.builder_method.name}("{instance.instance_name}")'


def _project_call(instance: ResourceInstance, definition: ResourceTypeDefinition, var_name: str) -> str:
    return f'var {var_name} = builder.AddProject<Projects.{capitalize_first(var_name)}>("{instance.instance_name}")'


def _node_app_call(instance: ResourceInstance, definition: ResourceTypeDefinition, var_name: str) -> str:
    name = instance.instance_name
    return f'var {var_name} = builder.AddNodeApp("{name}", "../{name}")'


def _vite_app_call(instance: ResourceInstance, definition: ResourceTypeDefinition, var_name: str) -> str:
    name = instance.instance_name
    return f'var {var_name} = builder.AddViteApp("{name}", "../{name}")'


def _python_app_call(instance: ResourceInstance, definition: ResourceTypeDefinition, var_name: str) -> str:
    name = instance.instance_name
    return f'var {var_name} = builder.AddPythonApp("{name}", "../{name}", "main.py")'


def _container_call(instance: ResourceInstance, definition: ResourceTypeDefinition, var_name: str) -> str:
    name = instance.instance_name
    return f'var {var_name} = builder.AddContainer("{name}", "myregistry/{container_image_name(name)}", "latest")'


_BUILDER_CALLS: dict[BuilderShape, Callable[[ResourceInstance, ResourceTypeDefinition, str], str]] = {
    BuilderShape.GENERIC: _generic_call,
    BuilderShape.PROJECT: _project_call,
    BuilderShape.NODE_APP: _node_app_call,
    BuilderShape.VITE_APP: _vite_app_call,
    BuilderShape.PYTHON_APP: _python_app_call,
    BuilderShape.CONTAINER: _container_call,
}


def _builder_call(instance: ResourceInstance, definition: ResourceTypeDefinition, var_name: str) -> str:
    return _BUILDER_CALLS[strategy_for(instance.resource_type).shape](instance, definition, var_name)


def _chaining_calls(instance: ResourceInstance, definition: ResourceTypeDefinition) -> list[str]:
    """Return the configuration chaining calls for *instance*, without indentation."""
    config = instance.config
    chains: list[str] = []

    if definition.category is ResourceCategory.DATABASE and config.persistent is not False:
        chains.append(".WithLifetime(ContainerLifetime.Persistent)")

    chains.extend(strategy_for(instance.resource_type).default_chains)

    for env in config.env_vars:
        if env.key and env.value:
            chains.append(f'.WithEnvironment("{env.key}", "{env.value}")')

    for port in config.ports:
        if not port.container:
            continue
        if port.host:
            chains.append(f".WithHttpEndpoint(port: {port.host}, targetPort: {port.container})")
        else:
            chains.append(f".WithHttpEndpoint(targetPort: {port.container})")

    for volume in config.volumes:
        if volume.source and volume.target:
            chains.append(f'.WithBindMount("{volume.source}", "{volume.target}")')

    if config.replicas is not None and config.replicas > 1:
        chains.append(f".WithReplicas({config.replicas})")

    return chains


def _reference_calls(instance: ResourceInstance, topology: Topology, registry: SchemaRegistry) -> list[str]:
    """Return ``WithReference``/``WaitFor`` calls for each incoming connection."""
    chains: list[str] = []
    for conn in topology.incoming(instance.id):
        source = topology.instance(conn.source_id)
        if source is None or not source.instance_name:
            continue
        ref_var = _reference_variable(source, registry)
        chains.append(f".WithReference({ref_var})")
        if registry.category(source.resource_type) is ResourceCategory.DATABASE:
            chains.append(f".WaitFor({ref_var})")
    return chains


def _reference_variable(source: ResourceInstance, registry: SchemaRegistry) -> str:
    """Return the variable a consumer references for *source*.

    Servers with a logical database are referenced through the database
    variable; everything else through the instance variable.
    """
    if source.database_name and registry.allows_database(source.resource_type):
        return to_variable_name(source.database_name)
    return to_variable_name(source.instance_name)
