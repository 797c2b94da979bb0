# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Validation rules for resource topologies.

Every rule family runs over the whole topology and contributes issues to one
flat list; no rule short-circuits another. Issues are data: nothing in this
module raises for a problem found in the topology.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from apphostgen.model.entities import Connection, ResourceInstance, Topology
from apphostgen.model.types import ResourceCategory
from apphostgen.schema.naming import container_image_name, suggest_env_key, suggest_identifier, to_variable_name
from apphostgen.schema.registry import SchemaRegistry, is_valid_identifier, validate_parameter_value

# ###############
# Public Interface
# ###############


class Severity(Enum):
    """How serious an issue is. Only errors block code generation."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCategory(Enum):
    """The rule family that produced an issue."""

    NAMING = "naming"
    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    ARCHITECTURE = "architecture"
    SECURITY = "security"
    PERFORMANCE = "performance"
    API = "api"


@dataclass(frozen=True)
class ValidationIssue:
    """A single diagnostic produced by validation.

    Attributes:
        id: Stable identifier derived from the rule and the offending element.
        severity: Error, warning or info.
        category: The rule family.
        message: Human-readable one-line description.
        node_id: The instance the issue is attached to, if any.
        edge_id: The connection the issue is attached to, if any.
        details: Longer explanation.
        suggestion: How to fix it.
        related_nodes: Other instance ids involved.
        api_method: The hosting API method concerned, for API issues.
        parameter: The parameter concerned, for API issues.
    """

    id: str
    severity: Severity
    category: IssueCategory
    message: str
    node_id: str | None = None
    edge_id: str | None = None
    details: str | None = None
    suggestion: str | None = None
    related_nodes: tuple[str, ...] = ()
    api_method: str | None = None
    parameter: str | None = None


@dataclass
class ValidationResult:
    """All issues found in a topology.

    Attributes:
        issues: Issues in rule-family order.
    """

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity is Severity.ERROR]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.WARNING)

    @property
    def info_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.INFO)

    @property
    def is_valid(self) -> bool:
        """Return True if no error-severity issue was found."""
        return self.error_count == 0

    def issues_for_node(self, node_id: str) -> list[ValidationIssue]:
        """Return issues attached to *node_id* or listing it as a related node."""
        return [i for i in self.issues if i.node_id == node_id or node_id in i.related_nodes]


def validate(topology: Topology, registry: SchemaRegistry) -> ValidationResult:
    """Run all validation rules over *topology*.

    Rule families, in order:

    1. **Naming**: missing, invalid or duplicate instance names and invalid
       logical database names.
    2. **API usage**: builder parameter values checked against the schema;
       incoming connections on types that cannot take references.
    3. **Connections**: dangling endpoints, incompatible categories, self-loops.
    4. **Configuration**: missing logical databases, disabled persistence,
       environment variable naming, port ranges.
    5. **Architecture**: unconnected consumers and backing services, more
       than one cache or messaging system.
    6. **Security**: literal secrets in environment variables, OpenAI
       without key configuration.
    7. **Performance**: heavily referenced workloads without replicas.
    8. **Cycles**: circular dependencies between instances.

    Args:
        topology: The topology to check.
        registry: Schema registry used for type metadata.

    Returns:
        A :class:`ValidationResult`; it is valid when it holds no errors.
    """
    ctx = _Context(topology, registry)
    issues: list[ValidationIssue] = []
    issues.extend(_check_naming(ctx))
    issues.extend(_check_api_usage(ctx))
    issues.extend(_check_connections(ctx))
    issues.extend(_check_configuration(ctx))
    issues.extend(_check_architecture(ctx))
    issues.extend(_check_security(ctx))
    issues.extend(_check_performance(ctx))
    issues.extend(_check_cycles(ctx))
    return ValidationResult(issues=issues)


def is_ready_for_code_generation(
    topology: Topology, registry: SchemaRegistry
) -> tuple[bool, list[ValidationIssue]]:
    """Return whether *topology* can be rendered, together with the blocking errors."""
    blocking = validate(topology, registry).errors
    return not blocking, blocking


# ################
# Implementation
# ################

_ENV_KEY_RE = re.compile(r"^[A-Z_][A-Z0-9_]*$")
_SENSITIVE_MARKERS = ("password", "secret", "key", "token", "api_key", "apikey")
_PATH_PARAMETERS = ("scriptPath", "projectDirectory", "workingDirectory")
_BACKING_CATEGORIES = (ResourceCategory.DATABASE, ResourceCategory.CACHE, ResourceCategory.MESSAGING)
_WORKLOAD_CATEGORIES = (ResourceCategory.PROJECT, ResourceCategory.CONTAINER)


class _Context:
    """Indexes shared by the rule families."""

    def __init__(self, topology: Topology, registry: SchemaRegistry) -> None:
        self.topology = topology
        self.registry = registry
        self.nodes: dict[str, ResourceInstance] = {}
        for inst in topology.instances:
            self.nodes.setdefault(inst.id, inst)
        self.incoming: dict[str, list[Connection]] = defaultdict(list)
        self.outgoing: dict[str, list[Connection]] = defaultdict(list)
        for conn in topology.connections:
            self.outgoing[conn.source_id].append(conn)
            self.incoming[conn.target_id].append(conn)

    def label(self, inst: ResourceInstance) -> str:
        return self.registry.display_name(inst.resource_type)

    def name_or_label(self, inst: ResourceInstance) -> str:
        return inst.instance_name or self.label(inst)

    def category(self, inst: ResourceInstance) -> ResourceCategory | None:
        return self.registry.category(inst.resource_type)


def _check_naming(ctx: _Context) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    by_name: dict[str, list[ResourceInstance]] = defaultdict(list)

    for inst in ctx.topology.instances:
        name = inst.instance_name
        if not name.strip():
            issues.append(
                ValidationIssue(
                    id=f"naming-missing-{inst.id}",
                    severity=Severity.ERROR,
                    category=IssueCategory.NAMING,
                    node_id=inst.id,
                    message=f"{ctx.label(inst)} requires an instance name",
                    details="Every resource must have a unique instance name that will be used in the generated code.",
                    suggestion="Provide a meaningful name for the resource",
                )
            )
        else:
            by_name[name].append(inst)
            if not is_valid_identifier(name):
                issues.append(
                    ValidationIssue(
                        id=f"naming-invalid-{inst.id}",
                        severity=Severity.ERROR,
                        category=IssueCategory.NAMING,
                        node_id=inst.id,
                        message=f'"{name}" is not a valid C# identifier',
                        details=(
                            "C# identifiers must start with a letter or underscore, and can only contain "
                            "letters, digits, and underscores. Reserved keywords cannot be used."
                        ),
                        suggestion=f'Try using "{suggest_identifier(name)}" instead',
                        parameter="instanceName",
                    )
                )

        if inst.database_name and ctx.registry.allows_database(inst.resource_type):
            if not is_valid_identifier(inst.database_name):
                issues.append(
                    ValidationIssue(
                        id=f"naming-invalid-db-{inst.id}",
                        severity=Severity.ERROR,
                        category=IssueCategory.NAMING,
                        node_id=inst.id,
                        message=f'Database name "{inst.database_name}" is not a valid C# identifier',
                        details="Database names must follow C# identifier naming rules.",
                        suggestion=f'Try using "{suggest_identifier(inst.database_name)}" instead',
                        parameter="databaseName",
                    )
                )

        definition = ctx.registry.definition(inst.resource_type)
        name_param = definition.builder_method.parameter("name") if definition is not None else None
        if name_param is not None and name:
            _, errors = validate_parameter_value(name, name_param)
            for index, error in enumerate(errors):
                issues.append(
                    ValidationIssue(
                        id=f"naming-constraint-{inst.id}-{index}",
                        severity=Severity.ERROR,
                        category=IssueCategory.API,
                        node_id=inst.id,
                        message=error,
                        api_method=definition.builder_method.name,
                        parameter="name",
                    )
                )

    for name, holders in by_name.items():
        if len(holders) < 2:
            continue
        issues.append(
            ValidationIssue(
                id=f"naming-duplicate-{holders[0].id}",
                severity=Severity.ERROR,
                category=IssueCategory.NAMING,
                node_id=holders[0].id,
                message=f'Duplicate instance name "{name}"',
                details="Each resource must have a unique name within the application.",
                suggestion=f'Consider renaming to "{name}2" or choosing a more descriptive name',
                related_nodes=tuple(h.id for h in holders),
            )
        )

    issues.extend(_check_variable_collisions(ctx))
    return issues


def _check_variable_collisions(ctx: _Context) -> list[ValidationIssue]:
    """Report distinct declarations that render to the same C# variable.

    Instances sharing an identical name are left to the duplicate-name rule.
    """
    declared: dict[str, list[tuple[ResourceInstance, str]]] = defaultdict(list)
    for inst in ctx.topology.instances:
        name = inst.instance_name
        if not name.strip() or ctx.registry.definition(inst.resource_type) is None:
            continue
        declared[to_variable_name(name)].append((inst, f'"{name}"'))
        if inst.database_name and ctx.registry.allows_database(inst.resource_type):
            declared[to_variable_name(inst.database_name)].append((inst, f'database "{inst.database_name}"'))

    issues: list[ValidationIssue] = []
    for var_name, entries in declared.items():
        labels = [label for _, label in entries]
        if len(entries) < 2 or len(set(labels)) == 1 and not labels[0].startswith("database"):
            continue
        first = entries[0][0]
        issues.append(
            ValidationIssue(
                id=f"naming-variable-collision-{first.id}-{var_name}",
                severity=Severity.ERROR,
                category=IssueCategory.NAMING,
                node_id=first.id,
                message=f'C# variable "{var_name}" would be declared for {", ".join(labels)}',
                details="Generated variable names are camelCase forms of resource and database names.",
                suggestion="Rename one of the resources or databases so their variable names differ",
                related_nodes=tuple(dict.fromkeys(inst.id for inst, _ in entries)),
            )
        )
    return issues


def _builder_argument(inst: ResourceInstance, parameter_name: str) -> object:
    """Return the value the renderer passes for a builder parameter."""
    name = inst.instance_name or None
    if parameter_name == "name":
        return inst.instance_name
    if parameter_name == "port":
        if not inst.config.ports:
            return None
        container = inst.config.ports[0].container
        return int(container) if container.isdigit() else container
    if parameter_name == "scriptPath" and inst.resource_type == "python-app":
        return "main.py"
    if parameter_name in _PATH_PARAMETERS:
        return f"../{name}" if name else None
    if parameter_name == "image":
        return f"myregistry/{container_image_name(name)}" if name else None
    if parameter_name == "tag":
        return "latest"
    return None


def _check_api_usage(ctx: _Context) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for inst in ctx.topology.instances:
        definition = ctx.registry.definition(inst.resource_type)
        if definition is None:
            issues.append(
                ValidationIssue(
                    id=f"api-unknown-{inst.id}",
                    severity=Severity.WARNING,
                    category=IssueCategory.API,
                    node_id=inst.id,
                    message=f'Unknown resource type "{inst.resource_type}"',
                    details="This resource type is not recognized in the API schema.",
                )
            )
            continue

        method = definition.builder_method
        for param in method.parameters:
            _, errors = validate_parameter_value(_builder_argument(inst, param.name), param)
            for index, error in enumerate(errors):
                issues.append(
                    ValidationIssue(
                        id=f"api-param-{inst.id}-{param.name}-{index}",
                        severity=Severity.ERROR,
                        category=IssueCategory.API,
                        node_id=inst.id,
                        message=error,
                        details=param.description,
                        api_method=method.name,
                        parameter=param.name,
                    )
                )

        if ctx.incoming.get(inst.id) and not ctx.registry.supports_chaining(inst.resource_type, "WithReference"):
            issues.append(
                ValidationIssue(
                    id=f"api-no-reference-{inst.id}",
                    severity=Severity.ERROR,
                    category=IssueCategory.API,
                    node_id=inst.id,
                    message=f"{ctx.label(inst)} does not support .WithReference()",
                    details=f'Resources of type "{inst.resource_type}" cannot receive references from other resources.',
                    suggestion="Remove the incoming connections or change the connection direction",
                    api_method="WithReference",
                )
            )

    return issues


def _check_connections(ctx: _Context) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for conn in ctx.topology.connections:
        source = ctx.nodes.get(conn.source_id)
        target = ctx.nodes.get(conn.target_id)
        if source is None or target is None:
            issues.append(
                ValidationIssue(
                    id=f"connection-orphan-{conn.id}",
                    severity=Severity.ERROR,
                    category=IssueCategory.CONNECTION,
                    edge_id=conn.id,
                    message="Connection references a non-existent node",
                    details="This connection is invalid because one or both nodes no longer exist.",
                    suggestion="Delete this connection",
                )
            )
            continue

        if not ctx.registry.is_connection_valid(source.resource_type, target.resource_type):
            issues.append(
                ValidationIssue(
                    id=f"connection-invalid-{conn.id}",
                    severity=Severity.ERROR,
                    category=IssueCategory.CONNECTION,
                    edge_id=conn.id,
                    node_id=conn.target_id,
                    message=f"Invalid connection: {ctx.label(source)} cannot connect to {ctx.label(target)}",
                    details=(
                        f'Resources of type "{source.resource_type}" cannot be referenced by '
                        f'resources of type "{target.resource_type}".'
                    ),
                    suggestion="Remove this connection or reverse its direction",
                    related_nodes=(conn.source_id, conn.target_id),
                )
            )

        if conn.source_id == conn.target_id:
            issues.append(
                ValidationIssue(
                    id=f"connection-self-{conn.id}",
                    severity=Severity.ERROR,
                    category=IssueCategory.CONNECTION,
                    edge_id=conn.id,
                    node_id=conn.source_id,
                    message="A resource cannot reference itself",
                    suggestion="Remove this connection",
                )
            )

    return issues


def _check_configuration(ctx: _Context) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for inst in ctx.topology.instances:
        category = ctx.category(inst)
        if category is None:
            continue

        if ctx.registry.allows_database(inst.resource_type) and not (inst.database_name or "").strip():
            issues.append(
                ValidationIssue(
                    id=f"config-no-database-{inst.id}",
                    severity=Severity.WARNING,
                    category=IssueCategory.CONFIGURATION,
                    node_id=inst.id,
                    message=f"{ctx.label(inst)} has no database configured",
                    details="You can add a database to this server using .AddDatabase().",
                    suggestion="Add a database name to create a default database",
                )
            )

        if category is ResourceCategory.DATABASE and inst.config.persistent is False:
            issues.append(
                ValidationIssue(
                    id=f"config-non-persistent-{inst.id}",
                    severity=Severity.WARNING,
                    category=IssueCategory.CONFIGURATION,
                    node_id=inst.id,
                    message=f"{ctx.name_or_label(inst)} is not using persistent storage",
                    details="Container data will be lost when the container restarts.",
                    suggestion="Enable ContainerLifetime.Persistent for data durability",
                )
            )

        for index, env in enumerate(inst.config.env_vars):
            if env.key and not _ENV_KEY_RE.match(env.key):
                issues.append(
                    ValidationIssue(
                        id=f"config-env-key-{inst.id}-{index}",
                        severity=Severity.WARNING,
                        category=IssueCategory.CONFIGURATION,
                        node_id=inst.id,
                        message=f'Environment variable "{env.key}" may not follow conventions',
                        details="Environment variable names are typically uppercase with underscores.",
                        suggestion=f'Consider renaming to "{suggest_env_key(env.key)}"',
                    )
                )

        for index, port in enumerate(inst.config.ports):
            if port.container and not _is_port(port.container):
                issues.append(
                    ValidationIssue(
                        id=f"config-port-{inst.id}-{index}",
                        severity=Severity.ERROR,
                        category=IssueCategory.CONFIGURATION,
                        node_id=inst.id,
                        message=f"Invalid port number: {port.container}",
                        details="Port numbers must be between 1 and 65535.",
                    )
                )

    return issues


def _is_port(value: str) -> bool:
    return value.isdigit() and 1 <= int(value) <= 65535


def _check_architecture(ctx: _Context) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    by_category: dict[ResourceCategory, list[ResourceInstance]] = defaultdict(list)

    for inst in ctx.topology.instances:
        category = ctx.category(inst)
        if category is None:
            continue
        by_category[category].append(inst)

        if category in _WORKLOAD_CATEGORIES and not ctx.incoming.get(inst.id):
            issues.append(
                ValidationIssue(
                    id=f"arch-isolated-project-{inst.id}",
                    severity=Severity.INFO,
                    category=IssueCategory.ARCHITECTURE,
                    node_id=inst.id,
                    message=f"{ctx.name_or_label(inst)} has no incoming connections",
                    details="This resource is not connected to any databases, caches, or other services.",
                    suggestion="Consider connecting to backend resources if needed",
                )
            )

        if category in _BACKING_CATEGORIES and not ctx.outgoing.get(inst.id):
            issues.append(
                ValidationIssue(
                    id=f"arch-unused-resource-{inst.id}",
                    severity=Severity.WARNING,
                    category=IssueCategory.ARCHITECTURE,
                    node_id=inst.id,
                    message=f"{ctx.name_or_label(inst)} is not connected to any consumers",
                    details="This resource is deployed but not used by any projects.",
                    suggestion="Connect this resource to a project or remove it",
                )
            )

    duplicates = (
        (ResourceCategory.MESSAGING, "arch-multiple-messaging", "Multiple messaging systems detected",
         "Consider standardizing on a single messaging system for simplicity"),
        (ResourceCategory.CACHE, "arch-multiple-cache", "Multiple caching systems detected",
         "Consider using a single caching system unless you have specific requirements"),
    )  # fmt: skip
    for category, issue_id, message, suggestion in duplicates:
        members = by_category.get(category, [])
        if len(members) > 1:
            issues.append(
                ValidationIssue(
                    id=issue_id,
                    severity=Severity.WARNING,
                    category=IssueCategory.ARCHITECTURE,
                    message=message,
                    details="Found: " + ", ".join(ctx.name_or_label(m) for m in members),
                    suggestion=suggestion,
                    related_nodes=tuple(m.id for m in members),
                )
            )

    return issues


def _check_security(ctx: _Context) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for inst in ctx.topology.instances:
        for index, env in enumerate(inst.config.env_vars):
            key = env.key.lower()
            if not any(marker in key for marker in _SENSITIVE_MARKERS):
                continue
            if env.value and not env.value.startswith(("{", "$")):
                issues.append(
                    ValidationIssue(
                        id=f"security-hardcoded-secret-{inst.id}-{index}",
                        severity=Severity.WARNING,
                        category=IssueCategory.SECURITY,
                        node_id=inst.id,
                        message=f'Potential hardcoded secret in "{env.key}"',
                        details="Hardcoding secrets in environment variables is a security risk.",
                        suggestion="Use user secrets or environment variable placeholders instead",
                    )
                )

        if inst.resource_type == "openai":
            has_key_config = any("api" in e.key.lower() or "key" in e.key.lower() for e in inst.config.env_vars)
            if not has_key_config:
                issues.append(
                    ValidationIssue(
                        id=f"security-openai-config-{inst.id}",
                        severity=Severity.INFO,
                        category=IssueCategory.SECURITY,
                        node_id=inst.id,
                        message=f"{inst.instance_name or 'OpenAI'} may need API key configuration",
                        details="OpenAI requires an API key to function.",
                        suggestion="Configure the API key via user secrets or environment variables",
                    )
                )

    return issues


def _check_performance(ctx: _Context) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for inst in ctx.topology.instances:
        if ctx.category(inst) not in _WORKLOAD_CATEGORIES:
            continue
        incoming = len(ctx.incoming.get(inst.id, []))
        if incoming > 3 and (inst.config.replicas or 0) < 2:
            issues.append(
                ValidationIssue(
                    id=f"perf-replicas-{inst.id}",
                    severity=Severity.INFO,
                    category=IssueCategory.PERFORMANCE,
                    node_id=inst.id,
                    message=f"{ctx.name_or_label(inst)} has many dependencies but only 1 replica",
                    details=f"This resource has {incoming} incoming connections which may indicate high load.",
                    suggestion="Consider increasing replicas for better availability",
                )
            )

    return issues


def _find_cycle(graph: dict[str, list[str]], start: str, visited: set[str]) -> list[str] | None:
    """Depth-first search from *start* for a back edge.

    The walk keeps an explicit stack of ``(node, neighbour iterator)`` pairs,
    so chain length is not bounded by the interpreter's recursion limit.

    Returns:
        The node ids on the cycle, in traversal order and without the repeated
        start node, or ``None`` if no cycle is reachable from *start*.
    """
    visited.add(start)
    on_stack: set[str] = {start}
    path: list[str] = [start]
    stack: list[tuple[str, Iterator[str]]] = [(start, iter(graph.get(start, [])))]

    while stack:
        node, neighbours = stack[-1]
        neighbour = next(neighbours, None)
        if neighbour is None:
            stack.pop()
            on_stack.discard(node)
            path.pop()
            continue
        if neighbour in on_stack:
            return path[path.index(neighbour) :]
        if neighbour not in visited:
            visited.add(neighbour)
            on_stack.add(neighbour)
            path.append(neighbour)
            stack.append((neighbour, iter(graph.get(neighbour, []))))
    return None


def _check_cycles(ctx: _Context) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    graph: dict[str, list[str]] = defaultdict(list)
    for conn in ctx.topology.connections:
        if conn.source_id in ctx.nodes and conn.target_id in ctx.nodes:
            graph[conn.source_id].append(conn.target_id)

    visited: set[str] = set()
    for node_id in ctx.nodes:
        if node_id in visited:
            continue
        cycle = _find_cycle(graph, node_id, visited)
        if cycle is None:
            continue
        names = [ctx.name_or_label(ctx.nodes[n]) for n in cycle]
        names.append(names[0])
        issues.append(
            ValidationIssue(
                id=f"arch-circular-{cycle[0]}",
                severity=Severity.ERROR,
                category=IssueCategory.ARCHITECTURE,
                message=f"Circular dependency detected: {' → '.join(names)}",
                details="Circular dependencies prevent proper dependency ordering in the generated code.",
                suggestion="Remove one of the connections to break the cycle",
                related_nodes=tuple(cycle),
            )
        )

    return issues
