# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion between topologies and the canvas node/edge dictionaries.

The canvas stores each resource as a node dictionary::

    {"id": "node_0", "type": "aspire", "position": {"x": 100, "y": 100},
     "data": {"resourceType": "postgres", "instanceName": "pg", ...}}

and each connection as ``{"id": ..., "source": ..., "target": ...}``.
Entries that lack the required keys are skipped rather than rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from apphostgen.model.entities import (
    Connection,
    ConnectionKind,
    EnvVar,
    PortMapping,
    ResourceConfig,
    ResourceInstance,
    Topology,
    VolumeMount,
)
from apphostgen.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

NODE_TYPE = "aspire"
GRID_COLUMNS = 3
GRID_ORIGIN = (100, 100)
GRID_SPACING = (300, 150)


def from_flow_graph(nodes: Iterable[Mapping[str, Any]], edges: Iterable[Mapping[str, Any]]) -> Topology:
    """Build a topology from canvas node and edge dictionaries.

    Args:
        nodes: Node dictionaries with an ``id`` and a ``data`` mapping.
        edges: Edge dictionaries with ``source`` and ``target`` ids.

    Returns:
        The topology. Malformed nodes and edges are left out.
    """
    instances: list[ResourceInstance] = []
    for node in nodes:
        instance = _instance_from_node(node)
        if instance is None:
            logger.debug("Skipping malformed canvas node: %r", node)
            continue
        instances.append(instance)

    connections: list[Connection] = []
    for edge in edges:
        connection = _connection_from_edge(edge)
        if connection is None:
            logger.debug("Skipping malformed canvas edge: %r", edge)
            continue
        connections.append(connection)

    return Topology(instances=tuple(instances), connections=tuple(connections))


def to_flow_graph(topology: Topology, registry: SchemaRegistry) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Render a topology as canvas node and edge dictionaries.

    Nodes are laid out on a simple grid in instance order. Each node's
    ``label`` is the display name of its resource type.
    """
    nodes = [_node_from_instance(inst, index, registry) for index, inst in enumerate(topology.instances)]
    edges = [_edge_from_connection(conn) for conn in topology.connections]
    return nodes, edges


# ################
# Implementation
# ################


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _pairs(items: Any, first: str, second: str) -> list[tuple[str | None, str | None]]:
    if not isinstance(items, list):
        return []
    return [(_as_str(item.get(first)), _as_str(item.get(second))) for item in items if isinstance(item, Mapping)]


def _instance_from_node(node: Mapping[str, Any]) -> ResourceInstance | None:
    node_id = node.get("id")
    data = node.get("data")
    if not isinstance(node_id, str) or not isinstance(data, Mapping):
        return None
    resource_type = data.get("resourceType")
    if not isinstance(resource_type, str):
        return None

    env_vars = tuple(EnvVar(key=k, value=v or "") for k, v in _pairs(data.get("envVars"), "key", "value") if k)
    ports = tuple(
        PortMapping(host=h or None, container=c) for h, c in _pairs(data.get("ports"), "host", "container") if c
    )
    volumes = tuple(
        VolumeMount(source=s, target=t) for s, t in _pairs(data.get("volumes"), "source", "target") if s and t
    )
    replicas = data.get("replicas")
    persistent = data.get("persistent")

    try:
        return ResourceInstance(
            id=node_id,
            resource_type=resource_type,
            instance_name=_as_str(data.get("instanceName")) or "",
            database_name=_as_str(data.get("databaseName")) or None,
            config=ResourceConfig(
                env_vars=env_vars,
                ports=ports,
                volumes=volumes,
                replicas=replicas if isinstance(replicas, int) and not isinstance(replicas, bool) else None,
                persistent=persistent if isinstance(persistent, bool) else None,
            ),
        )
    except ValidationError:
        return None


def _connection_from_edge(edge: Mapping[str, Any]) -> Connection | None:
    source = edge.get("source")
    target = edge.get("target")
    if not isinstance(source, str) or not isinstance(target, str):
        return None
    edge_id = edge.get("id")
    try:
        kind = ConnectionKind(edge.get("kind", ConnectionKind.REFERENCE.value))
    except ValueError:
        kind = ConnectionKind.REFERENCE
    return Connection(
        id=edge_id if isinstance(edge_id, str) and edge_id else f"edge_{source}_{target}",
        source_id=source,
        target_id=target,
        kind=kind,
    )


def _node_from_instance(inst: ResourceInstance, index: int, registry: SchemaRegistry) -> dict[str, Any]:
    column, row = index % GRID_COLUMNS, index // GRID_COLUMNS
    data: dict[str, Any] = {
        "resourceType": inst.resource_type,
        "label": registry.display_name(inst.resource_type),
        "instanceName": inst.instance_name,
        "allowsDatabase": registry.allows_database(inst.resource_type),
    }
    if inst.database_name:
        data["databaseName"] = inst.database_name
    config = inst.config
    if config.env_vars:
        data["envVars"] = [{"key": env.key, "value": env.value} for env in config.env_vars]
    if config.ports:
        data["ports"] = [{"host": port.host or "", "container": port.container} for port in config.ports]
    if config.volumes:
        data["volumes"] = [{"source": vol.source, "target": vol.target} for vol in config.volumes]
    if config.replicas is not None:
        data["replicas"] = config.replicas
    if config.persistent is not None:
        data["persistent"] = config.persistent
    return {
        "id": inst.id,
        "type": NODE_TYPE,
        "position": {
            "x": GRID_ORIGIN[0] + column * GRID_SPACING[0],
            "y": GRID_ORIGIN[1] + row * GRID_SPACING[1],
        },
        "data": data,
    }


def _edge_from_connection(conn: Connection) -> dict[str, Any]:
    edge: dict[str, Any] = {"id": conn.id, "source": conn.source_id, "target": conn.target_id}
    if conn.kind is not ConnectionKind.REFERENCE:
        edge["kind"] = conn.kind.value
    return edge
