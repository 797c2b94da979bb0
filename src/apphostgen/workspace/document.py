# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Load and save topology documents.

A topology document is a YAML (or JSON) mapping::

    version: "1"
    instances:
      - id: pg
        type: postgres
        name: pg
        database: appdb
        persistent: true
        env: {POSTGRES_DB: appdb}
        ports: ["5432:5432"]
        volumes: ["./data:/var/lib/postgresql/data"]
      - id: api
        type: dotnet-project
        name: api
        replicas: 2
    connections:
      - {source: pg, target: api}

Connection ids default to ``edge_<source>_<target>`` and kinds to
``reference``. ``env`` accepts either a mapping or a list of
``{key, value}`` entries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

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

# ###############
# Public Interface
# ###############

DOCUMENT_VERSION = "1"


class TopologyDocumentError(Exception):
    """Raised when a topology document is invalid or cannot be loaded."""


def load_topology(path: Path) -> Topology:
    """Load a topology document from *path*.

    Raises:
        TopologyDocumentError: If the file cannot be read or is not a valid document.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise TopologyDocumentError(f"Topology file not found: {path}") from None
    except OSError as exc:
        raise TopologyDocumentError(f"Cannot read topology file: {exc}") from exc

    return parse_topology_document(text, source_label=str(path))


def parse_topology_document(text: str, source_label: str = "<string>") -> Topology:
    """Parse topology document text into a Topology.

    Args:
        text: YAML or JSON content.
        source_label: Human-readable label used in error messages.

    Raises:
        TopologyDocumentError: On invalid YAML, an unsupported version or a malformed entry.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise TopologyDocumentError(f"Invalid YAML in {source_label}: {exc}") from exc

    return topology_from_data(data, source_label)


def topology_from_data(data: object, source_label: str = "<string>") -> Topology:
    """Build a Topology from an already-loaded document mapping.

    Raises:
        TopologyDocumentError: On an unsupported version or a malformed entry.
    """
    if not isinstance(data, dict):
        raise TopologyDocumentError(f"{source_label}: topology document must be a YAML mapping")

    version = str(data.get("version", DOCUMENT_VERSION))
    if version != DOCUMENT_VERSION:
        raise TopologyDocumentError(f"{source_label}: unsupported document version '{version}'")

    try:
        document = _TopologyDocument.model_validate(data)
    except ValidationError as exc:
        raise TopologyDocumentError(f"{source_label}: invalid topology document: {exc}") from exc

    return Topology(
        instances=tuple(_instance_from_document(entry) for entry in document.instances),
        connections=tuple(_connection_from_document(entry) for entry in document.connections),
    )


def dump_topology(topology: Topology) -> str:
    """Serialize *topology* as a version 1 YAML document, preserving order."""
    data: dict[str, Any] = {
        "version": DOCUMENT_VERSION,
        "instances": [_instance_to_document(inst) for inst in topology.instances],
        "connections": [
            {"id": conn.id, "source": conn.source_id, "target": conn.target_id, "kind": conn.kind.value}
            for conn in topology.connections
        ],
    }
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


# ################
# Implementation
# ################


class _EnvEntry(BaseModel):
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    key: str
    value: str = ""


class _InstanceDocument(BaseModel):
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    id: str
    type: str
    name: str = ""
    database: str | None = None
    persistent: bool | None = None
    env: dict[str, str] | list[_EnvEntry] = Field(default_factory=list)
    ports: list[str] = Field(default_factory=list)
    volumes: list[str] = Field(default_factory=list)
    replicas: int | None = None


class _ConnectionDocument(BaseModel):
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    id: str | None = None
    source: str
    target: str
    kind: ConnectionKind = ConnectionKind.REFERENCE


class _TopologyDocument(BaseModel):
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    version: str = DOCUMENT_VERSION
    instances: list[_InstanceDocument] = Field(default_factory=list)
    connections: list[_ConnectionDocument] = Field(default_factory=list)


def _instance_from_document(entry: _InstanceDocument) -> ResourceInstance:
    if isinstance(entry.env, dict):
        env_vars = tuple(EnvVar(key=k, value=v) for k, v in entry.env.items())
    else:
        env_vars = tuple(EnvVar(key=e.key, value=e.value) for e in entry.env)
    return ResourceInstance(
        id=entry.id,
        resource_type=entry.type,
        instance_name=entry.name,
        database_name=entry.database,
        config=ResourceConfig(
            env_vars=env_vars,
            ports=tuple(_parse_port(port) for port in entry.ports),
            volumes=tuple(_parse_volume(volume) for volume in entry.volumes),
            replicas=entry.replicas,
            persistent=entry.persistent,
        ),
    )


def _connection_from_document(entry: _ConnectionDocument) -> Connection:
    return Connection(
        id=entry.id or f"edge_{entry.source}_{entry.target}",
        source_id=entry.source,
        target_id=entry.target,
        kind=entry.kind,
    )


def _parse_port(text: str) -> PortMapping:
    host, sep, container = text.rpartition(":")
    if not sep:
        return PortMapping(container=text)
    return PortMapping(host=host or None, container=container)


def _parse_volume(text: str) -> VolumeMount:
    source, sep, target = text.rpartition(":")
    if not sep or not source or not target:
        raise TopologyDocumentError(f"Volume '{text}' must have the form 'source:target'")
    return VolumeMount(source=source, target=target)


def _instance_to_document(inst: ResourceInstance) -> dict[str, Any]:
    entry: dict[str, Any] = {"id": inst.id, "type": inst.resource_type, "name": inst.instance_name}
    if inst.database_name is not None:
        entry["database"] = inst.database_name
    config = inst.config
    if config.persistent is not None:
        entry["persistent"] = config.persistent
    if config.env_vars:
        keys = [env.key for env in config.env_vars]
        if len(set(keys)) == len(keys):
            entry["env"] = {env.key: env.value for env in config.env_vars}
        else:
            entry["env"] = [{"key": env.key, "value": env.value} for env in config.env_vars]
    if config.ports:
        entry["ports"] = [f"{p.host}:{p.container}" if p.host else p.container for p in config.ports]
    if config.volumes:
        entry["volumes"] = [f"{v.source}:{v.target}" for v in config.volumes]
    if config.replicas is not None:
        entry["replicas"] = config.replicas
    return entry
