# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Topology model: resource instances and the connections between them.

All entities are frozen. Edits go through the ``with_*`` / ``add_*`` style
operations, each of which returns a new value and leaves the original
untouched, so an instance reachable from several collections can never be
changed behind another holder's back.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############


class ConnectionKind(Enum):
    """The relationship a connection expresses between two resources."""

    REFERENCE = "reference"
    WAIT_FOR = "waitFor"
    DEPENDS_ON = "dependsOn"


class EnvVar(BaseModel):
    """An environment variable assignment."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str


class PortMapping(BaseModel):
    """A host-to-container port mapping. Values are kept as entered."""

    model_config = ConfigDict(frozen=True)

    container: str
    host: str | None = None


class VolumeMount(BaseModel):
    """A bind mount from a host path into the container."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str


class ResourceConfig(BaseModel):
    """Optional per-instance configuration bag."""

    model_config = ConfigDict(frozen=True)

    env_vars: tuple[EnvVar, ...] = ()
    ports: tuple[PortMapping, ...] = ()
    volumes: tuple[VolumeMount, ...] = ()
    replicas: int | None = None
    persistent: bool | None = None


class ResourceInstance(BaseModel):
    """One node of the topology graph."""

    model_config = ConfigDict(frozen=True)

    id: str
    resource_type: str
    instance_name: str = ""
    database_name: str | None = None
    config: ResourceConfig = ResourceConfig()

    def renamed(self, instance_name: str) -> ResourceInstance:
        """Return a copy with a new instance name."""
        return self.model_copy(update={"instance_name": instance_name})

    def with_database(self, database_name: str | None) -> ResourceInstance:
        """Return a copy with the logical database name set (or cleared)."""
        return self.model_copy(update={"database_name": database_name})

    def with_config(self, **changes: object) -> ResourceInstance:
        """Return a copy whose configuration has the given fields replaced."""
        config = self.config.model_copy(update=changes)
        return self.model_copy(update={"config": config})

    def with_env_var(self, key: str, value: str) -> ResourceInstance:
        """Return a copy with an environment variable appended."""
        return self.with_config(env_vars=(*self.config.env_vars, EnvVar(key=key, value=value)))

    def with_port(self, container: str, host: str | None = None) -> ResourceInstance:
        """Return a copy with a port mapping appended."""
        return self.with_config(ports=(*self.config.ports, PortMapping(container=container, host=host)))

    def with_volume(self, source: str, target: str) -> ResourceInstance:
        """Return a copy with a bind mount appended."""
        return self.with_config(volumes=(*self.config.volumes, VolumeMount(source=source, target=target)))


class Connection(BaseModel):
    """A directed edge: *target* depends on / references *source*."""

    model_config = ConfigDict(frozen=True)

    id: str
    source_id: str
    target_id: str
    kind: ConnectionKind = ConnectionKind.REFERENCE


class Topology(BaseModel):
    """The in-memory graph handed to the compiler."""

    model_config = ConfigDict(frozen=True)

    instances: tuple[ResourceInstance, ...] = ()
    connections: tuple[Connection, ...] = ()

    def instance(self, instance_id: str) -> ResourceInstance | None:
        """Return the instance with *instance_id*, or None."""
        for inst in self.instances:
            if inst.id == instance_id:
                return inst
        return None

    def add_instance(self, instance: ResourceInstance) -> Topology:
        """Return a topology with *instance* appended."""
        return self.model_copy(update={"instances": (*self.instances, instance)})

    def replace_instance(self, instance: ResourceInstance) -> Topology:
        """Return a topology where the instance sharing *instance.id* is replaced.

        Raises:
            KeyError: If no instance with that id exists.
        """
        if self.instance(instance.id) is None:
            raise KeyError(instance.id)
        instances = tuple(instance if inst.id == instance.id else inst for inst in self.instances)
        return self.model_copy(update={"instances": instances})

    def update_instance(
        self,
        instance_id: str,
        change: Callable[[ResourceInstance], ResourceInstance],
    ) -> Topology:
        """Return a topology with *change* applied to one instance.

        Raises:
            KeyError: If no instance with *instance_id* exists.
        """
        current = self.instance(instance_id)
        if current is None:
            raise KeyError(instance_id)
        return self.replace_instance(change(current))

    def remove_instance(self, instance_id: str) -> Topology:
        """Return a topology without the instance and without its connections."""
        instances = tuple(inst for inst in self.instances if inst.id != instance_id)
        connections = tuple(
            conn for conn in self.connections if conn.source_id != instance_id and conn.target_id != instance_id
        )
        return self.model_copy(update={"instances": instances, "connections": connections})

    def connect(
        self,
        source_id: str,
        target_id: str,
        kind: ConnectionKind = ConnectionKind.REFERENCE,
        *,
        connection_id: str | None = None,
    ) -> Topology:
        """Return a topology with a new connection from *source_id* to *target_id*.

        Endpoints are not checked here; dangling or incompatible connections
        are reported by validation.
        """
        conn = Connection(
            id=connection_id or f"edge_{source_id}_{target_id}",
            source_id=source_id,
            target_id=target_id,
            kind=kind,
        )
        return self.model_copy(update={"connections": (*self.connections, conn)})

    def disconnect(self, connection_id: str) -> Topology:
        """Return a topology without the connection called *connection_id*."""
        connections = tuple(conn for conn in self.connections if conn.id != connection_id)
        return self.model_copy(update={"connections": connections})

    def incoming(self, instance_id: str) -> list[Connection]:
        """Return the connections whose target is *instance_id*, in order."""
        return [conn for conn in self.connections if conn.target_id == instance_id]

    def outgoing(self, instance_id: str) -> list[Connection]:
        """Return the connections whose source is *instance_id*, in order."""
        return [conn for conn in self.connections if conn.source_id == instance_id]
