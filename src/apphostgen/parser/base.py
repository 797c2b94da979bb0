# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared interface and helpers for the reverse parsers.

A reverse parser reads text in some external format and reconstructs a
:class:`~apphostgen.model.entities.Topology` from it. Parsers are
best-effort: malformed input never raises, it yields fewer instances plus
warnings describing what was skipped.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field

from apphostgen.model.entities import EnvVar, PortMapping, ResourceConfig, ResourceInstance, Topology, VolumeMount

# ###############
# Public Interface
# ###############

FIRST_IMPORTED_ID = 1000


@dataclass(frozen=True)
class ImportResult:
    """What a reverse parser recovered.

    Attributes:
        topology: The reconstructed instances and connections.
        warnings: Human-readable notes about skipped or guessed content.
    """

    topology: Topology
    warnings: list[str] = field(default_factory=list)


class TopologyParser(ABC):
    """A reverse parser for one external text format."""

    format_name: str = ""

    @abstractmethod
    def parse(self, text: str) -> ImportResult:
        """Reconstruct a topology from *text*. Never raises on malformed input."""


class IdAllocator:
    """Hands out ``imported_<n>`` ids that avoid a set of reserved ids.

    Numbering starts at :data:`FIRST_IMPORTED_ID` for every allocator, so
    parsing the same text against the same reserved ids gives the same ids.
    """

    def __init__(self, reserved_ids: Iterable[str] = ()) -> None:
        self._reserved = set(reserved_ids)
        self._next = FIRST_IMPORTED_ID

    def allocate(self) -> str:
        while True:
            candidate = f"imported_{self._next}"
            self._next += 1
            if candidate not in self._reserved:
                self._reserved.add(candidate)
                return candidate


@dataclass
class InstanceDraft:
    """Mutable working copy of an instance while a parser collects its details."""

    id: str
    resource_type: str
    instance_name: str
    database_name: str | None = None
    env_vars: list[tuple[str, str]] = field(default_factory=list)
    ports: list[tuple[str | None, str]] = field(default_factory=list)
    volumes: list[tuple[str, str]] = field(default_factory=list)
    replicas: int | None = None
    persistent: bool | None = None

    def freeze(self) -> ResourceInstance:
        """Return the immutable instance described by this draft."""
        return ResourceInstance(
            id=self.id,
            resource_type=self.resource_type,
            instance_name=self.instance_name,
            database_name=self.database_name,
            config=ResourceConfig(
                env_vars=tuple(EnvVar(key=k, value=v) for k, v in self.env_vars),
                ports=tuple(PortMapping(host=h, container=c) for h, c in self.ports),
                volumes=tuple(VolumeMount(source=s, target=t) for s, t in self.volumes),
                replicas=self.replicas,
                persistent=self.persistent,
            ),
        )


def build_topology(drafts: Iterable[InstanceDraft], edges: Iterable[tuple[str, str]]) -> Topology:
    """Freeze *drafts* and connect each ``(source_id, target_id)`` pair in order."""
    topology = Topology(instances=tuple(d.freeze() for d in drafts))
    for source_id, target_id in edges:
        topology = topology.connect(source_id, target_id)
    return topology
