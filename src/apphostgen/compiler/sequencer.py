# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Dependency ordering of resource instances.

Connections point from the depended-upon resource (source) to the resource
that depends on it (target), so every source is sequenced before its
targets. Ordering uses Kahn's algorithm with a FIFO queue seeded in the
topology's instance order, which makes insertion order the tie-break.

Instances on a dependency cycle, and everything downstream of one, never
reach an in-degree of zero. They are not silently lost: the result lists
them as ``unsequenced`` and a warning is logged. Callers that must not
proceed with a partial order pass ``strict=True`` and get a
:class:`CycleError` instead.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from apphostgen.model.entities import ResourceInstance, Topology

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class CycleError(Exception):
    """Raised by strict sequencing when instances cannot be ordered.

    Attributes:
        unsequenced: The instances left over after ordering, in topology order.
    """

    def __init__(self, unsequenced: list[ResourceInstance]) -> None:
        self.unsequenced = unsequenced
        names = ", ".join(inst.instance_name or inst.id for inst in unsequenced)
        super().__init__(f"Dependency cycle prevents ordering of: {names}")


@dataclass(frozen=True)
class SequenceResult:
    """Outcome of sequencing a topology.

    Attributes:
        ordered: Instances in dependency order.
        unsequenced: Instances that could not be ordered because they sit on,
            or downstream of, a dependency cycle. Empty for acyclic input.
    """

    ordered: list[ResourceInstance] = field(default_factory=list)
    unsequenced: list[ResourceInstance] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Return True if every instance was ordered."""
        return not self.unsequenced


def sequence(topology: Topology, *, strict: bool = False) -> SequenceResult:
    """Order the instances of *topology* so that sources precede targets.

    Connections whose source or target does not exist are ignored; they are
    reported by validation.

    Args:
        topology: The topology to order.
        strict: Raise instead of returning a partial order.

    Returns:
        A :class:`SequenceResult`.

    Raises:
        CycleError: If *strict* is set and some instances cannot be ordered.
    """
    ids = [inst.id for inst in topology.instances]
    known = set(ids)
    in_degree: dict[str, int] = dict.fromkeys(ids, 0)
    neighbours: dict[str, list[str]] = {node_id: [] for node_id in ids}

    for conn in topology.connections:
        if conn.source_id not in known or conn.target_id not in known:
            continue
        neighbours[conn.source_id].append(conn.target_id)
        in_degree[conn.target_id] += 1

    queue = deque(node_id for node_id in ids if in_degree[node_id] == 0)
    order: list[str] = []
    while queue:
        current = queue.popleft()
        order.append(current)
        for neighbour in neighbours[current]:
            in_degree[neighbour] -= 1
            if in_degree[neighbour] == 0:
                queue.append(neighbour)

    placed = set(order)
    by_id = {inst.id: inst for inst in topology.instances}
    ordered = [by_id[node_id] for node_id in order]
    unsequenced = [inst for inst in topology.instances if inst.id not in placed]

    if unsequenced:
        if strict:
            raise CycleError(unsequenced)
        logger.warning(
            "Dependency cycle left %d instance(s) unsequenced: %s",
            len(unsequenced),
            ", ".join(inst.instance_name or inst.id for inst in unsequenced),
        )
    logger.debug("Sequenced %d of %d instance(s)", len(ordered), len(topology.instances))
    return SequenceResult(ordered=ordered, unsequenced=unsequenced)
