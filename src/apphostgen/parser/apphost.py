# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reverse parser for AppHost declaration text.

Recognised shapes::

    var pg = builder.AddPostgres("pg")
        .WithLifetime(ContainerLifetime.Persistent);
    var appdb = pg.AddDatabase("appdb");
    var api = builder.AddProject<Projects.Api>("api")
        .WithReference(appdb)
        .WaitFor(appdb);

Each ``builder.Add<Type>("name")`` declaration becomes an instance. An
``AddDatabase`` call names the server's logical database and makes its
variable an alias of the server. Statements are split on ``;``; every
``.WithReference(x)`` inside a statement owned by variable ``v`` yields a
connection from ``x`` to ``v``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from apphostgen.model.types import ResourceCategory
from apphostgen.parser.base import IdAllocator, ImportResult, InstanceDraft, TopologyParser, build_topology
from apphostgen.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class AppHostParser(TopologyParser):
    """Reconstructs a topology from AppHost C# declarations."""

    format_name = "apphost"

    def __init__(self, registry: SchemaRegistry, reserved_ids: Iterable[str] = ()) -> None:
        self._registry = registry
        self._reserved_ids = tuple(reserved_ids)

    def parse(self, text: str) -> ImportResult:
        return _AppHostScan(self._registry, IdAllocator(self._reserved_ids)).run(text)


def parse_apphost(text: str, registry: SchemaRegistry, reserved_ids: Iterable[str] = ()) -> ImportResult:
    """Parse AppHost declaration text. See :class:`AppHostParser`."""
    return AppHostParser(registry, reserved_ids).parse(text)


# ################
# Implementation
# ################

_LINE_COMMENT_RE = re.compile(r"^\s*//.*$", re.MULTILINE)
_DECLARATION_RE = re.compile(r'(?:var|let|const)\s+(\w+)\s*=\s*builder\.Add(\w+)(?:<[^>]+>)?\s*\(\s*"([^"]+)"')
_DATABASE_RE = re.compile(r'(?:var|let|const)\s+(\w+)\s*=\s*(\w+)\.AddDatabase\s*\(\s*"([^"]+)"')
_OWNER_RE = re.compile(r"^\s*(?:(?:var|let|const)\s+(\w+)\s*=|(\w+)\s*\.)")
_REFERENCE_RE = re.compile(r"\.WithReference\s*\(\s*(\w+)\s*\)")
_ENVIRONMENT_RE = re.compile(r'\.WithEnvironment\s*\(\s*"([^"]*)"\s*,\s*"([^"]*)"\s*\)')
_BIND_MOUNT_RE = re.compile(r'\.WithBindMount\s*\(\s*"([^"]*)"\s*,\s*"([^"]*)"\s*\)')
_REPLICAS_RE = re.compile(r"\.WithReplicas\s*\(\s*(\d+)\s*\)")
_PERSISTENT_MARKER = "ContainerLifetime.Persistent"


class _AppHostScan:
    """State for a single parse."""

    def __init__(self, registry: SchemaRegistry, ids: IdAllocator) -> None:
        self._registry = registry
        self._ids = ids
        self._drafts: dict[str, InstanceDraft] = {}
        self._aliases: dict[str, str] = {}
        self._edges: list[tuple[str, str]] = []
        self._warnings: list[str] = []

    def run(self, text: str) -> ImportResult:
        code = _LINE_COMMENT_RE.sub("", text)
        self._scan_declarations(code)
        self._scan_databases(code)
        for statement in code.split(";"):
            self._scan_statement(statement)

        if not self._drafts:
            self._warnings.append(
                "No Aspire resources found in the file. Make sure the file contains builder.Add* patterns."
            )
        logger.debug("AppHost import: %d instance(s), %d connection(s)", len(self._drafts), len(self._edges))
        return ImportResult(
            topology=build_topology(self._drafts.values(), self._edges),
            warnings=self._warnings,
        )

    def _scan_declarations(self, code: str) -> None:
        for match in _DECLARATION_RE.finditer(code):
            var_name, suffix, resource_name = match.groups()
            definition = self._registry.find_by_builder_method(f"Add{suffix}")
            if definition is None:
                self._warnings.append(f"Unknown resource type: Add{suffix}")
                continue
            draft = InstanceDraft(id=self._ids.allocate(), resource_type=definition.id, instance_name=resource_name)
            if definition.category is ResourceCategory.DATABASE:
                draft.persistent = False
            self._drafts[draft.id] = draft
            self._aliases[var_name] = draft.id

    def _scan_databases(self, code: str) -> None:
        for match in _DATABASE_RE.finditer(code):
            var_name, parent_var, database_name = match.groups()
            parent_id = self._aliases.get(parent_var)
            if parent_id is None:
                continue
            self._drafts[parent_id].database_name = database_name
            self._aliases[var_name] = parent_id

    def _scan_statement(self, statement: str) -> None:
        match = _OWNER_RE.match(statement)
        if match is None:
            return
        owner_id = self._aliases.get(match.group(1) or match.group(2))
        if owner_id is None:
            return
        draft = self._drafts[owner_id]

        for ref in _REFERENCE_RE.finditer(statement):
            source_id = self._aliases.get(ref.group(1))
            if source_id is None or source_id == owner_id:
                continue
            edge = (source_id, owner_id)
            if edge not in self._edges:
                self._edges.append(edge)

        draft.env_vars.extend(_ENVIRONMENT_RE.findall(statement))
        draft.volumes.extend(_BIND_MOUNT_RE.findall(statement))
        replicas = _REPLICAS_RE.search(statement)
        if replicas is not None:
            draft.replicas = int(replicas.group(1))
        if draft.persistent is False and _PERSISTENT_MARKER in statement:
            draft.persistent = True
