# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reverse parser for the service subset of compose files.

The scanner is line oriented and understands a restricted grammar: a
top-level ``services:`` block whose services are indented by two spaces (or
one tab), each with optional ``image:``, ``ports:``, ``depends_on:``,
``environment:`` and ``volumes:`` keys. Anything else is ignored.

A service that depends on another becomes the target of a connection whose
source is the dependency (``db -> api`` for ``api: depends_on: [db]``).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from apphostgen.parser.base import IdAllocator, ImportResult, InstanceDraft, TopologyParser, build_topology
from apphostgen.schema.naming import sanitize_service_name
from apphostgen.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

GENERIC_TYPE = "container"

IMAGE_TYPES: tuple[tuple[str, str], ...] = (
    ("postgres", "postgres"),
    ("postgresql", "postgres"),
    ("mysql", "mysql"),
    ("mariadb", "mysql"),
    ("mongo", "mongodb"),
    ("mongodb", "mongodb"),
    ("redis", "redis"),
    ("valkey", "valkey"),
    ("rabbitmq", "rabbitmq"),
    ("kafka", "kafka"),
    ("nats", "nats"),
    ("sqlserver", "sqlserver"),
    ("mssql", "sqlserver"),
    ("mcr.microsoft.com/mssql/server", "sqlserver"),
    ("oracle", "oracle"),
    ("ollama", "ollama"),
    ("nginx", "container"),
    ("node", "node-app"),
    ("python", "python-app"),
)
"""Substring-to-type table tried in order when an image is not a type id."""


class ComposeParser(TopologyParser):
    """Reconstructs a topology from a compose file's ``services:`` block."""

    format_name = "compose"

    def __init__(self, registry: SchemaRegistry, reserved_ids: Iterable[str] = ()) -> None:
        self._registry = registry
        self._reserved_ids = tuple(reserved_ids)

    def parse(self, text: str) -> ImportResult:
        services = _scan_services(text)
        warnings: list[str] = []
        ids = IdAllocator(self._reserved_ids)
        drafts: list[InstanceDraft] = []
        service_ids: dict[str, str] = {}

        for service in services:
            type_id = resolve_image_type(service.image or service.name, self._registry)
            if type_id is None:
                type_id = GENERIC_TYPE
                warnings.append(
                    f'Could not map service "{service.name}" to an Aspire resource; using a generic container'
                )
            instance_name = sanitize_service_name(service.name)
            if instance_name != service.name:
                warnings.append(f'Service "{service.name}" renamed to "{instance_name}"')
            draft = InstanceDraft(
                id=ids.allocate(),
                resource_type=type_id,
                instance_name=instance_name,
                env_vars=service.env_vars,
                ports=service.ports,
                volumes=service.volumes,
            )
            drafts.append(draft)
            service_ids[service.name] = draft.id

        edges: list[tuple[str, str]] = []
        for service in services:
            target_id = service_ids[service.name]
            for dependency in service.depends_on:
                source_id = service_ids.get(dependency)
                if source_id is None:
                    warnings.append(f'Service "{service.name}" depends on unknown service "{dependency}"')
                    continue
                if source_id != target_id and (source_id, target_id) not in edges:
                    edges.append((source_id, target_id))

        if not drafts:
            warnings.append(
                "No services found in the docker-compose file. Make sure it contains a valid services section."
            )
        logger.debug("Compose import: %d service(s), %d connection(s)", len(drafts), len(edges))
        return ImportResult(topology=build_topology(drafts, edges), warnings=warnings)


def parse_compose(text: str, registry: SchemaRegistry, reserved_ids: Iterable[str] = ()) -> ImportResult:
    """Parse compose text. See :class:`ComposeParser`."""
    return ComposeParser(registry, reserved_ids).parse(text)


def resolve_image_type(identifier: str, registry: SchemaRegistry) -> str | None:
    """Map an image reference or service name to a resource type id.

    Tries, in order: an exact type id, a builder method name (``Add<id>``),
    then the :data:`IMAGE_TYPES` substring table.

    Returns:
        The type id, or ``None`` when nothing matches.
    """
    lowered = identifier.lower()
    if registry.definition(lowered) is not None:
        return lowered
    definition = registry.find_by_builder_method(f"add{lowered}")
    if definition is not None:
        return definition.id
    for needle, type_id in IMAGE_TYPES:
        if needle in lowered:
            return type_id
    return None


# ################
# Implementation
# ################

_SERVICE_RE = re.compile(r"^(\s{2}|\t)(\w[\w.-]*)\s*:")
_KEY_RE = re.compile(r"^(\s+)([\w.-]+)\s*:\s*(.*)$")
_ITEM_RE = re.compile(r"^\s*-\s*(.*)$")
_PORT_RE = re.compile(r"^(?:[\d.]+:)?(\d+):(\d+)$")
_SECTIONS = ("ports", "depends_on", "environment", "volumes")


@dataclass
class _Service:
    name: str
    image: str | None = None
    ports: list[tuple[str | None, str]] = field(default_factory=list)
    depends_on: list[str] = field(default_factory=list)
    env_vars: list[tuple[str, str]] = field(default_factory=list)
    volumes: list[tuple[str, str]] = field(default_factory=list)


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _strip_comment(value: str) -> str:
    return re.sub(r"\s+#.*$", "", value)


def _inline_list(value: str) -> list[str] | None:
    value = value.strip()
    if not (value.startswith("[") and value.endswith("]")):
        return None
    return [_unquote(item) for item in value[1:-1].split(",") if item.strip()]


def _add_item(service: _Service, section: str, raw: str) -> None:
    item = _unquote(_strip_comment(raw))
    if not item:
        return
    if section == "ports":
        port = item.split("/", 1)[0]
        match = _PORT_RE.match(port)
        if match is not None:
            service.ports.append((match.group(1), match.group(2)))
        elif port.isdigit():
            service.ports.append((None, port))
    elif section == "depends_on":
        service.depends_on.append(item)
    elif section == "environment":
        key, _, value = item.partition("=")
        service.env_vars.append((key.strip(), value.strip()))
    elif section == "volumes":
        source, sep, rest = item.partition(":")
        if sep and source.startswith((".", "/", "~")):
            service.volumes.append((source, rest.split(":", 1)[0]))


def _scan_services(text: str) -> list[_Service]:
    services: list[_Service] = []
    current: _Service | None = None
    section: str | None = None
    section_indent = 0
    in_services = False

    for raw in text.splitlines():
        line = raw.rstrip()
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if not line[0].isspace():
            in_services = stripped == "services:"
            current = None
            section = None
            continue
        if not in_services:
            continue

        service_match = _SERVICE_RE.match(line)
        if service_match is not None:
            current = _Service(name=service_match.group(2))
            services.append(current)
            section = None
            continue
        if current is None:
            continue

        item_match = _ITEM_RE.match(line)
        if item_match is not None:
            if section is not None:
                _add_item(current, section, item_match.group(1))
            continue

        key_match = _KEY_RE.match(line)
        if key_match is None:
            continue
        indent = len(key_match.group(1))
        key = key_match.group(2)
        value = _strip_comment(key_match.group(3)).strip()

        if section is not None and indent > section_indent:
            if section == "environment":
                current.env_vars.append((key, _unquote(value)))
            elif section == "depends_on" and not value:
                current.depends_on.append(key)
            continue

        section = None
        if key == "image":
            current.image = _unquote(value)
        elif key in _SECTIONS:
            inline = _inline_list(value)
            if inline is not None:
                for item in inline:
                    _add_item(current, key, item)
            elif not value:
                section = key
                section_indent = indent

    return services
