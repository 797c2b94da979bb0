# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the compose reverse parser."""

import pytest

from apphostgen.model.entities import Topology
from apphostgen.parser.compose import ComposeParser, parse_compose, resolve_image_type
from apphostgen.schema.registry import SchemaRegistry

# ###############
# Helpers
# ###############

_COMPOSE = """\
version: "3.9"

services:
  db:
    image: postgres:16
    ports:
      - "5432:5432"
    environment:
      POSTGRES_PASSWORD: example
    volumes:
      - ./pgdata:/var/lib/postgresql/data
      - named:/ignored
  cache:
    image: redis:7  # in-memory
  api:
    build: ./api
    ports: ["8080:80"]
    depends_on:
      - db
      - cache
    environment:
      - ASPNETCORE_ENVIRONMENT=Development

volumes:
  named:
"""


def _names(topology: Topology) -> list[str]:
    return [inst.instance_name for inst in topology.instances]


def _named_edges(topology: Topology) -> list[tuple[str, str]]:
    names = {inst.id: inst.instance_name for inst in topology.instances}
    return [(names[c.source_id], names[c.target_id]) for c in topology.connections]


# ###############
# Services
# ###############


class TestServices:
    def test_services_and_types(self, registry: SchemaRegistry) -> None:
        result = parse_compose(_COMPOSE, registry)
        assert [(i.instance_name, i.resource_type) for i in result.topology.instances] == [
            ("db", "postgres"),
            ("cache", "redis"),
            ("api", "container"),
        ]
        assert result.warnings == [
            'Could not map service "api" to an Aspire resource; using a generic container'
        ]

    def test_dependencies_become_connections(self, registry: SchemaRegistry) -> None:
        topology = parse_compose(_COMPOSE, registry).topology
        assert _named_edges(topology) == [("db", "api"), ("cache", "api")]

    def test_ports_env_and_volumes(self, registry: SchemaRegistry) -> None:
        db, _, api = parse_compose(_COMPOSE, registry).topology.instances
        assert [(p.host, p.container) for p in db.config.ports] == [("5432", "5432")]
        assert [(e.key, e.value) for e in db.config.env_vars] == [("POSTGRES_PASSWORD", "example")]
        assert [(v.source, v.target) for v in db.config.volumes] == [("./pgdata", "/var/lib/postgresql/data")]
        assert [(p.host, p.container) for p in api.config.ports] == [("8080", "80")]
        assert [(e.key, e.value) for e in api.config.env_vars] == [("ASPNETCORE_ENVIRONMENT", "Development")]

    def test_database_names_are_left_unset(self, registry: SchemaRegistry) -> None:
        db = parse_compose(_COMPOSE, registry).topology.instances[0]
        assert db.database_name is None

    def test_depends_on_mapping_form(self, registry: SchemaRegistry) -> None:
        text = (
            "services:\n"
            "  db:\n"
            "    image: mysql:8\n"
            "  api:\n"
            "    image: node:20\n"
            "    depends_on:\n"
            "      db:\n"
            "        condition: service_healthy\n"
        )
        result = parse_compose(text, registry)
        assert _named_edges(result.topology) == [("db", "api")]
        assert [i.resource_type for i in result.topology.instances] == ["mysql", "node-app"]

    def test_unknown_dependency_is_warned(self, registry: SchemaRegistry) -> None:
        text = "services:\n  api:\n    image: python:3.12\n    depends_on: [queue]\n"
        result = parse_compose(text, registry)
        assert result.topology.connections == ()
        assert result.warnings == ['Service "api" depends on unknown service "queue"']

    def test_service_names_are_sanitized(self, registry: SchemaRegistry) -> None:
        text = "services:\n  order-service:\n    image: redis\n  my.worker:\n    image: rabbitmq\n"
        result = parse_compose(text, registry)
        assert _names(result.topology) == ["order_service", "my_worker"]
        assert 'Service "order-service" renamed to "order_service"' in result.warnings
        assert 'Service "my.worker" renamed to "my_worker"' in result.warnings

    def test_missing_services_section(self, registry: SchemaRegistry) -> None:
        result = parse_compose("networks:\n  default:\n", registry)
        assert result.topology == Topology()
        assert result.warnings == [
            "No services found in the docker-compose file. Make sure it contains a valid services section."
        ]

    def test_reserved_ids_and_determinism(self, registry: SchemaRegistry) -> None:
        parser = ComposeParser(registry, reserved_ids=["imported_1000"])
        first = parser.parse(_COMPOSE)
        assert [i.id for i in first.topology.instances] == ["imported_1001", "imported_1002", "imported_1003"]
        assert parser.parse(_COMPOSE) == first


# ###############
# Image resolution
# ###############


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("postgres", "postgres"),
        ("bitnami/postgresql:15", "postgres"),
        ("mariadb:11", "mysql"),
        ("mcr.microsoft.com/mssql/server:2022-latest", "sqlserver"),
        ("mongo:7", "mongodb"),
        ("RabbitMQ", "rabbitmq"),
        ("nginx:alpine", "container"),
        ("ollama/ollama", "ollama"),
        ("valkey", "valkey"),
    ],
)
def test_resolve_image_type(identifier: str, expected: str, registry: SchemaRegistry) -> None:
    assert resolve_image_type(identifier, registry) == expected


def test_resolve_unknown_image(registry: SchemaRegistry) -> None:
    assert resolve_image_type("ghcr.io/acme/billing", registry) is None
