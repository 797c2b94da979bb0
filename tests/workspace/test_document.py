# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for loading and saving topology documents."""

from pathlib import Path

import pytest

from apphostgen.model.entities import ConnectionKind, EnvVar, ResourceConfig, ResourceInstance, Topology
from apphostgen.workspace import (
    TopologyDocumentError,
    dump_topology,
    load_topology,
    parse_topology_document,
    topology_from_data,
)

# ###############
# Helpers
# ###############

_DOCUMENT = """\
version: "1"
instances:
  - id: pg
    type: postgres
    name: pg
    database: appdb
    persistent: true
    env: {POSTGRES_DB: appdb, PGPORT: 5432}
    ports: ["5432:5432", "9000"]
    volumes: ["./data:/var/lib/postgresql/data"]
  - id: api
    type: dotnet-project
    name: api
    replicas: 2
connections:
  - {source: pg, target: api}
  - {id: wait, source: pg, target: api, kind: waitFor}
"""


# ###############
# Loading
# ###############


class TestLoad:
    def test_instances(self) -> None:
        """Every instance field is mapped onto the model."""
        pg, api = parse_topology_document(_DOCUMENT).instances
        assert pg.resource_type == "postgres"
        assert pg.database_name == "appdb"
        assert pg.config.persistent is True
        assert [(e.key, e.value) for e in pg.config.env_vars] == [("POSTGRES_DB", "appdb"), ("PGPORT", "5432")]
        assert [(p.host, p.container) for p in pg.config.ports] == [("5432", "5432"), (None, "9000")]
        assert [(v.source, v.target) for v in pg.config.volumes] == [("./data", "/var/lib/postgresql/data")]
        assert api.config.replicas == 2
        assert api.database_name is None

    def test_connections(self) -> None:
        """Connection ids and kinds default when omitted."""
        connections = parse_topology_document(_DOCUMENT).connections
        assert [(c.id, c.kind) for c in connections] == [
            ("edge_pg_api", ConnectionKind.REFERENCE),
            ("wait", ConnectionKind.WAIT_FOR),
        ]

    def test_env_as_list(self) -> None:
        """The list form of env keeps duplicate keys."""
        text = "instances:\n  - id: a\n    type: redis\n    env: [{key: A, value: '1'}, {key: A}]\n"
        (inst,) = parse_topology_document(text).instances
        assert inst.config.env_vars == (EnvVar(key="A", value="1"), EnvVar(key="A", value=""))

    def test_empty_mapping_is_an_empty_topology(self) -> None:
        """A document without instances is an empty topology."""
        assert parse_topology_document("version: '1'\n") == Topology()

    def test_load_from_file(self, tmp_path: Path) -> None:
        """load_topology reads the document from disk."""
        path = tmp_path / "topology.yaml"
        path.write_text(_DOCUMENT, encoding="utf-8")
        assert load_topology(path) == parse_topology_document(_DOCUMENT)

    def test_json_is_accepted(self) -> None:
        """JSON documents parse through the YAML loader."""
        text = '{"instances": [{"id": "a", "type": "redis", "name": "cache"}], "connections": []}'
        assert parse_topology_document(text).instances[0].instance_name == "cache"


class TestLoadErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TopologyDocumentError, match="Topology file not found"):
            load_topology(tmp_path / "missing.yaml")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(TopologyDocumentError, match="Invalid YAML"):
            parse_topology_document("instances: [\n")

    def test_not_a_mapping(self) -> None:
        with pytest.raises(TopologyDocumentError, match="must be a YAML mapping"):
            parse_topology_document("- a\n")

    def test_unsupported_version(self) -> None:
        with pytest.raises(TopologyDocumentError, match="unsupported document version '2'"):
            parse_topology_document("version: 2\n")

    def test_unknown_key(self) -> None:
        with pytest.raises(TopologyDocumentError, match="invalid topology document"):
            parse_topology_document("instances:\n  - {id: a, type: redis, colour: red}\n")

    def test_missing_type(self) -> None:
        with pytest.raises(TopologyDocumentError, match="invalid topology document"):
            topology_from_data({"instances": [{"id": "a"}]}, source_label="inline")

    def test_unknown_connection_kind(self) -> None:
        with pytest.raises(TopologyDocumentError):
            parse_topology_document("connections:\n  - {source: a, target: b, kind: sometimes}\n")

    def test_malformed_volume(self) -> None:
        with pytest.raises(TopologyDocumentError, match="source:target"):
            parse_topology_document("instances:\n  - {id: a, type: container, volumes: ['/data']}\n")


# ###############
# Saving
# ###############


class TestDump:
    def test_dump_then_load_is_identity(self) -> None:
        """A dumped document loads back into an equal topology."""
        topology = parse_topology_document(_DOCUMENT)
        assert parse_topology_document(dump_topology(topology)) == topology

    def test_minimal_instance(self) -> None:
        """Unset optional fields are left out of the document."""
        topology = Topology(instances=(ResourceInstance(id="a", resource_type="redis", instance_name="cache"),))
        assert dump_topology(topology) == (
            "version: '1'\ninstances:\n- id: a\n  type: redis\n  name: cache\nconnections: []\n"
        )

    def test_duplicate_env_keys_use_list_form(self) -> None:
        """Duplicate env keys survive a save and load."""
        inst = ResourceInstance(
            id="a",
            resource_type="redis",
            config=ResourceConfig(env_vars=(EnvVar(key="A", value="1"), EnvVar(key="A", value="2"))),
        )
        topology = Topology(instances=(inst,))
        text = dump_topology(topology)
        assert "- key: A" in text
        assert parse_topology_document(text) == topology
