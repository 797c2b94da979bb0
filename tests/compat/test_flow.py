# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the canvas node/edge adapter."""

import logging

import pytest

from apphostgen.compat.flow import GRID_ORIGIN, GRID_SPACING, NODE_TYPE, from_flow_graph, to_flow_graph
from apphostgen.model.entities import ConnectionKind, ResourceConfig, ResourceInstance, Topology
from apphostgen.schema.registry import SchemaRegistry

# ###############
# Helpers
# ###############


def _node(node_id: str, resource_type: str, **data: object) -> dict[str, object]:
    return {"id": node_id, "type": NODE_TYPE, "data": {"resourceType": resource_type, **data}}


# ###############
# From canvas
# ###############


class TestFromFlowGraph:
    def test_nodes_and_edges(self) -> None:
        nodes = [
            _node("node_0", "postgres", instanceName="pg", databaseName="appdb", persistent=False),
            _node(
                "node_1",
                "dotnet-project",
                instanceName="api",
                envVars=[{"key": "MODE", "value": "dev"}, {"key": "", "value": "x"}],
                ports=[{"host": "", "container": "8080"}, {"host": 80, "container": 8081}],
                volumes=[{"source": "./data", "target": "/data"}, {"source": "", "target": "/x"}],
                replicas=2,
            ),
        ]
        edges = [{"id": "e1", "source": "node_0", "target": "node_1"}]
        topology = from_flow_graph(nodes, edges)

        pg, api = topology.instances
        assert pg.database_name == "appdb"
        assert pg.config.persistent is False
        assert [(e.key, e.value) for e in api.config.env_vars] == [("MODE", "dev")]
        assert [(p.host, p.container) for p in api.config.ports] == [(None, "8080"), ("80", "8081")]
        assert [(v.source, v.target) for v in api.config.volumes] == [("./data", "/data")]
        assert api.config.replicas == 2
        assert topology.connections[0].id == "e1"
        assert topology.connections[0].kind is ConnectionKind.REFERENCE

    def test_missing_optional_fields(self) -> None:
        topology = from_flow_graph([_node("n", "redis")], [])
        inst = topology.instances[0]
        assert inst.instance_name == ""
        assert inst.database_name is None
        assert inst.config == ResourceConfig()

    @pytest.mark.parametrize(
        "node",
        [
            {"data": {"resourceType": "redis"}},
            {"id": "n"},
            {"id": "n", "data": {"instanceName": "cache"}},
            {"id": 7, "data": {"resourceType": "redis"}},
        ],
    )
    def test_malformed_nodes_are_skipped(self, node: dict[str, object], caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="apphostgen.compat.flow"):
            topology = from_flow_graph([node], [])
        assert topology.instances == ()
        assert "Skipping malformed canvas node" in caplog.text

    def test_edge_defaults_and_malformed_edges(self) -> None:
        edges = [
            {"source": "a", "target": "b", "kind": "waitFor"},
            {"id": "e2", "source": "a"},
            {"id": "e3", "source": "b", "target": "c", "kind": "bogus"},
        ]
        connections = from_flow_graph([], edges).connections
        assert [(c.id, c.kind) for c in connections] == [
            ("edge_a_b", ConnectionKind.WAIT_FOR),
            ("e3", ConnectionKind.REFERENCE),
        ]


# ###############
# To canvas
# ###############


class TestToFlowGraph:
    def test_grid_layout(self, registry: SchemaRegistry) -> None:
        topology = Topology(
            instances=tuple(
                ResourceInstance(id=f"n{i}", resource_type="redis", instance_name=f"c{i}") for i in range(4)
            )
        )
        nodes, _ = to_flow_graph(topology, registry)
        positions = [(n["position"]["x"], n["position"]["y"]) for n in nodes]
        x0, y0 = GRID_ORIGIN
        dx, dy = GRID_SPACING
        assert positions == [(x0, y0), (x0 + dx, y0), (x0 + 2 * dx, y0), (x0, y0 + dy)]
        assert all(n["type"] == NODE_TYPE for n in nodes)

    def test_node_data(self, registry: SchemaRegistry) -> None:
        inst = (
            ResourceInstance(id="n1", resource_type="postgres", instance_name="pg", database_name="appdb")
            .with_port("5432")
            .with_env_var("POSTGRES_DB", "appdb")
        )
        (node,), _ = to_flow_graph(Topology(instances=(inst,)), registry)
        assert node["data"] == {
            "resourceType": "postgres",
            "label": "PostgreSQL",
            "instanceName": "pg",
            "allowsDatabase": True,
            "databaseName": "appdb",
            "envVars": [{"key": "POSTGRES_DB", "value": "appdb"}],
            "ports": [{"host": "", "container": "5432"}],
        }

    def test_edges_carry_kind_only_when_not_reference(self, registry: SchemaRegistry) -> None:
        topology = Topology().connect("a", "b").connect("b", "c", ConnectionKind.DEPENDS_ON, connection_id="dep")
        _, edges = to_flow_graph(topology, registry)
        assert edges == [
            {"id": "edge_a_b", "source": "a", "target": "b"},
            {"id": "dep", "source": "b", "target": "c", "kind": "dependsOn"},
        ]

    def test_round_trip_preserves_topology(self, registry: SchemaRegistry) -> None:
        topology = (
            Topology()
            .add_instance(
                ResourceInstance(
                    id="n1",
                    resource_type="postgres",
                    instance_name="pg",
                    database_name="appdb",
                    config=ResourceConfig(persistent=True),
                ).with_volume("./data", "/var/lib/postgresql/data")
            )
            .add_instance(
                ResourceInstance(id="n2", resource_type="container", instance_name="web")
                .with_port("80", host="8080")
                .with_config(replicas=3)
            )
            .connect("n1", "n2", ConnectionKind.WAIT_FOR)
        )
        assert from_flow_graph(*to_flow_graph(topology, registry)) == topology
