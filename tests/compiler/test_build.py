# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the end-to-end compilation pipeline."""

import json

from apphostgen.compiler.build import GeneratedArtifacts, compile_topology
from apphostgen.compiler.companions import DEPLOYMENT_COMMANDS
from apphostgen.compiler.renderer import RenderOptions
from apphostgen.model.entities import Connection, ResourceInstance, Topology
from apphostgen.schema.registry import SchemaRegistry

# ###############
# Helpers
# ###############


def _web_api_postgres() -> Topology:
    return (
        Topology()
        .add_instance(ResourceInstance(id="n1", resource_type="postgres", instance_name="pg", database_name="appdb"))
        .add_instance(ResourceInstance(id="n2", resource_type="dotnet-project", instance_name="api"))
        .connect("n1", "n2")
    )


# ###############
# Successful compilation
# ###############


class TestCompile:
    def test_bundle_is_complete(self, registry: SchemaRegistry) -> None:
        artifacts = compile_topology(_web_api_postgres(), registry)
        assert not artifacts.is_blocked
        assert artifacts.blocking_errors == []
        assert artifacts.required_packages == ["Aspire.Hosting.PostgreSQL@13.0.0"]
        assert artifacts.deployment_commands == list(DEPLOYMENT_COMMANDS)
        assert ".WaitFor(appdb)" in artifacts.apphost
        assert json.loads(artifacts.settings)["ConnectionStrings"] == {"appdb": "{appdb.connectionString}"}
        assert "dotnet" in artifacts.build_file
        assert [app["name"] for app in json.loads(artifacts.manifest)["containerApps"]] == ["api"]

    def test_declarations_follow_dependency_order(self, registry: SchemaRegistry) -> None:
        topology = Topology(
            instances=(
                ResourceInstance(id="n2", resource_type="dotnet-project", instance_name="api"),
                ResourceInstance(id="n1", resource_type="redis", instance_name="cache"),
            )
        ).connect("n1", "n2")
        apphost = compile_topology(topology, registry).apphost
        assert apphost.index("var cache") < apphost.index("var api")

    def test_options_are_honoured(self, registry: SchemaRegistry) -> None:
        options = RenderOptions(aspire_version="13.2.0", indent_size=2)
        apphost = compile_topology(_web_api_postgres(), registry, options).apphost
        assert apphost.startswith("#:sdk Aspire.AppHost.Sdk@13.2.0")
        assert "\n  .WithReference(appdb)" in apphost

    def test_compilation_is_repeatable(self, registry: SchemaRegistry) -> None:
        topology = _web_api_postgres()
        assert compile_topology(topology, registry) == compile_topology(topology, registry)

    def test_long_dependency_chain(self, registry: SchemaRegistry) -> None:
        length = 5000
        topology = Topology(
            instances=tuple(
                ResourceInstance(id=f"n{i}", resource_type="container", instance_name=f"n{i}") for i in range(length)
            ),
            connections=tuple(
                Connection(id=f"e{i}", source_id=f"n{i}", target_id=f"n{i + 1}") for i in range(length - 1)
            ),
        )
        artifacts = compile_topology(topology, registry)
        assert not artifacts.is_blocked
        assert artifacts.apphost.index("var n0 = ") < artifacts.apphost.index("var n4999 = ")


# ###############
# Blocked compilation
# ###############


class TestBlocked:
    def test_dangling_edge_blocks_rendering(self, registry: SchemaRegistry) -> None:
        topology = Topology(
            instances=(ResourceInstance(id="n1", resource_type="dotnet-project", instance_name="api"),)
        ).connect("ghost", "n1")
        artifacts = compile_topology(topology, registry)

        assert artifacts.is_blocked
        assert artifacts.blocking_errors == ["Connection references a non-existent node"]
        assert "// 1. Connection references a non-existent node" in artifacts.apphost
        assert "builder.AddProject" not in artifacts.apphost
        assert artifacts == GeneratedArtifacts(apphost=artifacts.apphost, blocking_errors=artifacts.blocking_errors)

    def test_cycle_blocks_rendering(self, registry: SchemaRegistry) -> None:
        topology = (
            Topology()
            .add_instance(ResourceInstance(id="a", resource_type="dotnet-project", instance_name="alpha"))
            .add_instance(ResourceInstance(id="b", resource_type="dotnet-project", instance_name="beta"))
            .connect("a", "b")
            .connect("b", "a")
        )
        artifacts = compile_topology(topology, registry)
        assert artifacts.is_blocked
        assert any(m.startswith("Circular dependency detected") for m in artifacts.blocking_errors)

    def test_colliding_variable_names_block_rendering(self, registry: SchemaRegistry) -> None:
        topology = Topology(
            instances=(ResourceInstance(id="n1", resource_type="postgres", instance_name="pg", database_name="pg"),)
        )
        artifacts = compile_topology(topology, registry)
        assert artifacts.is_blocked
        assert artifacts.blocking_errors == ['C# variable "pg" would be declared for "pg", database "pg"']
        assert "AddDatabase" not in artifacts.apphost

    def test_placeholder_uses_configured_version(self, registry: SchemaRegistry) -> None:
        topology = Topology(instances=(ResourceInstance(id="n1", resource_type="redis", instance_name=""),))
        artifacts = compile_topology(topology, registry, RenderOptions(aspire_version="13.5.0"))
        assert artifacts.apphost.startswith("#:sdk Aspire.AppHost.Sdk@13.5.0")
