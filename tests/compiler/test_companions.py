# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the settings, Dockerfile, manifest and command generators."""

import json

from apphostgen.compiler.companions import (
    CONTAINER_DOCKERFILE,
    DEPLOYMENT_COMMANDS,
    DOTNET_DOCKERFILE,
    build_file_text,
    deployment_commands,
    manifest_text,
    settings_text,
)
from apphostgen.model.entities import ResourceConfig, ResourceInstance
from apphostgen.schema.registry import SchemaRegistry

# ###############
# Helpers
# ###############


def _inst(name: str, resource_type: str, **kwargs: object) -> ResourceInstance:
    return ResourceInstance(
        id=f"id_{name}", resource_type=resource_type, instance_name=name, **kwargs  # type: ignore[arg-type]
    )


# ###############
# Settings
# ###############


def test_settings_map_databases_caches_and_brokers(registry: SchemaRegistry) -> None:
    instances = [
        _inst("pg", "postgres", database_name="appdb"),
        _inst("mongo", "mongodb"),
        _inst("cache", "redis"),
        _inst("bus", "rabbitmq"),
        _inst("api", "dotnet-project"),
        _inst("llm", "openai"),
    ]
    settings = json.loads(settings_text(instances, registry))
    assert settings["ConnectionStrings"] == {
        "appdb": "{appdb.connectionString}",
        "mongo": "{mongo.connectionString}",
        "cache": "{cache.connectionString}",
        "bus": "{bus.connectionString}",
    }
    assert settings["AllowedHosts"] == "*"
    assert settings["Logging"]["LogLevel"]["Default"] == "Information"


def test_settings_for_no_backing_services(registry: SchemaRegistry) -> None:
    settings = json.loads(settings_text([_inst("api", "dotnet-project")], registry))
    assert settings["ConnectionStrings"] == {}


def test_settings_text_is_indented_json(registry: SchemaRegistry) -> None:
    assert settings_text([], registry).startswith('{\n  "Logging"')


# ###############
# Build file
# ###############


def test_build_file_for_custom_containers() -> None:
    assert build_file_text([_inst("web", "container")]) == CONTAINER_DOCKERFILE


def test_build_file_defaults_to_dotnet_skeleton() -> None:
    assert build_file_text([_inst("api", "dotnet-project")]) == DOTNET_DOCKERFILE
    assert build_file_text([]) == DOTNET_DOCKERFILE


# ###############
# Manifest
# ###############


def test_manifest_has_one_app_per_workload(registry: SchemaRegistry) -> None:
    instances = [
        _inst("pg", "postgres"),
        _inst("api", "dotnet-project", config=ResourceConfig(replicas=4)),
        _inst("web", "container"),
    ]
    apps = json.loads(manifest_text(instances, registry))["containerApps"]
    assert [app["name"] for app in apps] == ["api", "web"]

    api = apps[0]["properties"]
    container = api["template"]["containers"][0]
    assert container["image"] == "myregistry.azurecr.io/api:latest"
    assert container["resources"] == {"cpu": 0.5, "memory": "1Gi"}
    assert api["template"]["scale"] == {"minReplicas": 1, "maxReplicas": 4}
    assert api["configuration"]["ingress"]["targetPort"] == 8080


def test_manifest_default_scale_ceiling_and_env(registry: SchemaRegistry) -> None:
    web = _inst("web", "container").with_env_var("MODE", "prod").with_env_var("BLANK", "")
    app = json.loads(manifest_text([web], registry))["containerApps"][0]["properties"]
    assert app["template"]["scale"]["maxReplicas"] == 10
    assert app["template"]["containers"][0]["env"] == [{"name": "MODE", "value": "prod"}]


# ###############
# Commands
# ###############


def test_deployment_commands_are_static() -> None:
    commands = deployment_commands()
    assert commands == list(DEPLOYMENT_COMMANDS)
    assert commands[0] == "aspire run"
    commands.append("mutated")
    assert "mutated" not in deployment_commands()
