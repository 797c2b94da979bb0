# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Companion artifacts generated next to the AppHost.

These are starting-point skeletons: a settings file with connection-string
placeholders, a container build file, an Azure Container Apps manifest and
the list of Aspire CLI commands for running and deploying the application.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from apphostgen.model.entities import ResourceInstance
from apphostgen.model.types import ResourceCategory
from apphostgen.schema.registry import SchemaRegistry

# ###############
# Public Interface
# ###############

DEPLOYMENT_COMMANDS: tuple[str, ...] = (
    "aspire run",
    "aspire deploy",
    "aspire deploy --environment staging",
    "aspire do diagnostics",
    "aspire do build",
)

CONTAINER_DOCKERFILE = """\
# Dockerfile for custom container
FROM alpine:latest
WORKDIR /app
COPY . .
EXPOSE 8080
CMD ["./start.sh"]"""

DOTNET_DOCKERFILE = """\
# Example Dockerfile for Aspire API projects
FROM mcr.microsoft.com/dotnet/aspnet:9.0 AS base
WORKDIR /app
EXPOSE 8080

FROM mcr.microsoft.com/dotnet/sdk:9.0 AS build
WORKDIR /src
COPY ["YourProject.csproj", "./"]
RUN dotnet restore "YourProject.csproj"
COPY . .
RUN dotnet build "YourProject.csproj" -c Release -o /app/build

FROM build AS publish
RUN dotnet publish "YourProject.csproj" -c Release -o /app/publish

FROM base AS final
WORKDIR /app
COPY --from=publish /app/publish .
ENTRYPOINT ["dotnet", "YourProject.dll"]"""


def deployment_commands() -> list[str]:
    """Return the Aspire CLI commands offered for the generated application."""
    return list(DEPLOYMENT_COMMANDS)


def settings_text(instances: Sequence[ResourceInstance], registry: SchemaRegistry) -> str:
    """Return an ``appsettings.json`` document with connection-string placeholders.

    Database servers are keyed by their logical database name when one is
    set; caches and message brokers by their instance name.
    """
    connection_strings: dict[str, str] = {}
    for inst in instances:
        if not inst.instance_name:
            continue
        category = registry.category(inst.resource_type)
        if category is ResourceCategory.DATABASE:
            key = inst.database_name or inst.instance_name
        elif category in (ResourceCategory.CACHE, ResourceCategory.MESSAGING):
            key = inst.instance_name
        else:
            continue
        connection_strings[key] = f"{{{key}.connectionString}}"

    settings = {
        "Logging": {"LogLevel": {"Default": "Information", "Microsoft.AspNetCore": "Warning"}},
        "AllowedHosts": "*",
        "ConnectionStrings": connection_strings,
    }
    return json.dumps(settings, indent=2, ensure_ascii=False)


def build_file_text(instances: Sequence[ResourceInstance]) -> str:
    """Return the Dockerfile skeleton matching the kind of workloads present."""
    if any(inst.resource_type == "container" for inst in instances):
        return CONTAINER_DOCKERFILE
    return DOTNET_DOCKERFILE


def manifest_text(instances: Sequence[ResourceInstance], registry: SchemaRegistry) -> str:
    """Return an Azure Container Apps manifest with one app per project or container."""
    apps = [
        _container_app(inst)
        for inst in instances
        if inst.instance_name
        and registry.category(inst.resource_type) in (ResourceCategory.PROJECT, ResourceCategory.CONTAINER)
    ]
    return json.dumps({"containerApps": apps}, indent=2, ensure_ascii=False)


# ################
# Implementation
# ################


def _container_app(inst: ResourceInstance) -> dict[str, Any]:
    name = inst.instance_name
    env = [{"name": e.key, "value": e.value} for e in inst.config.env_vars if e.key and e.value]
    return {
        "name": name,
        "properties": {
            "configuration": {
                "activeRevisionsMode": "Single",
                "ingress": {"external": True, "targetPort": 8080, "transport": "http"},
                "registries": [],
            },
            "template": {
                "containers": [
                    {
                        "name": name,
                        "image": f"myregistry.azurecr.io/{name}:latest",
                        "resources": {"cpu": 0.5, "memory": "1Gi"},
                        "env": env,
                    }
                ],
                "scale": {"minReplicas": 1, "maxReplicas": inst.config.replicas or 10},
            },
        },
    }
