# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Topology model and schema value types."""

from apphostgen.model.entities import (
    Connection,
    ConnectionKind,
    EnvVar,
    PortMapping,
    ResourceConfig,
    ResourceInstance,
    Topology,
    VolumeMount,
)
from apphostgen.model.types import (
    ApiMethod,
    ChainingMethod,
    CSharpType,
    MethodParameter,
    ParameterConstraints,
    ResourceCategory,
    ResourceTypeDefinition,
)

__all__ = [
    # Schema types
    "ResourceCategory",
    "CSharpType",
    "ParameterConstraints",
    "MethodParameter",
    "ApiMethod",
    "ChainingMethod",
    "ResourceTypeDefinition",
    # Topology
    "ConnectionKind",
    "EnvVar",
    "PortMapping",
    "VolumeMount",
    "ResourceConfig",
    "ResourceInstance",
    "Connection",
    "Topology",
]
