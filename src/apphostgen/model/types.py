# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema value types describing Aspire hosting resources and their APIs."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############


class ResourceCategory(Enum):
    """Display categories used for grouping and connection compatibility."""

    DATABASE = "database"
    CACHE = "cache"
    MESSAGING = "messaging"
    AI = "ai"
    COMPUTE = "compute"
    PROJECT = "project"
    CONTAINER = "container"
    STORAGE = "storage"


class CSharpType(BaseModel):
    """A C# type as it appears in an Aspire method signature."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    full_name: str


class ParameterConstraints(BaseModel):
    """Constraints applied to a single method parameter value."""

    model_config = ConfigDict(frozen=True)

    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    min_value: int | None = None
    max_value: int | None = None
    allowed_values: tuple[str | int, ...] | None = None
    must_be_identifier: bool = False
    must_be_valid_path: bool = False


class MethodParameter(BaseModel):
    """A parameter in a builder or chaining method signature."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: CSharpType
    is_required: bool
    default_value: str | int | bool | None = None
    description: str | None = None
    constraints: ParameterConstraints | None = None


class ApiMethod(BaseModel):
    """A builder or child-resource method exposed by a hosting package."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    parameters: tuple[MethodParameter, ...] = ()
    return_type: CSharpType
    extension_type: str = "IDistributedApplicationBuilder"
    generic_constraints: tuple[str, ...] = ()

    def parameter(self, name: str) -> MethodParameter | None:
        """Return the parameter called *name*, or None."""
        for param in self.parameters:
            if param.name == name:
                return param
        return None


class ChainingMethod(ApiMethod):
    """A fluent configuration call that can follow a builder declaration."""

    available_for: tuple[ResourceCategory, ...] = ()
    can_be_called_multiple_times: bool = True


class ResourceTypeDefinition(BaseModel):
    """The complete, immutable API definition of one resource type."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    category: ResourceCategory
    package: str
    package_version: str
    builder_method: ApiMethod
    child_resource_methods: tuple[ApiMethod, ...] = ()
    available_chaining_methods: tuple[str, ...] = ()
    builder_return_type: CSharpType
    connection_string_format: str | None = None
    can_connect_to: tuple[ResourceCategory, ...] = ()
    can_be_referenced_by: tuple[ResourceCategory, ...] = ()

    @property
    def package_spec(self) -> str:
        """Return the ``Package@Version`` directive form of the hosting package."""
        return f"{self.package}@{self.package_version}"

    def child_method(self, name: str) -> ApiMethod | None:
        """Return the child-resource method called *name*, or None."""
        for method in self.child_resource_methods:
            if method.name == name:
                return method
        return None
