# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Read-only schema registry over the resource catalog.

The registry is built once (see :func:`build_default_registry`) and passed
explicitly to every component that needs resource metadata. Lookups of
unknown type ids return ``None`` or an empty result instead of raising.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from types import MappingProxyType

from apphostgen.model.types import ChainingMethod, MethodParameter, ResourceCategory, ResourceTypeDefinition
from apphostgen.schema.catalog import BUILTIN_PACKAGE, CHAINING_METHODS, CSHARP_KEYWORDS, RESOURCE_DEFINITIONS

# ###############
# Public Interface
# ###############


class SchemaRegistry:
    """Lookup table of resource type definitions keyed by type id."""

    def __init__(
        self,
        definitions: Iterable[ResourceTypeDefinition],
        chaining_methods: dict[str, ChainingMethod],
    ) -> None:
        self._definitions = MappingProxyType({d.id: d for d in definitions})
        self._chaining = MappingProxyType(dict(chaining_methods))
        self._by_builder = MappingProxyType({d.builder_method.name.lower(): d for d in self._definitions.values()})

    def definition(self, type_id: str) -> ResourceTypeDefinition | None:
        """Return the definition for *type_id*, or None when unknown."""
        return self._definitions.get(type_id)

    def definitions(self) -> list[ResourceTypeDefinition]:
        """Return every definition in catalog order."""
        return list(self._definitions.values())

    def display_name(self, type_id: str) -> str:
        """Return the display name for *type_id*, falling back to the id itself."""
        definition = self._definitions.get(type_id)
        return definition.display_name if definition is not None else type_id

    def category(self, type_id: str) -> ResourceCategory | None:
        """Return the category of *type_id*, or None when unknown."""
        definition = self._definitions.get(type_id)
        return definition.category if definition is not None else None

    def chaining_method(self, name: str) -> ChainingMethod | None:
        """Return the chaining method called *name*, or None."""
        return self._chaining.get(name)

    def chaining_operations(self, type_id: str) -> list[ChainingMethod]:
        """Return the chaining methods available on *type_id*, in declared order.

        Names listed on a definition but missing from the chaining table are
        skipped.
        """
        definition = self._definitions.get(type_id)
        if definition is None:
            return []
        return [self._chaining[name] for name in definition.available_chaining_methods if name in self._chaining]

    def supports_chaining(self, type_id: str, method_name: str) -> bool:
        """Return True if *method_name* is available on *type_id*."""
        definition = self._definitions.get(type_id)
        return definition is not None and method_name in definition.available_chaining_methods

    def is_connection_valid(self, source_type_id: str, target_type_id: str) -> bool:
        """Return True if a connection from *source_type_id* to *target_type_id* is allowed.

        A connection is valid when the target's category may reference the
        source, or when the source's category is one the target may connect
        to. Unknown type ids are never valid.
        """
        source = self._definitions.get(source_type_id)
        target = self._definitions.get(target_type_id)
        if source is None or target is None:
            return False
        if target.category in source.can_be_referenced_by:
            return True
        return source.category in target.can_connect_to

    def required_packages(self, type_ids: Iterable[str]) -> list[str]:
        """Return the sorted, unique ``Package@Version`` specs needed by *type_ids*.

        The SDK's builtin hosting package and unknown type ids are omitted.
        """
        packages: set[str] = set()
        for type_id in type_ids:
            definition = self._definitions.get(type_id)
            if definition is not None and definition.package != BUILTIN_PACKAGE:
                packages.add(definition.package_spec)
        return sorted(packages)

    def find_by_builder_method(self, method_name: str) -> ResourceTypeDefinition | None:
        """Return the definition whose builder method is *method_name* (case-insensitive)."""
        return self._by_builder.get(method_name.lower())

    def allows_database(self, type_id: str) -> bool:
        """Return True if *type_id* exposes an ``AddDatabase`` child resource."""
        definition = self._definitions.get(type_id)
        return definition is not None and definition.child_method("AddDatabase") is not None


def build_default_registry() -> SchemaRegistry:
    """Build a registry over the compiled-in Aspire catalog."""
    return SchemaRegistry(RESOURCE_DEFINITIONS, CHAINING_METHODS)


def is_valid_identifier(name: str) -> bool:
    """Return True if *name* is a valid, non-reserved C# identifier."""
    if not _IDENTIFIER_RE.match(name):
        return False
    return name not in CSHARP_KEYWORDS


def validate_parameter_value(value: object, parameter: MethodParameter) -> tuple[bool, list[str]]:
    """Validate *value* against the constraints of *parameter*.

    Checks run in a fixed order: the required check (which short-circuits),
    then length, pattern and identifier checks for strings, range checks for
    numbers, and finally allowed-value membership for any value.

    Args:
        value: The candidate value. ``None`` means "not supplied".
        parameter: The parameter definition to check against.

    Returns:
        A ``(ok, errors)`` tuple. ``errors`` lists one human-readable message
        per violated constraint.
    """
    if parameter.is_required and (value is None or value == ""):
        return False, [f"{parameter.name} is required"]
    if value is None:
        return True, []

    errors: list[str] = []
    constraints = parameter.constraints
    if constraints is not None:
        if isinstance(value, str):
            if constraints.min_length is not None and len(value) < constraints.min_length:
                errors.append(f"{parameter.name} must be at least {constraints.min_length} characters")
            if constraints.max_length is not None and len(value) > constraints.max_length:
                errors.append(f"{parameter.name} must be at most {constraints.max_length} characters")
            if constraints.pattern is not None and not re.search(constraints.pattern, value):
                errors.append(f"{parameter.name} has an invalid format")
            if constraints.must_be_identifier and not is_valid_identifier(value):
                errors.append(f"{parameter.name} must be a valid C# identifier")

        if isinstance(value, int | float) and not isinstance(value, bool):
            if constraints.min_value is not None and value < constraints.min_value:
                errors.append(f"{parameter.name} must be at least {constraints.min_value}")
            if constraints.max_value is not None and value > constraints.max_value:
                errors.append(f"{parameter.name} must be at most {constraints.max_value}")

        if constraints.allowed_values is not None and value not in constraints.allowed_values:
            allowed = ", ".join(str(v) for v in constraints.allowed_values)
            errors.append(f"{parameter.name} must be one of: {allowed}")

    return not errors, errors


# ################
# Implementation
# ################

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
