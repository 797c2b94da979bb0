# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resource schema: the compiled-in catalog, its read-only registry and naming rules."""

from apphostgen.schema.catalog import ASPIRE_VERSION, CHAINING_METHODS, RESOURCE_DEFINITIONS
from apphostgen.schema.naming import (
    container_image_name,
    sanitize_service_name,
    suggest_env_key,
    suggest_identifier,
    to_variable_name,
)
from apphostgen.schema.registry import (
    SchemaRegistry,
    build_default_registry,
    is_valid_identifier,
    validate_parameter_value,
)

__all__ = [
    "ASPIRE_VERSION",
    "CHAINING_METHODS",
    "RESOURCE_DEFINITIONS",
    "SchemaRegistry",
    "build_default_registry",
    "container_image_name",
    "is_valid_identifier",
    "sanitize_service_name",
    "suggest_env_key",
    "suggest_identifier",
    "to_variable_name",
    "validate_parameter_value",
]
