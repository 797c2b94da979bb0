# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for the AppHostGen test suite."""

import pytest

from apphostgen.schema.registry import SchemaRegistry, build_default_registry


@pytest.fixture(scope="session")
def registry() -> SchemaRegistry:
    """The default registry, built once per test session."""
    return build_default_registry()
