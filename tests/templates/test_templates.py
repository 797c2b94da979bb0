# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the built-in starter templates."""

import pytest

from apphostgen.compiler.build import compile_topology
from apphostgen.schema.registry import SchemaRegistry
from apphostgen.templates import (
    TEMPLATE_CATEGORIES,
    TEMPLATE_IDS,
    UnknownTemplateError,
    list_templates,
    load_template,
)
from apphostgen.validation.checks import validate


def test_list_templates_in_catalog_order() -> None:
    assert [t.id for t in list_templates()] == list(TEMPLATE_IDS)


@pytest.mark.parametrize("template_id", TEMPLATE_IDS)
def test_template_metadata(template_id: str) -> None:
    template = load_template(template_id)
    assert template.name
    assert template.description
    assert template.category in TEMPLATE_CATEGORIES
    assert template.tags
    assert template.topology.instances


@pytest.mark.parametrize("template_id", TEMPLATE_IDS)
def test_template_compiles_without_errors(template_id: str, registry: SchemaRegistry) -> None:
    topology = load_template(template_id).topology
    assert validate(topology, registry).errors == []
    assert not compile_topology(topology, registry).is_blocked


def test_web_api_postgres_contents() -> None:
    topology = load_template("web-api-postgres").topology
    assert [(i.resource_type, i.instance_name) for i in topology.instances] == [
        ("postgres", "postgres"),
        ("dotnet-project", "webapi"),
    ]
    assert topology.instances[0].database_name == "appdb"
    assert [(c.source_id, c.target_id) for c in topology.connections] == [("node_0", "node_1")]


def test_unknown_template() -> None:
    with pytest.raises(UnknownTemplateError, match="Unknown template 'blog'. Available templates: web-api-postgres"):
        load_template("blog")
