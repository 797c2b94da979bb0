# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Built-in starter topologies.

Each template is a YAML file under ``data/`` holding its metadata and a
version 1 topology document under the ``topology`` key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import resources

import yaml

from apphostgen.model.entities import Topology
from apphostgen.workspace.document import topology_from_data

# ###############
# Public Interface
# ###############

TEMPLATE_IDS: tuple[str, ...] = (
    "web-api-postgres",
    "microservices-basic",
    "fullstack-app",
    "ai-chatbot",
    "event-driven",
    "multi-database",
)

TEMPLATE_CATEGORIES: dict[str, str] = {
    "starter": "Starter",
    "microservices": "Microservices",
    "fullstack": "Full Stack",
    "data": "Data",
    "ai": "AI",
}


class UnknownTemplateError(Exception):
    """Raised when a template id does not name a built-in template."""


@dataclass(frozen=True)
class Template:
    """A named starter topology.

    Attributes:
        id: Stable template identifier, e.g. ``web-api-postgres``.
        name: Human-readable title.
        description: One-line summary.
        category: One of the keys of :data:`TEMPLATE_CATEGORIES`.
        tags: Free-form search tags.
        topology: The starter topology.
    """

    id: str
    name: str
    description: str
    category: str
    topology: Topology
    tags: tuple[str, ...] = field(default_factory=tuple)


def list_templates() -> list[Template]:
    """Return every built-in template in catalog order."""
    return [load_template(template_id) for template_id in TEMPLATE_IDS]


def load_template(template_id: str) -> Template:
    """Load one built-in template.

    Raises:
        UnknownTemplateError: If *template_id* is not a built-in template.
    """
    if template_id not in TEMPLATE_IDS:
        known = ", ".join(TEMPLATE_IDS)
        raise UnknownTemplateError(f"Unknown template '{template_id}'. Available templates: {known}")

    resource = resources.files(__name__).joinpath("data").joinpath(f"{template_id}.yaml")
    data = yaml.safe_load(resource.read_text(encoding="utf-8"))
    return Template(
        id=template_id,
        name=data["name"],
        description=data["description"],
        category=data["category"],
        tags=tuple(data.get("tags", ())),
        topology=topology_from_data(data["topology"], source_label=f"template '{template_id}'"),
    )


__all__ = [
    "TEMPLATE_CATEGORIES",
    "TEMPLATE_IDS",
    "Template",
    "UnknownTemplateError",
    "list_templates",
    "load_template",
]
