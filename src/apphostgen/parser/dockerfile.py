# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reverse parser for a single Dockerfile.

A Dockerfile always yields exactly one generic ``container`` instance. Its
name comes from the file name, its ports from ``EXPOSE`` and its environment
from ``ENV``. The base image of the first ``FROM`` is reported as a warning
so the user can decide whether a richer resource type fits better.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from apphostgen.parser.base import IdAllocator, ImportResult, InstanceDraft, TopologyParser, build_topology

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_FILE_NAME = "Dockerfile"


class DockerfileParser(TopologyParser):
    """Reconstructs a one-instance topology from Dockerfile text.

    Args:
        file_name: Name of the source file; used to derive the instance name.
        reserved_ids: Instance ids already in use by the caller.
    """

    format_name = "dockerfile"

    def __init__(self, file_name: str = DEFAULT_FILE_NAME, reserved_ids: Iterable[str] = ()) -> None:
        self._file_name = file_name
        self._reserved_ids = tuple(reserved_ids)

    def parse(self, text: str) -> ImportResult:
        warnings: list[str] = []
        base_image: str | None = None
        ports: list[str] = []
        env_vars: list[tuple[str, str]] = []

        for line in _logical_lines(text):
            instruction, rest = _split_first_word(line)
            instruction = instruction.upper()
            if instruction == "FROM" and base_image is None:
                base_image = _base_image(rest)
            elif instruction == "EXPOSE":
                for port in rest.split():
                    port = port.split("/", 1)[0]
                    if port.isdigit() and port not in ports:
                        ports.append(port)
            elif instruction == "ENV":
                env_vars.extend(_env_pairs(rest))

        if base_image is None:
            warnings.append("No FROM instruction found in the Dockerfile.")
        else:
            warnings.append(f"Base image: {base_image}")
        if ports:
            warnings.append(f"Exposed ports: {', '.join(ports)}")

        draft = InstanceDraft(
            id=IdAllocator(self._reserved_ids).allocate(),
            resource_type="container",
            instance_name=instance_name_for(self._file_name, base_image),
            env_vars=env_vars,
            ports=[(port, port) for port in ports],
        )
        logger.debug("Dockerfile import: base image %s, %d port(s)", base_image, len(ports))
        return ImportResult(topology=build_topology([draft], []), warnings=warnings)


def parse_dockerfile(
    text: str, file_name: str = DEFAULT_FILE_NAME, reserved_ids: Iterable[str] = ()
) -> ImportResult:
    """Parse Dockerfile text. See :class:`DockerfileParser`."""
    return DockerfileParser(file_name, reserved_ids).parse(text)


def instance_name_for(file_name: str, base_image: str | None = None) -> str:
    """Derive an instance name from a Dockerfile's file name.

    ``api.Dockerfile`` and ``Dockerfile.api`` both map to ``api``. A plain
    ``Dockerfile`` takes the repository name of *base_image* instead
    (``nginx:latest`` gives ``nginx``), or ``container`` without one.
    """
    base = re.split(r"[\\/]", file_name)[-1]
    stem = re.sub(r"(?i)^dockerfile\.?|\.?dockerfile$", "", base)
    if not stem and base_image:
        stem = base_image.split("/")[-1].split("@")[0].split(":")[0]
    name = re.sub(r"[^a-z0-9_]", "_", stem.lower()).strip("_")
    return name or "container"


# ################
# Implementation
# ################

_ENV_PAIR_RE = re.compile(r"""(\w+)=("[^"]*"|'[^']*'|\S*)""")


def _logical_lines(text: str) -> list[str]:
    """Join backslash continuations and drop comments and blank lines."""
    lines: list[str] = []
    pending = ""
    for raw in text.splitlines():
        stripped = raw.strip()
        if not pending and (not stripped or stripped.startswith("#")):
            continue
        if stripped.endswith("\\"):
            pending += stripped[:-1] + " "
            continue
        lines.append(pending + stripped)
        pending = ""
    if pending.strip():
        lines.append(pending.strip())
    return lines


def _split_first_word(line: str) -> tuple[str, str]:
    """Split *line* at the first run of whitespace, spaces or tabs alike."""
    parts = line.split(None, 1)
    if not parts:
        return "", ""
    return parts[0], parts[1].strip() if len(parts) > 1 else ""


def _base_image(rest: str) -> str | None:
    for token in rest.split():
        if not token.startswith("--"):
            return token
    return None


def _env_pairs(rest: str) -> list[tuple[str, str]]:
    key, value = _split_first_word(rest)
    if "=" in key:
        return [(k, v.strip("\"'")) for k, v in _ENV_PAIR_RE.findall(rest)]
    if not key:
        return []
    return [(key, value.strip("\"'"))]
