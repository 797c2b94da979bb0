# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Adapters between topologies and the canvas node/edge representation."""

from apphostgen.compat.flow import from_flow_graph, to_flow_graph

__all__ = [
    "from_flow_graph",
    "to_flow_graph",
]
