# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Diagnostics for resource topologies (naming, connections, cycles, etc.)."""

from apphostgen.validation.checks import (
    IssueCategory,
    Severity,
    ValidationIssue,
    ValidationResult,
    is_ready_for_code_generation,
    validate,
)

__all__ = [
    "IssueCategory",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "is_ready_for_code_generation",
    "validate",
]
