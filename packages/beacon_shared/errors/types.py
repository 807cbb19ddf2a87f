"""Canonical error categories for Beacon components.

Categories are transport-agnostic; a façade maps them to HTTP statuses or
other wire-level error shapes.
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories shared across component boundaries."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DEPENDENCY = "dependency"
    INTERNAL = "internal"
