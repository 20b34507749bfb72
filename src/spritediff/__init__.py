"""Category level structural comparison of sprite documents."""

from __future__ import annotations

from .compare import CATEGORIES, DiffResult, compare_docs
from .errors import InvalidSnapshotError
from .presets import CompareOptions, get_preset, iter_presets

__all__ = [
    "CATEGORIES",
    "compare_docs",
    "CompareOptions",
    "DiffResult",
    "InvalidSnapshotError",
    "get_preset",
    "iter_presets",
    "core",
    "utils",
]

__version__ = "0.3.0"
