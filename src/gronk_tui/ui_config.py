"""UI configuration for table layouts and column metadata."""

from __future__ import annotations

TABLE_WIDTH = 108

# (label, field width); every field is left-justified
JOB_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("Job Id", 7),
    ("Project", 16),
    ("Run Time", 9),
    ("Walltime", 9),
    ("Location", 20),
    ("Queue", 10),
    ("Nodes", 8),
    ("Mode", 12),
]

__all__ = ["JOB_TABLE_COLUMNS", "TABLE_WIDTH"]
