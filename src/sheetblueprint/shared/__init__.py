from __future__ import annotations

from .a1 import (
    absolute_column_range,
    cell_ref,
    column_index_to_label,
    column_label_to_index,
    column_letter,
    column_offset,
    split_a1,
)
from .output_path import apply_conflict_policy, next_available_path, resolve_output_path

__all__ = [
    "absolute_column_range",
    "apply_conflict_policy",
    "cell_ref",
    "column_index_to_label",
    "column_label_to_index",
    "column_letter",
    "column_offset",
    "next_available_path",
    "resolve_output_path",
    "split_a1",
]
