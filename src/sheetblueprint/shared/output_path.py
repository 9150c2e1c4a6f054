from __future__ import annotations

from pathlib import Path
from typing import Literal

OnConflictPolicy = Literal["overwrite", "skip", "rename"]

_WORKBOOK_SUFFIXES = {".xlsx", ".xlsm"}


def resolve_output_path(
    layout_path: Path,
    *,
    output_path: Path | None,
    input_path: Path | None = None,
) -> Path:
    """Resolve where the built workbook is written.

    An explicit ``output_path`` wins. Otherwise the workbook lands next to the
    layout file as ``<layout stem>.xlsx``; when an input workbook is given the
    default is ``<input stem>_built<suffix>`` beside it.
    """
    if output_path is not None:
        candidate = output_path
        if candidate.suffix.lower() not in _WORKBOOK_SUFFIXES:
            candidate = candidate.with_name(f"{candidate.name}.xlsx")
        return candidate.resolve()
    if input_path is not None:
        return input_path.with_name(
            _build_default_name(input_path.stem, input_path.suffix)
        ).resolve()
    return layout_path.with_name(f"{layout_path.stem}.xlsx").resolve()


def _build_default_name(stem: str, suffix: str) -> str:
    """Build default output name without chaining `_built` repeatedly."""
    if stem.casefold().endswith("_built"):
        return f"{stem}{suffix}"
    return f"{stem}_built{suffix}"


def apply_conflict_policy(
    output_path: Path, on_conflict: OnConflictPolicy
) -> tuple[Path, str | None, bool]:
    """Apply output conflict policy to a resolved output path."""
    if not output_path.exists():
        return output_path, None, False
    if on_conflict == "skip":
        return (
            output_path,
            f"Output exists; skipping write: {output_path.name}",
            True,
        )
    if on_conflict == "rename":
        renamed = next_available_path(output_path)
        return (
            renamed,
            f"Output exists; renamed to: {renamed.name}",
            False,
        )
    return output_path, None, False


def next_available_path(path: Path) -> Path:
    """Return the next available path by appending a numeric suffix."""
    if not path.exists():
        return path
    stem = path.stem
    suffix = path.suffix
    for idx in range(1, 10_000):
        candidate = path.with_name(f"{stem}_{idx}{suffix}")
        if not candidate.exists():
            return candidate
    raise RuntimeError(f"Failed to resolve unique path for {path}")
