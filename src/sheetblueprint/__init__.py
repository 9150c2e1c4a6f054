"""Declarative worksheet layout on top of openpyxl."""

from __future__ import annotations

from .core.document import LISTS_SHEET_NAME, GridDocument, ListsSheet, SheetHandle
from .core.workbook import grid_document
from .errors import (
    BlueprintError,
    MissingSheetError,
    PipelineOrderError,
    TitleReferenceError,
)
from .layout.blueprint import Blueprint, Extent
from .layout.models import BlueprintOptions, Cell, Element, Position, Title
from .layout.style import StyleRecord, StyleSpec, reduce_style
from .runner import BuildRequest, BuildResult, LayoutDocument, run_build

__all__ = [
    "LISTS_SHEET_NAME",
    "Blueprint",
    "BlueprintError",
    "BlueprintOptions",
    "BuildRequest",
    "BuildResult",
    "Cell",
    "Element",
    "Extent",
    "GridDocument",
    "LayoutDocument",
    "ListsSheet",
    "MissingSheetError",
    "PipelineOrderError",
    "Position",
    "SheetHandle",
    "StyleRecord",
    "StyleSpec",
    "Title",
    "TitleReferenceError",
    "grid_document",
    "reduce_style",
    "run_build",
]
