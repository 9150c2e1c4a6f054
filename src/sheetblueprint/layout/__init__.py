from __future__ import annotations

from .models import BlueprintOptions, Cell, Element, Position, Title
from .style import AlignmentSpec, FontSpec, StyleRecord, StyleSpec, reduce_style, title_style
from .types import Axis, BorderEdge, BorderThickness, CellValue

__all__ = [
    "AlignmentSpec",
    "Axis",
    "BlueprintOptions",
    "BorderEdge",
    "BorderThickness",
    "Cell",
    "CellValue",
    "Element",
    "FontSpec",
    "Position",
    "StyleRecord",
    "StyleSpec",
    "Title",
    "reduce_style",
    "title_style",
]
