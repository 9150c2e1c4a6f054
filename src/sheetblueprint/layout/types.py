from __future__ import annotations

from typing import Literal, TypeAlias

CellValue: TypeAlias = str | int | float
Axis = Literal["column", "row"]
BorderEdge = Literal["top", "right", "bottom", "left"]
BorderThickness = Literal[
    "hair",
    "thin",
    "medium",
    "thick",
    "double",
    "dashed",
    "dotted",
    "mediumDashed",
]

HorizontalAlignType = Literal[
    "general",
    "left",
    "center",
    "right",
    "fill",
    "justify",
    "centerContinuous",
    "distributed",
]
VerticalAlignType = Literal["top", "center", "bottom", "justify", "distributed"]

ALL_EDGES: tuple[BorderEdge, ...] = ("top", "right", "bottom", "left")
