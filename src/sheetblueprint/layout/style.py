from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import (
    ALL_EDGES,
    BorderEdge,
    BorderThickness,
    HorizontalAlignType,
    VerticalAlignType,
)

_HEX_COLOR_PATTERN = re.compile(r"^#?(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")

DEFAULT_BORDER_THICKNESS: BorderThickness = "medium"
BORDER_COLOR = "FF000000"
LARGE_FONT_SIZE = 12.0


def normalize_hex_color(value: str) -> str:
    """Normalize HEX input into AARRGGBB form for workbook internals.

    Args:
        value: ``RRGGBB``, ``AARRGGBB``, ``#RRGGBB`` or ``#AARRGGBB``.

    Returns:
        Uppercase eight-digit ARGB text without ``#``.

    Raises:
        ValueError: If the value is not valid HEX color text.
    """
    text = value.strip().upper()
    if not _HEX_COLOR_PATTERN.match(text):
        raise ValueError(
            f"Invalid color '{value}'. Use 'RRGGBB', 'AARRGGBB', "
            "'#RRGGBB', or '#AARRGGBB'."
        )
    raw = text.lstrip("#")
    return raw if len(raw) == 8 else f"FF{raw}"


class FontSpec(BaseModel):
    """Explicit font override."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str | None = None
    size: float | None = Field(default=None, gt=0)
    color: str | None = None

    @field_validator("color")
    @classmethod
    def _validate_color(cls, value: str | None) -> str | None:
        return normalize_hex_color(value) if value is not None else None


class AlignmentSpec(BaseModel):
    """Explicit horizontal/vertical alignment."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    horizontal: HorizontalAlignType | None = None
    vertical: VerticalAlignType | None = None


class StyleSpec(BaseModel):
    """Declarative text formatting for one grid entry."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    bold: bool = False
    italic: bool = False
    underline: bool = False
    centered: bool = False
    large_font: bool = False
    background: str | None = Field(
        default=None, description="Solid fill color (RRGGBB/AARRGGBB)."
    )
    font_color: str | None = Field(
        default=None, description="Font color; font.color takes precedence."
    )
    font: FontSpec | None = None
    alignment: AlignmentSpec | None = None
    borders: bool | tuple[BorderEdge, ...] | None = Field(
        default=None,
        description="True for every edge, or the subset of edges to draw.",
    )
    border_thickness: BorderThickness | None = None

    @field_validator("background", "font_color")
    @classmethod
    def _validate_color(cls, value: str | None) -> str | None:
        return normalize_hex_color(value) if value is not None else None


class StyleRecord(BaseModel):
    """Normalized style produced by :func:`reduce_style`."""

    model_config = ConfigDict(frozen=True)

    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    font_name: str | None = None
    font_size: float | None = None
    font_color: str | None = None
    bg_color: str | None = None
    horizontal: HorizontalAlignType | None = None
    vertical: VerticalAlignType | None = None
    border_style: BorderThickness | None = None
    border_color: str | None = None
    border_edges: tuple[BorderEdge, ...] | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return only the keys that are set."""
        return self.model_dump(exclude_none=True)

    @property
    def is_empty(self) -> bool:
        return not self.as_dict()


def reduce_style(spec: StyleSpec) -> StyleRecord:
    """Reduce a style descriptor to a normalized record.

    Flags are applied first and explicit values override them: ``large_font``
    sets size 12 unless ``font.size`` is given, ``centered`` sets horizontal
    center unless ``alignment.horizontal`` is given, and ``font.color`` wins
    over ``font_color``. Absent fields produce absent keys.

    Args:
        spec: Style descriptor.

    Returns:
        Frozen style record; equal descriptors yield equal records.
    """
    values: dict[str, Any] = {}
    if spec.bold:
        values["bold"] = True
    if spec.italic:
        values["italic"] = True
    if spec.underline:
        values["underline"] = True
    if spec.centered:
        values["horizontal"] = "center"
    if spec.large_font:
        values["font_size"] = LARGE_FONT_SIZE
    if spec.background is not None:
        values["bg_color"] = spec.background
    if spec.font_color is not None:
        values["font_color"] = spec.font_color
    if spec.font is not None:
        if spec.font.name is not None:
            values["font_name"] = spec.font.name
        if spec.font.size is not None:
            values["font_size"] = spec.font.size
        if spec.font.color is not None:
            values["font_color"] = spec.font.color
    if spec.alignment is not None:
        if spec.alignment.horizontal is not None:
            values["horizontal"] = spec.alignment.horizontal
        if spec.alignment.vertical is not None:
            values["vertical"] = spec.alignment.vertical
    if spec.borders:
        values["border_style"] = spec.border_thickness or DEFAULT_BORDER_THICKNESS
        values["border_color"] = BORDER_COLOR
        values["border_edges"] = ALL_EDGES if spec.borders is True else spec.borders
    return StyleRecord(**values)


def title_style(color: str | None = None) -> StyleRecord:
    """Return the fixed header style: bold, centered, thick black border."""
    return StyleRecord(
        bold=True,
        horizontal="center",
        vertical="center",
        border_style="thick",
        border_color=BORDER_COLOR,
        border_edges=ALL_EDGES,
        bg_color=normalize_hex_color(color) if color is not None else None,
    )
