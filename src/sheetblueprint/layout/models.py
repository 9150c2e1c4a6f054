from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .style import StyleRecord, StyleSpec, normalize_hex_color, reduce_style, title_style
from .types import CellValue

DEFAULT_ANCHOR: tuple[int, int] = (1, 1)
DEFAULT_VALIDATION_ROWS = 100


class Position(BaseModel):
    """Row/column coordinate.

    ``column`` is the 1-based value as supplied; :attr:`col` is the zero-based
    index used for letter encoding.
    """

    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=0)
    column: int = Field(ge=1)

    @property
    def col(self) -> int:
        return self.column - 1


class Element(BaseModel):
    """Text placed at an absolute position."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str
    row: int = Field(ge=1, description="1-based sheet row.")
    col: int = Field(ge=1, description="1-based sheet column.")
    style: StyleSpec = Field(default_factory=StyleSpec)
    merge: int | None = Field(
        default=None, ge=1, description="Number of extra columns merged to the right."
    )
    comment: str | None = None

    @property
    def position(self) -> Position:
        return Position(row=self.row, column=self.col)

    def combined_style(self) -> StyleRecord:
        return reduce_style(self.style)


class Title(BaseModel):
    """Header cell on the column-title or row-title axis."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str
    comment: str | None = None
    color: str | None = Field(default=None, description="Background color.")
    list: tuple[CellValue, ...] | None = Field(
        default=None, description="Dropdown choices offered under this title."
    )
    hyperlink: str | None = None

    @field_validator("color")
    @classmethod
    def _validate_color(cls, value: str | None) -> str | None:
        return normalize_hex_color(value) if value is not None else None

    def combined_style(self) -> StyleRecord:
        return title_style(self.color)


class Cell(BaseModel):
    """Tabular datum placed under a column title or beside a row title.

    ``row`` is an explicit offset from the first data slot: rows below the
    header for column data, columns right of the row-title column for row
    data. Without it the first empty slot is used.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: CellValue
    title: str
    row: int | None = Field(default=None, ge=0)

    @property
    def display_length(self) -> int:
        return len(str(self.text))


class BlueprintOptions(BaseModel):
    """Declarative bundle a :class:`Blueprint` is built from."""

    model_config = ConfigDict(extra="forbid")

    elements: list[Element] = Field(default_factory=list)
    column_titles: list[Title] = Field(default_factory=list)
    row_titles: list[Title] = Field(default_factory=list)
    column_titles_start: tuple[int, int] = Field(
        default=DEFAULT_ANCHOR, description="(row, column) of the first column title."
    )
    row_titles_start: tuple[int, int] = Field(
        default=DEFAULT_ANCHOR, description="(row, column) of the first row title."
    )
    column_title_row_height: float | None = Field(default=None, gt=0)
    validation_rows: int = Field(
        default=DEFAULT_VALIDATION_ROWS,
        ge=0,
        description="Rows (or columns) of dropdown validation per list title.",
    )

    @field_validator("column_titles_start", "row_titles_start")
    @classmethod
    def _validate_anchor(cls, value: tuple[int, int]) -> tuple[int, int]:
        row, col = value
        if row < 1 or col < 1:
            raise ValueError(f"Anchor must be 1-based (row, column): {value}")
        return value
