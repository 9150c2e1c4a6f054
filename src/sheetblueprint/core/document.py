from __future__ import annotations

from collections.abc import Sequence
from copy import copy
from dataclasses import dataclass
import logging

from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import PatternFill, Side
from openpyxl.worksheet.datavalidation import DataValidation
from openpyxl.worksheet.worksheet import Worksheet

from ..layout.style import StyleRecord
from ..layout.types import CellValue
from ..shared.a1 import cell_ref, column_letter, column_offset, split_a1

logger = logging.getLogger(__name__)

LISTS_SHEET_NAME = "Lists"


@dataclass
class SheetState:
    """Per-sheet side-table kept outside openpyxl's worksheet type."""

    column_title_indexes: dict[str, int] | None = None
    row_title_indexes: dict[str, int] | None = None
    allocated_rows: int = 0


class SheetHandle:
    """View over one openpyxl worksheet plus its layout side-table.

    Rows are 1-based, columns are zero-based, matching how the blueprint
    addresses the grid.
    """

    def __init__(self, document: GridDocument, worksheet: Worksheet) -> None:
        self.document = document
        self.worksheet = worksheet

    def __repr__(self) -> str:
        return f"SheetHandle({self.name!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SheetHandle) and other.worksheet is self.worksheet

    def __hash__(self) -> int:
        return id(self.worksheet)

    @property
    def name(self) -> str:
        return self.worksheet.title

    @property
    def state(self) -> SheetState:
        return self.document.state_for(self.worksheet)

    @property
    def column_title_indexes(self) -> dict[str, int] | None:
        return self.state.column_title_indexes

    @column_title_indexes.setter
    def column_title_indexes(self, value: dict[str, int] | None) -> None:
        self.state.column_title_indexes = value

    @property
    def row_title_indexes(self) -> dict[str, int] | None:
        return self.state.row_title_indexes

    @row_title_indexes.setter
    def row_title_indexes(self, value: dict[str, int] | None) -> None:
        self.state.row_title_indexes = value

    # rows / columns -------------------------------------------------------

    def add_row(self, width: int) -> int:
        """Allocate the next row with ``width`` empty cells; return its number."""
        row = self.state.allocated_rows + 1
        for col in range(1, width + 1):
            self.worksheet.cell(row=row, column=col)
        self.state.allocated_rows = row
        return row

    def ensure_rows(self, count: int, width: int) -> None:
        """Allocate rows until at least ``count`` rows exist."""
        while self.state.allocated_rows < count:
            self.add_row(width)

    def row_height(self, row: int) -> float | None:
        return self.worksheet.row_dimensions[row].height

    def set_row_height(self, row: int, height: float) -> None:
        self.worksheet.row_dimensions[row].height = height

    def set_column_widths(self, widths: Sequence[float]) -> None:
        """Apply one width per zero-based column index."""
        for col, width in enumerate(widths):
            self.worksheet.column_dimensions[column_letter(col)].width = width

    def column_width(self, col: int) -> float | None:
        return self.worksheet.column_dimensions[column_letter(col)].width

    # cells ----------------------------------------------------------------

    def value(self, row: int, col: int) -> CellValue | None:
        return self.worksheet.cell(row=row, column=col + 1).value

    def set_value(self, row: int, col: int, value: CellValue | None) -> None:
        self.worksheet.cell(row=row, column=col + 1).value = value

    def value_at(self, ref: str) -> CellValue | None:
        """Return the value at an A1 coordinate."""
        label, row = split_a1(ref)
        return self.value(row, column_offset(label))

    def apply_style(self, row: int, col: int, record: StyleRecord) -> None:
        """Assign a normalized style record to one cell."""
        cell = self.worksheet.cell(row=row, column=col + 1)
        if (
            record.bold is not None
            or record.italic is not None
            or record.underline is not None
            or record.font_name is not None
            or record.font_size is not None
            or record.font_color is not None
        ):
            font = copy(cell.font)
            if record.bold is not None:
                font.bold = record.bold
            if record.italic is not None:
                font.italic = record.italic
            if record.underline:
                font.underline = "single"
            if record.font_name is not None:
                font.name = record.font_name
            if record.font_size is not None:
                font.size = record.font_size
            if record.font_color is not None:
                font.color = record.font_color
            cell.font = font
        if record.bg_color is not None:
            cell.fill = PatternFill(
                fill_type="solid",
                start_color=record.bg_color,
                end_color=record.bg_color,
            )
        if record.horizontal is not None or record.vertical is not None:
            alignment = copy(cell.alignment)
            if record.horizontal is not None:
                alignment.horizontal = record.horizontal
            if record.vertical is not None:
                alignment.vertical = record.vertical
            cell.alignment = alignment
        if record.border_style is not None and record.border_edges:
            side = Side(style=record.border_style, color=record.border_color)
            border = copy(cell.border)
            for edge in record.border_edges:
                setattr(border, edge, side)
            cell.border = border

    def add_comment(self, row: int, col: int, text: str, *, author: str) -> None:
        """Attach a hidden comment; openpyxl always writes comments hidden."""
        self.worksheet.cell(row=row, column=col + 1).comment = Comment(text, author)

    def add_hyperlink(self, row: int, col: int, url: str) -> None:
        self.worksheet.cell(row=row, column=col + 1).hyperlink = url

    def merge(self, row: int, start_col: int, end_col: int) -> None:
        """Merge one row from ``start_col`` to ``end_col`` (zero-based)."""
        self.worksheet.merge_cells(
            f"{cell_ref(row, start_col)}:{cell_ref(row, end_col)}"
        )

    def add_list_validation(self, target_range: str, source: str) -> DataValidation:
        """Attach a dropdown validation over ``target_range`` fed by ``source``."""
        validation = DataValidation(
            type="list",
            formula1=source,
            showDropDown=False,
            showErrorMessage=True,
            errorTitle="",
            errorStyle="stop",
            showInputMessage=True,
        )
        validation.add(target_range)
        self.worksheet.add_data_validation(validation)
        return validation

    def list_validations(self) -> list[DataValidation]:
        return [
            dv for dv in self.worksheet.data_validations.dataValidation if dv.type == "list"
        ]


class ListsSheet:
    """Handle on the workbook's singleton dropdown-source sheet."""

    def __init__(self, document: GridDocument, name: str = LISTS_SHEET_NAME) -> None:
        self.document = document
        self.name = name

    def __repr__(self) -> str:
        return f"ListsSheet({self.name!r})"

    def current(self) -> SheetHandle | None:
        return self.document.get_sheet(self.name)

    def exists(self) -> bool:
        return self.current() is not None

    def column_index(self, title: str) -> int:
        """Return the zero-based column that holds the values for ``title``."""
        sheet = self.current()
        if sheet is None:
            raise LookupError(f"Sheet '{self.name}' does not exist.")
        return self.columns(sheet)[title]

    def columns(self, sheet: SheetHandle) -> dict[str, int]:
        """Return title -> column for the materialized lists.

        Sheets built in this session carry the mapping in their side-table;
        sheets loaded from a file are read back from header row 1.
        """
        if sheet.column_title_indexes is not None:
            return dict(sheet.column_title_indexes)
        columns: dict[str, int] = {}
        col = 0
        while (title := sheet.value(1, col)) is not None:
            columns[str(title)] = col
            col += 1
        return columns

    def read(self) -> dict[str, list[CellValue]]:
        """Read every materialized list, stopping each column at its first gap."""
        sheet = self.current()
        if sheet is None:
            return {}
        lists: dict[str, list[CellValue]] = {}
        for title, col in self.columns(sheet).items():
            values: list[CellValue] = []
            row = 2
            while (value := sheet.value(row, col)) is not None:
                values.append(value)
                row += 1
            lists[title] = values
        return lists

    def recreate(self) -> SheetHandle:
        """Delete the existing sheet (if any) and create an empty one."""
        if self.exists():
            self.document.delete_sheet(self.name)
        logger.debug("Recreating '%s' sheet.", self.name)
        return self.document.create_sheet(self.name)


class GridDocument:
    """openpyxl workbook plus the layout side-tables for its sheets."""

    def __init__(self, workbook: Workbook | None = None) -> None:
        self.workbook = workbook if workbook is not None else Workbook()
        self._states: dict[int, SheetState] = {}
        self.lists = ListsSheet(self)

    def state_for(self, worksheet: Worksheet) -> SheetState:
        return self._states.setdefault(id(worksheet), SheetState())

    @property
    def sheet_names(self) -> list[str]:
        return list(self.workbook.sheetnames)

    def get_sheet(self, name: str) -> SheetHandle | None:
        if name not in self.workbook.sheetnames:
            return None
        return SheetHandle(self, self.workbook[name])

    def sheet(self, name: str) -> SheetHandle:
        """Return the named sheet, creating it when missing."""
        return self.get_sheet(name) or self.create_sheet(name)

    def create_sheet(self, name: str) -> SheetHandle:
        if name in self.workbook.sheetnames:
            raise ValueError(f"Sheet already exists: {name}")
        return SheetHandle(self, self.workbook.create_sheet(title=name))

    def delete_sheet(self, name: str) -> None:
        worksheet = self.workbook[name]
        self._states.pop(id(worksheet), None)
        self.workbook.remove(worksheet)

    def move_to_end(self, name: str) -> bool:
        """Move the named sheet to the last position; False if it is absent."""
        if name not in self.workbook.sheetnames:
            return False
        worksheet = self.workbook[name]
        names = self.workbook.sheetnames
        offset = len(names) - 1 - names.index(name)
        if offset:
            self.workbook.move_sheet(worksheet, offset=offset)
        return True

    def save(self, path: object) -> None:
        self.workbook.save(path)
