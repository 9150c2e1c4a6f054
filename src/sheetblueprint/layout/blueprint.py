"""Blueprint: a declarative sheet layout and the pipeline that applies it.

The pipeline is strictly ordered. Column titles are indexed before the extent
is computed, sizing runs before placement, list titles are materialized right
after their axis is placed, and data cells are placed last because they are
resolved through the title indexes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from ..errors import MissingSheetError, PipelineOrderError, TitleReferenceError
from ..shared.a1 import cell_ref
from ..utils import line_count, longest_line_length, warn_once
from .lists import ListSheetManager, titles_with_lists
from .models import BlueprintOptions, Cell, Title
from .types import Axis

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..core.document import ListsSheet, SheetHandle

logger = logging.getLogger(__name__)

WIDTH_PADDING = 4
LINE_HEIGHT = 10
ROW_HEIGHT_PADDING = 10
DEFAULT_ROW_HEIGHT = 20


class Extent(BaseModel):
    """Bounding box of the layout; ``col`` is zero-based."""

    row: int = 0
    col: int = 0


class Blueprint:
    """Declarative layout for one sheet.

    A blueprint holds elements placed at absolute positions, a column-title
    axis, a row-title axis and their anchors. :meth:`build` binds it to a
    target sheet and runs the placement pipeline; the individual steps are
    public so they can be driven one at a time, and each one raises
    :class:`PipelineOrderError` when its prerequisites have not run.
    """

    def __init__(self, options: BlueprintOptions | None = None, **kwargs: Any) -> None:
        if options is None:
            options = BlueprintOptions(**kwargs)
        elif kwargs:
            raise TypeError("Pass either an options bundle or keyword options, not both.")
        self.options = options
        self.elements = list(options.elements)
        self.column_titles = list(options.column_titles)
        self.row_titles = list(options.row_titles)
        self.column_titles_start = options.column_titles_start
        self.row_titles_start = options.row_titles_start
        self.column_title_row_height = options.column_title_row_height
        self.validation_rows = options.validation_rows

        self.sheet: SheetHandle | None = None
        self.lists: ListsSheet | None = None
        self.column_data: list[Cell] = []
        self.row_data: list[Cell] = []
        self.max: Extent | None = None
        self.column_widths: list[int] = []
        self._content_widths: dict[int, int] = {}
        self._warned: set[str] = set()
        self.list_sources: dict[str, str] = {}
        self._done: set[str] = set()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def build(
        self,
        sheet: SheetHandle | None,
        *,
        column_data: Iterable[Cell | Mapping[str, Any]] = (),
        row_data: Iterable[Cell | Mapping[str, Any]] = (),
        lists: ListsSheet | None = None,
    ) -> SheetHandle:
        """Apply the blueprint to ``sheet``.

        Args:
            sheet: Target sheet.
            column_data: Cells placed under column titles.
            row_data: Cells placed beside row titles.
            lists: Lists sheet handle; defaults to the one owned by the
                sheet's document.

        Returns:
            The target sheet.

        Raises:
            MissingSheetError: If ``sheet`` is None.
            TitleReferenceError: If a data cell names an unknown title.
        """
        self.bind(sheet, column_data=column_data, row_data=row_data, lists=lists)
        logger.debug(
            "Building sheet '%s': %d element(s), %d column title(s), %d row title(s).",
            self._sheet().name,
            len(self.elements),
            len(self.column_titles),
            len(self.row_titles),
        )
        self.index_column_titles()
        self.compute_extent()
        self.index_row_titles()
        self.set_column_widths()
        self.set_row_heights()
        self.place_elements()
        self.place_column_titles()
        self.set_lists_for_column_titles()
        self.place_row_titles()
        self.set_lists_for_row_titles()
        self.set_column_title_row_height()
        self.place_column_data()
        self.place_row_data()
        self.move_lists_sheet_to_end()
        return self._sheet()

    def bind(
        self,
        sheet: SheetHandle | None,
        *,
        column_data: Iterable[Cell | Mapping[str, Any]] = (),
        row_data: Iterable[Cell | Mapping[str, Any]] = (),
        lists: ListsSheet | None = None,
    ) -> None:
        """Attach the target sheet and data, resetting pipeline progress."""
        if sheet is None:
            raise MissingSheetError("Blueprint.build requires a target sheet.")
        self.sheet = sheet
        self.lists = lists if lists is not None else sheet.document.lists
        self.column_data = [_coerce_cell(item) for item in column_data]
        self.row_data = [_coerce_cell(item) for item in row_data]
        self.max = None
        self.column_widths = []
        self._content_widths = {}
        self._warned = set()
        self.list_sources = {}
        self._done = {"bind"}

    # ------------------------------------------------------------------
    # Indexing and extent
    # ------------------------------------------------------------------

    def index_column_titles(self) -> dict[str, int]:
        """Map each column title to its zero-based column."""
        self._require("index_column_titles", "bind")
        indexes = _index_titles(
            self.column_titles, self.column_titles_start[1], "column", self._warned
        )
        self._sheet().column_title_indexes = indexes
        return self._complete("index_column_titles", indexes)

    def index_row_titles(self) -> dict[str, int]:
        """Map each row title to its zero-based row."""
        self._require("index_row_titles", "bind")
        indexes = _index_titles(
            self.row_titles, self.row_titles_start[0], "row", self._warned
        )
        self._sheet().row_title_indexes = indexes
        return self._complete("index_row_titles", indexes)

    def compute_extent(self) -> Extent:
        """Compute ``max`` and allocate ``max.row + 2`` rows on the sheet."""
        self._require("compute_extent", "bind")
        max_row = max((element.row for element in self.elements), default=0)
        max_col = max((element.position.col for element in self.elements), default=0)
        max_col = max(max_col, len(self.column_titles))
        max_row = max(max_row, len(self.row_titles))
        max_row += self.column_titles_start[0] + self.row_titles_start[0]
        max_col += self.column_titles_start[1] + self.row_titles_start[1]
        max_row += len(self.column_data)
        max_col += len(self.row_data)
        max_col += len(titles_with_lists(self.column_titles))
        max_col += len(titles_with_lists(self.row_titles))
        self.max = Extent(row=max_row, col=max_col)
        self._sheet().ensure_rows(max_row + 2, max_col)
        return self._complete("compute_extent", self.max)

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------

    def set_column_widths(self) -> list[int]:
        """Size each column to ``4 + longest content``; empty columns get 0.

        Row data lands by scanning the sheet, so its columns are widened by
        :meth:`place_row_data` once the target cells are known.
        """
        self._require("set_column_widths", "index_column_titles", "compute_extent")
        widths: dict[int, int] = {}
        for element in self.elements:
            if element.merge:
                start = element.position.col
                for col in range(start + 1, start + element.merge + 1):
                    widths.setdefault(col, 0)
        for element in self.elements:
            _widen(widths, element.position.col, longest_line_length(element.text))
        for index, title in enumerate(self.column_titles):
            _widen(widths, index + self.column_titles_start[1] - 1, longest_line_length(title.text))
        if self.row_titles:
            _widen(
                widths,
                self.row_titles_start[1] - 1,
                max(longest_line_length(title.text) for title in self.row_titles),
            )
        for cell in self.column_data:
            _widen(widths, self._column_index(cell.title), cell.display_length)

        self._content_widths = widths
        self._apply_column_widths()
        return self._complete("set_column_widths", self.column_widths)

    def set_row_heights(self) -> dict[int, float]:
        """Size rows from element line counts; unsized rows get 20."""
        self._require("set_row_heights", "compute_extent")
        heights: dict[int, float] = {}
        for element in self.elements:
            height = float(line_count(element.text) * LINE_HEIGHT + ROW_HEIGHT_PADDING)
            font_size = element.combined_style().font_size
            if font_size is not None:
                height += round(font_size / 3)
            heights[element.row] = max(heights.get(element.row, 0), height)
        if self.column_titles:
            header_row = self.column_titles_start[0]
            heights[header_row] = max(heights.get(header_row, 0), self._title_row_height())

        sheet = self._sheet()
        applied: dict[int, float] = {}
        for row in range(1, self._extent().row + 1):
            applied[row] = heights.get(row, DEFAULT_ROW_HEIGHT)
            sheet.set_row_height(row, applied[row])
        return self._complete("set_row_heights", applied)

    def set_column_title_row_height(self) -> float | None:
        """Apply the header row height, explicit or from the tallest title."""
        self._require("set_column_title_row_height", "compute_extent")
        if not self.column_titles:
            return self._complete("set_column_title_row_height", None)
        height = self.column_title_row_height or self._title_row_height()
        self._sheet().set_row_height(self.column_titles_start[0], height)
        return self._complete("set_column_title_row_height", height)

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def place_elements(self) -> None:
        self._require("place_elements", "compute_extent")
        sheet = self._sheet()
        for element in self.elements:
            row, col = element.row, element.position.col
            sheet.set_value(row, col, element.text)
            record = element.combined_style()
            if not record.is_empty:
                sheet.apply_style(row, col, record)
            if element.comment:
                sheet.add_comment(row, col, element.comment, author=element.text)
            if element.merge:
                sheet.merge(row, col, col + element.merge)
        self._complete("place_elements", None)

    def place_column_titles(self) -> None:
        self._require("place_column_titles", "index_column_titles", "compute_extent")
        row = self.column_titles_start[0]
        for index, title in enumerate(self.column_titles):
            self._place_title(title, row, index + self.column_titles_start[1] - 1)
        self._complete("place_column_titles", None)

    def place_row_titles(self) -> None:
        self._require("place_row_titles", "index_row_titles", "compute_extent")
        col = self.row_titles_start[1] - 1
        for index, title in enumerate(self.row_titles):
            self._place_title(title, self.row_titles_start[0] + index, col)
        self._complete("place_row_titles", None)

    def place_column_data(self) -> None:
        """Write column data below its title, first empty slot unless offset."""
        self._require("place_column_data", "index_column_titles", "compute_extent")
        sheet = self._sheet()
        first_row = self.column_titles_start[0] + 1
        for cell in self.column_data:
            col = self._column_index(cell.title)
            if cell.row is not None:
                row = first_row + cell.row
            else:
                row = first_row
                while sheet.value(row, col) is not None:
                    row += 1
            sheet.set_value(row, col, cell.text)
        self._complete("place_column_data", None)

    def place_row_data(self) -> None:
        """Write row data right of its title, first empty slot unless offset.

        Each written column is widened to fit the value it received.
        """
        self._require(
            "place_row_data", "index_row_titles", "compute_extent", "set_column_widths"
        )
        sheet = self._sheet()
        first_col = self.row_titles_start[1]
        for cell in self.row_data:
            row = self._row_index(cell.title) + 1
            if cell.row is not None:
                col = first_col + cell.row
            else:
                col = first_col
                while sheet.value(row, col) is not None:
                    col += 1
            sheet.set_value(row, col, cell.text)
            _widen(self._content_widths, col, cell.display_length)
        if self.row_data:
            self._apply_column_widths()
        self._complete("place_row_data", None)

    # ------------------------------------------------------------------
    # Dropdown lists
    # ------------------------------------------------------------------

    def set_lists_for_column_titles(self) -> dict[str, str]:
        """Materialize column-title lists and validate the cells below them."""
        self._require("set_lists_for_column_titles", "place_column_titles")
        declared = titles_with_lists(self.column_titles)
        if not declared:
            return self._complete("set_lists_for_column_titles", {})
        sources = ListSheetManager(self._lists()).materialize(declared)
        sheet = self._sheet()
        first_row = self.column_titles_start[0] + 1
        for title in declared:
            col = self._column_index(title.text)
            self._add_validation(
                f"{cell_ref(first_row, col)}:{cell_ref(first_row + self.validation_rows - 1, col)}",
                sources[title.text],
            )
        self.list_sources.update(sources)
        logger.debug("Wired %d column list(s) on '%s'.", len(declared), sheet.name)
        return self._complete("set_lists_for_column_titles", sources)

    def set_lists_for_row_titles(self) -> dict[str, str]:
        """Materialize row-title lists and validate the cells beside them."""
        self._require("set_lists_for_row_titles", "place_row_titles")
        declared = titles_with_lists(self.row_titles)
        if not declared:
            return self._complete("set_lists_for_row_titles", {})
        sources = ListSheetManager(self._lists()).materialize(declared)
        sheet = self._sheet()
        first_col = self.row_titles_start[1]
        for title in declared:
            row = self._row_index(title.text) + 1
            self._add_validation(
                f"{cell_ref(row, first_col)}:{cell_ref(row, first_col + self.validation_rows - 1)}",
                sources[title.text],
            )
        self.list_sources.update(sources)
        logger.debug("Wired %d row list(s) on '%s'.", len(declared), sheet.name)
        return self._complete("set_lists_for_row_titles", sources)

    def move_lists_sheet_to_end(self) -> bool:
        """Make the Lists sheet the workbook's last sheet."""
        self._require("move_lists_sheet_to_end", "bind")
        sheet = self._sheet()
        lists = self._lists()
        if sheet.name == lists.name:
            return self._complete("move_lists_sheet_to_end", False)
        moved = sheet.document.move_to_end(lists.name)
        return self._complete("move_lists_sheet_to_end", moved)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _place_title(self, title: Title, row: int, col: int) -> None:
        sheet = self._sheet()
        sheet.set_value(row, col, title.text)
        sheet.apply_style(row, col, title.combined_style())
        if title.hyperlink:
            sheet.add_hyperlink(row, col, title.hyperlink)
        if title.comment:
            sheet.add_comment(row, col, title.comment, author=title.text)

    def _add_validation(self, target_range: str, source: str) -> None:
        if self.validation_rows > 0:
            self._sheet().add_list_validation(target_range, source)

    def _apply_column_widths(self) -> None:
        widths = self._content_widths
        last = max([self._extent().col, *widths])
        self.column_widths = [
            widths[col] + WIDTH_PADDING if col in widths else 0
            for col in range(last + 1)
        ]
        self._sheet().set_column_widths(self.column_widths)

    def _extent(self) -> Extent:
        if self.max is None:
            raise PipelineOrderError("size the sheet", "compute_extent")
        return self.max

    def _title_row_height(self) -> float:
        lines = max(line_count(title.text) for title in self.column_titles)
        return float(lines * LINE_HEIGHT + ROW_HEIGHT_PADDING)

    def _column_index(self, title: str) -> int:
        return _lookup(self._sheet().column_title_indexes, title, "column")

    def _row_index(self, title: str) -> int:
        return _lookup(self._sheet().row_title_indexes, title, "row")

    def _sheet(self) -> SheetHandle:
        if self.sheet is None:
            raise MissingSheetError("Blueprint is not bound to a sheet.")
        return self.sheet

    def _lists(self) -> ListsSheet:
        if self.lists is None:
            raise MissingSheetError("Blueprint is not bound to a Lists sheet handle.")
        return self.lists

    def _require(self, step: str, *prerequisites: str) -> None:
        if "bind" not in self._done:
            raise MissingSheetError(f"Cannot run '{step}' before a sheet is bound.")
        for prerequisite in prerequisites:
            if prerequisite not in self._done:
                raise PipelineOrderError(step, prerequisite)

    def _complete(self, step: str, result: Any) -> Any:
        self._done.add(step)
        logger.debug("Step %s done.", step)
        return result


def _index_titles(
    titles: Sequence[Title], offset: int, axis: Axis, warned: set[str]
) -> dict[str, int]:
    indexes: dict[str, int] = {}
    for index, title in enumerate(titles):
        if title.text in indexes:
            warn_once(
                f"duplicate-{axis}-title:{title.text}",
                f"Duplicate {axis} title {title.text!r}; the later one wins the index.",
                warned,
            )
        indexes[title.text] = index + offset - 1
    return indexes


def _lookup(indexes: Mapping[str, int] | None, title: str, axis: Axis) -> int:
    if indexes is None:
        raise PipelineOrderError(f"resolve {axis} title", f"index_{axis}_titles")
    try:
        return indexes[title]
    except KeyError:
        raise TitleReferenceError(title, axis) from None


def _widen(widths: dict[int, int], col: int, length: int) -> None:
    if length > widths.get(col, -1):
        widths[col] = length


def _coerce_cell(item: Cell | Mapping[str, Any]) -> Cell:
    return item if isinstance(item, Cell) else Cell.model_validate(item)
