"""Dropdown-list materialization on the workbook's "Lists" sheet.

Each title carrying a ``list`` owns one column of the Lists sheet: the title
in row 1 and its choices from row 2 down. Declaring lists rebuilds the whole
sheet from what it already holds plus the new declarations.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import TYPE_CHECKING

from ..shared.a1 import absolute_column_range
from .models import BlueprintOptions, Cell, Title
from .types import CellValue

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..core.document import ListsSheet

logger = logging.getLogger(__name__)


def titles_with_lists(titles: Sequence[Title]) -> list[Title]:
    """Return the titles that declare at least one dropdown choice."""
    return [title for title in titles if title.list]


def merge_lists(
    existing: Mapping[str, Sequence[CellValue]],
    declared: Sequence[Title],
) -> dict[str, list[CellValue]]:
    """Union already materialized lists with newly declared ones.

    Existing titles keep their column order and come first; new titles follow
    in declaration order. Values are distinct per title, existing values
    before new ones.

    Args:
        existing: Title -> values read back from the Lists sheet.
        declared: Titles declared by the current build.

    Returns:
        Ordered title -> values mapping to materialize.
    """
    merged: dict[str, list[CellValue]] = {}
    for title, values in existing.items():
        _extend_distinct(merged.setdefault(title, []), values)
    for title in declared:
        _extend_distinct(merged.setdefault(title.text, []), title.list or ())
    return merged


def _extend_distinct(target: list[CellValue], values: Sequence[CellValue]) -> None:
    for value in values:
        if value not in target:
            target.append(value)


class ListSheetManager:
    """Rebuild the Lists sheet and report where each list landed."""

    def __init__(self, lists: ListsSheet) -> None:
        self.lists = lists

    def materialize(self, declared: Sequence[Title]) -> dict[str, str]:
        """Merge ``declared`` into the Lists sheet and recreate it.

        Args:
            declared: Titles with dropdown choices from the origin sheet.

        Returns:
            Title text -> absolute source range (``Lists!$A$2:$A$3``) for each
            declared title.
        """
        from .blueprint import Blueprint

        existing = self.lists.read()
        merged = merge_lists(existing, declared)
        logger.debug(
            "Materializing %d list(s) on '%s' (%d pre-existing).",
            len(merged),
            self.lists.name,
            len(existing),
        )
        sheet = self.lists.recreate()
        blueprint = Blueprint(
            BlueprintOptions(column_titles=[Title(text=title) for title in merged])
        )
        blueprint.build(
            sheet,
            column_data=[
                Cell(text=value, title=title)
                for title, values in merged.items()
                for value in values
            ],
            lists=self.lists,
        )
        return {
            title.text: self.source_range(title.text, len(merged[title.text]))
            for title in declared
        }

    def source_range(self, title: str, count: int) -> str:
        """Absolute range covering ``count`` values stored for ``title``."""
        col = self.lists.column_index(title)
        return absolute_column_range(self.lists.name, col, 2, count + 1)
