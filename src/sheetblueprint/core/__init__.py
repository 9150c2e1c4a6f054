from __future__ import annotations

from .document import LISTS_SHEET_NAME, GridDocument, ListsSheet, SheetHandle, SheetState
from .workbook import grid_document, openpyxl_workbook

__all__ = [
    "LISTS_SHEET_NAME",
    "GridDocument",
    "ListsSheet",
    "SheetHandle",
    "SheetState",
    "grid_document",
    "openpyxl_workbook",
]
