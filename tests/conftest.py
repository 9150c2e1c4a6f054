from __future__ import annotations

import pytest

from sheetblueprint.core.document import GridDocument, SheetHandle


@pytest.fixture
def document() -> GridDocument:
    """Fresh grid document whose default sheet is named ``Data``."""
    doc = GridDocument()
    doc.workbook.active.title = "Data"
    return doc


@pytest.fixture
def sheet(document: GridDocument) -> SheetHandle:
    handle = document.get_sheet("Data")
    assert handle is not None
    return handle
