from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
import warnings

from openpyxl import Workbook, load_workbook

from .document import GridDocument


@contextmanager
def openpyxl_workbook(file_path: Path | None) -> Iterator[Workbook]:
    """Open an openpyxl workbook for editing and ensure it is closed.

    Args:
        file_path: Workbook path, or None for a new in-memory workbook.

    Yields:
        openpyxl workbook instance.
    """
    if file_path is None:
        wb = Workbook()
    else:
        with warnings.catch_warnings():
            warnings.filterwarnings(
                "ignore",
                message="Unknown extension is not supported and will be removed",
                category=UserWarning,
                module="openpyxl",
            )
            warnings.filterwarnings(
                "ignore",
                message="Data Validation extension is not supported and will be removed",
                category=UserWarning,
                module="openpyxl",
            )
            wb = load_workbook(file_path, keep_vba=file_path.suffix.lower() == ".xlsm")
    try:
        yield wb
    finally:
        wb.close()


@contextmanager
def grid_document(file_path: Path | None = None) -> Iterator[GridDocument]:
    """Open a workbook and wrap it in a :class:`GridDocument`.

    Args:
        file_path: Existing workbook to edit, or None to start empty.

    Yields:
        Grid document bound to the opened workbook.
    """
    with openpyxl_workbook(file_path) as wb:
        yield GridDocument(wb)
