from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .core.document import GridDocument
from .core.workbook import grid_document
from .layout.blueprint import Blueprint
from .layout.models import BlueprintOptions, Cell
from .shared.output_path import (
    OnConflictPolicy,
    apply_conflict_policy,
    resolve_output_path,
)

logger = logging.getLogger(__name__)


class LayoutSheet(BaseModel):
    """Blueprint and data for one target sheet."""

    model_config = ConfigDict(extra="forbid")

    sheet: str = Field(..., min_length=1, max_length=31, description="Target sheet name.")
    blueprint: BlueprintOptions = Field(default_factory=BlueprintOptions)
    column_data: list[Cell] = Field(default_factory=list)
    row_data: list[Cell] = Field(default_factory=list)


class LayoutDocument(BaseModel):
    """Layout file contents: sheets are built in order."""

    model_config = ConfigDict(extra="forbid")

    sheets: list[LayoutSheet] = Field(..., min_length=1)

    @classmethod
    def from_path(cls, path: Path) -> LayoutDocument:
        """Load a layout from a JSON file.

        Args:
            path: Layout file path.

        Returns:
            Validated layout document.
        """
        data: Any = json.loads(path.read_text(encoding="utf-8"))
        return cls.model_validate(data)


class BuildRequest(BaseModel):
    """Input for one layout build."""

    layout_path: Path
    output_path: Path | None = None
    input_path: Path | None = Field(
        default=None, description="Existing workbook to build into."
    )
    on_conflict: OnConflictPolicy = "overwrite"
    validation_rows: int | None = Field(
        default=None, ge=0, description="Override dropdown validation rows per sheet."
    )


class BuildResult(BaseModel):
    """Outcome of :func:`run_build`."""

    output_path: Path
    sheets: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    skipped: bool = False


def run_build(request: BuildRequest) -> BuildResult:
    """Build every sheet of a layout file and save the workbook.

    Args:
        request: Build request.

    Returns:
        Build result with the written path and final sheet order.

    Raises:
        FileNotFoundError: If the layout or input workbook does not exist.
        pydantic.ValidationError: If the layout file is malformed.
    """
    layout = LayoutDocument.from_path(request.layout_path)
    if request.input_path is not None and not request.input_path.exists():
        raise FileNotFoundError(f"Input workbook not found: {request.input_path}")
    output_path = resolve_output_path(
        request.layout_path,
        output_path=request.output_path,
        input_path=request.input_path,
    )
    output_path, warning, skipped = apply_conflict_policy(
        output_path, request.on_conflict
    )
    warnings = [warning] if warning else []
    if skipped:
        logger.info("Skipping build: %s", warning)
        return BuildResult(output_path=output_path, warnings=warnings, skipped=True)

    with grid_document(request.input_path) as document:
        build_layout(
            document,
            layout,
            fresh=request.input_path is None,
            validation_rows=request.validation_rows,
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        document.save(output_path)
        sheet_names = document.sheet_names
    logger.info("Workbook written: %s (%s)", output_path, ", ".join(sheet_names))
    return BuildResult(output_path=output_path, sheets=sheet_names, warnings=warnings)


def build_layout(
    document: GridDocument,
    layout: LayoutDocument,
    *,
    fresh: bool = False,
    validation_rows: int | None = None,
) -> None:
    """Apply each layout sheet's blueprint to ``document``.

    Args:
        document: Target grid document.
        layout: Layout to apply.
        fresh: When True the workbook's default sheet is renamed to the first
            layout sheet instead of leaving an empty "Sheet" behind.
        validation_rows: Optional override of each blueprint's validation rows.
    """
    if fresh and len(document.workbook.worksheets) == 1:
        default = document.workbook.worksheets[0]
        if default.title not in {entry.sheet for entry in layout.sheets}:
            default.title = layout.sheets[0].sheet
    for entry in layout.sheets:
        options = entry.blueprint
        if validation_rows is not None:
            options = options.model_copy(update={"validation_rows": validation_rows})
        sheet = document.sheet(entry.sheet)
        logger.debug("Applying blueprint to sheet '%s'.", entry.sheet)
        Blueprint(options).build(
            sheet, column_data=entry.column_data, row_data=entry.row_data
        )
