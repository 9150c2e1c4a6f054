from __future__ import annotations

import logging

import pytest

from sheetblueprint.core.document import GridDocument, SheetHandle
from sheetblueprint.errors import (
    MissingSheetError,
    PipelineOrderError,
    TitleReferenceError,
)
from sheetblueprint.layout.blueprint import Blueprint, Extent
from sheetblueprint.layout.models import BlueprintOptions


def test_title_indexes_follow_insertion_order(sheet: SheetHandle) -> None:
    blueprint = Blueprint(
        column_titles=[{"text": "A"}, {"text": "B"}, {"text": "C"}],
        column_titles_start=(1, 1),
    )
    blueprint.bind(sheet)
    assert blueprint.index_column_titles() == {"A": 0, "B": 1, "C": 2}
    assert sheet.column_title_indexes == {"A": 0, "B": 1, "C": 2}


def test_title_indexes_use_anchor_offset(sheet: SheetHandle) -> None:
    blueprint = Blueprint(
        column_titles=[{"text": "A"}, {"text": "B"}],
        row_titles=[{"text": "R1"}, {"text": "R2"}],
        column_titles_start=(2, 3),
        row_titles_start=(4, 1),
    )
    blueprint.build(sheet)
    assert sheet.column_title_indexes == {"A": 2, "B": 3}
    assert sheet.row_title_indexes == {"R1": 3, "R2": 4}
    assert sheet.value_at("C2") == "A"
    assert sheet.value_at("D2") == "B"
    assert sheet.value_at("A4") == "R1"
    assert sheet.value_at("A5") == "R2"


def test_duplicate_title_warns_and_later_wins(
    sheet: SheetHandle, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING)
    blueprint = Blueprint(column_titles=[{"text": "Twice"}, {"text": "Twice"}])
    blueprint.bind(sheet)
    assert blueprint.index_column_titles() == {"Twice": 1}
    assert "Duplicate column title 'Twice'" in caplog.text


def test_duplicate_title_warns_for_every_blueprint(
    document: GridDocument, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING)
    titles = [{"text": "Again"}, {"text": "Again"}]
    Blueprint(row_titles=titles).build(document.create_sheet("First"))
    assert "Duplicate row title 'Again'" in caplog.text

    caplog.clear()
    Blueprint(row_titles=titles).build(document.create_sheet("Second"))
    assert "Duplicate row title 'Again'" in caplog.text


def test_extent_allocates_rows(sheet: SheetHandle) -> None:
    blueprint = Blueprint(
        elements=[{"text": "x", "row": 5, "col": 2}],
        column_titles=[{"text": "A"}, {"text": "B"}, {"text": "C", "list": ["1"]}],
    )
    blueprint.bind(sheet, column_data=[{"text": "v", "title": "A"}])
    blueprint.index_column_titles()
    extent = blueprint.compute_extent()
    # rows: element row 5 + both anchor rows + one data cell
    # cols: three titles + both anchor cols + one list title
    assert extent == Extent(row=8, col=6)
    assert sheet.state.allocated_rows == 10


def test_column_width_for_title_only_column(sheet: SheetHandle) -> None:
    blueprint = Blueprint(column_titles=[{"text": "Hello"}])
    blueprint.build(sheet)
    assert blueprint.column_widths[0] == 9
    assert blueprint.column_widths[1] == 0
    assert sheet.column_width(0) == 9
    assert sheet.column_width(1) == 0


def test_column_width_uses_longest_content(sheet: SheetHandle) -> None:
    blueprint = Blueprint(
        elements=[{"text": "short\na much longer line", "row": 6, "col": 2}],
        column_titles=[{"text": "Id"}, {"text": "Name"}],
    )
    blueprint.build(
        sheet, column_data=[{"text": "Bartholomew", "title": "Name"}]
    )
    assert blueprint.column_widths[0] == 2 + 4
    assert blueprint.column_widths[1] == len("a much longer line") + 4


def test_merge_reserves_covered_columns(sheet: SheetHandle) -> None:
    blueprint = Blueprint(
        elements=[{"text": "Report", "row": 1, "col": 2, "merge": 2}],
    )
    blueprint.build(sheet)
    assert blueprint.column_widths == [0, 10, 4, 4]


def test_row_widths_account_for_row_data(sheet: SheetHandle) -> None:
    blueprint = Blueprint(row_titles=[{"text": "Size"}])
    blueprint.build(
        sheet,
        row_data=[
            {"text": "small", "title": "Size"},
            {"text": "extra large", "title": "Size"},
        ],
    )
    assert blueprint.column_widths[0] == 8
    assert blueprint.column_widths[1] == 9
    assert blueprint.column_widths[2] == 15


def test_row_data_widths_follow_explicit_offsets(sheet: SheetHandle) -> None:
    blueprint = Blueprint(row_titles=[{"text": "R"}])
    blueprint.build(
        sheet,
        row_data=[
            {"text": "a", "title": "R", "row": 0},
            {"text": "bbbbbbbbbb", "title": "R"},
        ],
    )
    assert sheet.value_at("B1") == "a"
    assert sheet.value_at("C1") == "bbbbbbbbbb"
    assert blueprint.column_widths[1:3] == [5, 14]
    assert sheet.column_width(2) == 14


def test_row_data_widths_skip_existing_values(sheet: SheetHandle) -> None:
    sheet.set_value(1, 1, "taken")
    blueprint = Blueprint(row_titles=[{"text": "R"}])
    blueprint.build(sheet, row_data=[{"text": "long value", "title": "R"}])
    assert sheet.value_at("C1") == "long value"
    assert blueprint.column_widths[1] == 0
    assert blueprint.column_widths[2] == 14


def test_row_heights(sheet: SheetHandle) -> None:
    blueprint = Blueprint(
        elements=[
            {"text": "one\ntwo\nthree", "row": 2, "col": 1},
            {"text": "big", "row": 3, "col": 1, "style": {"large_font": True}},
        ],
    )
    blueprint.build(sheet)
    assert sheet.row_height(2) == 40
    assert sheet.row_height(3) == 24
    assert sheet.row_height(1) == 20
    assert sheet.row_height(4) == 20


def test_column_title_row_height_computed_and_explicit(document: GridDocument) -> None:
    first = document.create_sheet("First")
    Blueprint(column_titles=[{"text": "Line 1\nLine 2"}, {"text": "x"}]).build(first)
    assert first.row_height(1) == 30

    second = document.create_sheet("Second")
    Blueprint(
        column_titles=[{"text": "Line 1\nLine 2"}],
        column_title_row_height=45,
    ).build(second)
    assert second.row_height(1) == 45


def test_elements_are_placed_with_style_comment_and_merge(sheet: SheetHandle) -> None:
    Blueprint(
        elements=[
            {
                "text": "Report",
                "row": 1,
                "col": 2,
                "merge": 2,
                "comment": "Quarterly",
                "style": {"bold": True, "background": "FFCC00", "borders": True},
            }
        ]
    ).build(sheet)
    cell = sheet.worksheet["B1"]
    assert cell.value == "Report"
    assert cell.font.bold is True
    assert cell.fill.start_color.rgb == "FFFFCC00"
    assert cell.border.left.style == "medium"
    assert cell.comment.text == "Quarterly"
    assert cell.comment.author == "Report"
    assert [str(r) for r in sheet.worksheet.merged_cells.ranges] == ["B1:D1"]


def test_titles_are_styled_and_linked(sheet: SheetHandle) -> None:
    Blueprint(
        column_titles=[
            {
                "text": "Docs",
                "hyperlink": "https://example.com/docs",
                "comment": "Reference",
                "color": "D9E1F2",
            }
        ]
    ).build(sheet)
    cell = sheet.worksheet["A1"]
    assert cell.font.bold is True
    assert cell.alignment.horizontal == "center"
    assert cell.alignment.vertical == "center"
    assert cell.border.top.style == "thick"
    assert cell.fill.start_color.rgb == "FFD9E1F2"
    assert cell.hyperlink.target == "https://example.com/docs"
    assert cell.comment.text == "Reference"


def test_column_data_end_to_end(sheet: SheetHandle) -> None:
    Blueprint(column_titles=[{"text": "Name"}], column_titles_start=(1, 1)).build(
        sheet,
        column_data=[
            {"text": "Alice", "title": "Name"},
            {"text": "Bob", "title": "Name"},
        ],
    )
    assert sheet.value_at("A1") == "Name"
    assert sheet.value_at("A2") == "Alice"
    assert sheet.value_at("A3") == "Bob"
    assert sheet.value_at("A4") is None


def test_column_data_fills_first_empty_slot(sheet: SheetHandle) -> None:
    Blueprint(column_titles=[{"text": "Item"}]).build(
        sheet,
        column_data=[
            {"text": "pinned", "title": "Item", "row": 1},
            {"text": "a", "title": "Item"},
            {"text": "b", "title": "Item"},
            {"text": "c", "title": "Item"},
        ],
    )
    assert [sheet.value(row, 0) for row in range(1, 7)] == [
        "Item",
        "a",
        "pinned",
        "b",
        "c",
        None,
    ]


def test_column_data_under_offset_anchor(sheet: SheetHandle) -> None:
    Blueprint(
        column_titles=[{"text": "Qty"}, {"text": "Price"}],
        column_titles_start=(3, 2),
    ).build(
        sheet,
        column_data=[
            {"text": 2, "title": "Qty"},
            {"text": 9.5, "title": "Price"},
            {"text": 7, "title": "Qty"},
        ],
    )
    assert sheet.value_at("B3") == "Qty"
    assert sheet.value_at("C3") == "Price"
    assert sheet.value_at("B4") == 2
    assert sheet.value_at("B5") == 7
    assert sheet.value_at("C4") == 9.5


def test_row_data_scans_rightward(sheet: SheetHandle) -> None:
    Blueprint(row_titles=[{"text": "R1"}, {"text": "R2"}]).build(
        sheet,
        row_data=[
            {"text": "a", "title": "R2"},
            {"text": "b", "title": "R2"},
            {"text": "z", "title": "R1", "row": 2},
        ],
    )
    assert sheet.value_at("A1") == "R1"
    assert sheet.value_at("A2") == "R2"
    assert sheet.value_at("B2") == "a"
    assert sheet.value_at("C2") == "b"
    assert sheet.value_at("D1") == "z"
    assert sheet.value_at("B1") is None


def test_unknown_title_raises_reference_error(sheet: SheetHandle) -> None:
    blueprint = Blueprint(column_titles=[{"text": "Name"}])
    with pytest.raises(TitleReferenceError, match="Missing") as excinfo:
        blueprint.build(sheet, column_data=[{"text": "x", "title": "Missing"}])
    assert excinfo.value.axis == "column"
    assert isinstance(excinfo.value, LookupError)


def test_unknown_row_title_raises_reference_error(sheet: SheetHandle) -> None:
    with pytest.raises(TitleReferenceError):
        Blueprint(row_titles=[{"text": "R1"}]).build(
            sheet, row_data=[{"text": "x", "title": "R9"}]
        )


def test_build_without_sheet_raises() -> None:
    with pytest.raises(MissingSheetError):
        Blueprint().build(None)


def test_step_before_bind_raises() -> None:
    with pytest.raises(MissingSheetError):
        Blueprint().index_column_titles()


def test_steps_out_of_order_raise(sheet: SheetHandle) -> None:
    blueprint = Blueprint(column_titles=[{"text": "Name"}])
    blueprint.bind(sheet, column_data=[{"text": "x", "title": "Name"}])
    with pytest.raises(PipelineOrderError, match="index_column_titles"):
        blueprint.place_column_data()
    blueprint.index_column_titles()
    with pytest.raises(PipelineOrderError, match="compute_extent"):
        blueprint.set_column_widths()
    blueprint.compute_extent()
    blueprint.index_row_titles()
    with pytest.raises(PipelineOrderError, match="set_column_widths"):
        blueprint.place_row_data()


def test_options_bundle_and_keywords_are_exclusive() -> None:
    with pytest.raises(TypeError):
        Blueprint(BlueprintOptions(), column_titles=[])


def test_build_returns_target_sheet(sheet: SheetHandle) -> None:
    assert Blueprint().build(sheet) == sheet
