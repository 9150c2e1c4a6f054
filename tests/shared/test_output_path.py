from __future__ import annotations

from pathlib import Path

from sheetblueprint.shared.output_path import (
    apply_conflict_policy,
    next_available_path,
    resolve_output_path,
)


def test_resolve_output_path_defaults_to_layout_stem(tmp_path: Path) -> None:
    layout = tmp_path / "report.json"
    assert resolve_output_path(layout, output_path=None) == (
        tmp_path / "report.xlsx"
    ).resolve()


def test_resolve_output_path_from_input_workbook(tmp_path: Path) -> None:
    layout = tmp_path / "layout.json"
    source = tmp_path / "book.xlsx"
    assert resolve_output_path(layout, output_path=None, input_path=source) == (
        tmp_path / "book_built.xlsx"
    ).resolve()
    rebuilt = tmp_path / "book_built.xlsx"
    assert resolve_output_path(layout, output_path=None, input_path=rebuilt) == (
        rebuilt.resolve()
    )


def test_resolve_output_path_appends_suffix(tmp_path: Path) -> None:
    layout = tmp_path / "layout.json"
    assert resolve_output_path(layout, output_path=tmp_path / "out") == (
        tmp_path / "out.xlsx"
    ).resolve()


def test_apply_conflict_policy_rename(tmp_path: Path) -> None:
    target = tmp_path / "result.xlsx"
    target.write_text("x", encoding="utf-8")
    resolved, warning, skipped = apply_conflict_policy(target, "rename")
    assert resolved.name == "result_1.xlsx"
    assert warning == "Output exists; renamed to: result_1.xlsx"
    assert skipped is False


def test_apply_conflict_policy_skip(tmp_path: Path) -> None:
    target = tmp_path / "result.xlsx"
    target.write_text("x", encoding="utf-8")
    resolved, warning, skipped = apply_conflict_policy(target, "skip")
    assert resolved == target
    assert warning == "Output exists; skipping write: result.xlsx"
    assert skipped is True


def test_next_available_path_no_conflict(tmp_path: Path) -> None:
    target = tmp_path / "result.xlsx"
    assert next_available_path(target) == target
