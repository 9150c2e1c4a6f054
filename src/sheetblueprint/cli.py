from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .errors import BlueprintError
from .runner import BuildRequest, run_build
from .shared.output_path import OnConflictPolicy

logger = logging.getLogger(__name__)


class CliConfig(BaseModel):
    """Configuration for one command-line invocation."""

    layout: Path = Field(..., description="Layout JSON file.")
    input: Path | None = Field(default=None, description="Workbook to build into.")
    output: Path | None = Field(default=None, description="Output workbook path.")
    on_conflict: OnConflictPolicy = Field(
        default="overwrite", description="Output conflict policy."
    )
    validation_rows: int | None = Field(default=None, ge=0)
    log_level: str = Field(default="WARNING", description="Logging level.")
    log_file: Path | None = Field(default=None, description="Optional log file path.")


def main(argv: list[str] | None = None) -> int:
    """Run the command-line entrypoint.

    Args:
        argv: Optional CLI arguments for testing.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    config = _parse_args(argv)
    _configure_logging(config)
    try:
        result = run_build(
            BuildRequest(
                layout_path=config.layout,
                output_path=config.output,
                input_path=config.input,
                on_conflict=config.on_conflict,
                validation_rows=config.validation_rows,
            )
        )
    except (BlueprintError, ValidationError, OSError, ValueError) as exc:
        logger.error("Build failed: %s", exc)
        return 1
    for warning in result.warnings:
        logger.warning(warning)
    print(result.output_path)
    return 0


def _parse_args(argv: list[str] | None) -> CliConfig:
    """Parse CLI arguments into a config.

    Args:
        argv: Optional CLI argument list.

    Returns:
        Parsed configuration.
    """
    parser = argparse.ArgumentParser(
        prog="sheetblueprint",
        description="Lay out titled, styled data on worksheets from a JSON layout.",
    )
    parser.add_argument("layout", type=Path, help="Layout JSON file.")
    parser.add_argument("--input", "-i", type=Path, help="Existing workbook to edit.")
    parser.add_argument("--output", "-o", type=Path, help="Output .xlsx path.")
    parser.add_argument(
        "--on-conflict",
        choices=["overwrite", "skip", "rename"],
        default="overwrite",
        help="Output conflict policy (overwrite/skip/rename).",
    )
    parser.add_argument(
        "--validation-rows",
        type=int,
        help="Dropdown validation rows per list title (default: 100).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    parser.add_argument("--log-file", type=Path, help="Optional log file path.")
    args = parser.parse_args(argv)
    return CliConfig(
        layout=args.layout,
        input=args.input,
        output=args.output,
        on_conflict=args.on_conflict,
        validation_rows=args.validation_rows,
        log_level=args.log_level,
        log_file=args.log_file,
    )


def _configure_logging(config: CliConfig) -> None:
    """Configure logging for the process.

    Args:
        config: CLI configuration.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file is not None:
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level.upper(),
        handlers=handlers,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
