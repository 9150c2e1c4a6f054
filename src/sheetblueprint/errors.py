"""Error taxonomy raised while applying a blueprint to a sheet."""

from __future__ import annotations


class BlueprintError(Exception):
    """Base class for blueprint build failures."""


class TitleReferenceError(BlueprintError, LookupError):
    """Raised when a data cell names a title that was never indexed."""

    def __init__(self, title: str, axis: str) -> None:
        self.title = title
        self.axis = axis
        super().__init__(f"Unknown {axis} title referenced by data cell: {title!r}")


class MissingSheetError(BlueprintError, ValueError):
    """Raised when a build is started without a target sheet."""


class PipelineOrderError(BlueprintError, RuntimeError):
    """Raised when a pipeline step runs before its prerequisite step."""

    def __init__(self, step: str, requires: str) -> None:
        self.step = step
        self.requires = requires
        super().__init__(f"Pipeline step '{step}' requires '{requires}' to run first.")


__all__ = [
    "BlueprintError",
    "MissingSheetError",
    "PipelineOrderError",
    "TitleReferenceError",
]
