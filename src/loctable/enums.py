"""Enumerations for loctable type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.

Python 3.13+.
"""

from enum import StrEnum


class PipelinePhase(StrEnum):
    """Phase of a compilation run.

    Cancellation is only honoured at phase boundaries.
    """

    AGGREGATE = "aggregate"
    """Merge parsed files into per-language data."""

    INDEX = "index"
    """Assign canonical IDs and rebuild every language against them."""

    VALIDATE = "validate"
    """Apply strict mode to the collected findings."""


class LoadStatus(StrEnum):
    """Outcome of loading a single translation file.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    """File parsed into a SourceFile."""

    UNSUPPORTED = "unsupported"
    """No entry source understands the file format."""

    ERROR = "error"
    """File could not be read or parsed."""


__all__ = [
    "LoadStatus",
    "PipelinePhase",
]
