"""
Claim Analytics exception hierarchy.

Only batch-level problems are raised; unparseable fields and empty
populations are absorbed into the data model instead.

Exception codes follow the pattern: CA_<SPECIFIC>
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ClaimAnalyticsError(Exception):
    """
    Base exception for all Claim Analytics errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (CA_*)
        details: Additional context about the error
    """

    message: str
    code: str = "CA_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/UI display."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


@dataclass
class EmptyBatchError(ClaimAnalyticsError):
    """The supplied row batch is empty or missing."""

    message: str = "File is empty or could not be parsed."
    code: str = "CA_EMPTY_BATCH"


@dataclass
class FileDecodeError(ClaimAnalyticsError):
    """An uploaded file could not be decoded into rows."""

    code: str = "CA_FILE_DECODE"


@dataclass
class UnsupportedFileTypeError(ClaimAnalyticsError):
    """The uploaded file has an extension the loader cannot read."""

    code: str = "CA_UNSUPPORTED_FILE"


@dataclass
class UnknownDimensionError(ClaimAnalyticsError):
    """A request named a dimension or column that does not exist."""

    code: str = "CA_UNKNOWN_DIMENSION"
