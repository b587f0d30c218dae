"""incrcov error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Input (coverage data, diff data, report formats)
- 4xxx: Source lookup
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Input (3xxx)
    INPUT_INVALID_REPORT_FORMAT = 3001
    INPUT_INVALID_COVERAGE = 3002
    INPUT_INVALID_DIFF = 3003
    INPUT_INVALID_STORE = 3004

    # Source (4xxx)
    SOURCE_NOT_FOUND = 4001
    SOURCE_NOT_SETTABLE = 4002


@dataclass(frozen=True, slots=True)
class IncrcovError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(IncrcovError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class InputError(IncrcovError):
    """Errors caused by user-supplied input rather than a bug.

    The CLI reports these without a traceback.
    """

    @property
    def input_error(self) -> bool:
        return True

    @classmethod
    def invalid_report_format(cls, fmt: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_INVALID_REPORT_FORMAT,
            message=f"Invalid report format [{fmt}]",
            details={"format": fmt},
        )

    @classmethod
    def invalid_coverage(cls, source: str, reason: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_INVALID_COVERAGE,
            message=f"Invalid coverage data in {source}: {reason}",
            details={"source": source, "reason": reason},
        )

    @classmethod
    def invalid_diff(cls, source: str, reason: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_INVALID_DIFF,
            message=f"Invalid diff data in {source}: {reason}",
            details={"source": source, "reason": reason},
        )

    @classmethod
    def invalid_store(cls, kind: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_INVALID_STORE,
            message=f"Invalid store type [{kind}]",
            details={"kind": kind},
        )


class SourceLookupError(IncrcovError):
    """Source text for a covered file could not be resolved."""

    @classmethod
    def not_found(cls, path: str) -> "SourceLookupError":
        return cls(
            code=ErrorCode.SOURCE_NOT_FOUND,
            message=f"Unable to lookup source: {path}",
            details={"path": path},
        )

    @classmethod
    def not_settable(cls, path: str) -> "SourceLookupError":
        return cls(
            code=ErrorCode.SOURCE_NOT_SETTABLE,
            message=f"Attempt to set contents for non-existent file [{path}] on a fslookup store",
            details={"path": path},
        )
