"""Core module exports."""

from incrcov.core.errors import (
    ConfigError,
    ErrorCode,
    IncrcovError,
    InputError,
    SourceLookupError,
)
from incrcov.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from incrcov.core.progress import status

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "IncrcovError",
    "InputError",
    "SourceLookupError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "status",
]
