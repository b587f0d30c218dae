"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (INCRCOV__SECTION__KEY)
3. Project YAML (.incrcov.yaml)
4. Global YAML (~/.config/incrcov/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    INCRCOV__<SECTION>__<KEY>=<VALUE>

Examples:
    INCRCOV__LOGGING__LEVEL=DEBUG
    INCRCOV__REPORTING__DIR=build/coverage

All models are frozen: a loaded configuration is passed by value into every
report run and never patched afterwards.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

Watermark = tuple[float, float]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    model_config = ConfigDict(frozen=True)

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        INCRCOV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    model_config = ConfigDict(frozen=True)

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every written report file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class WatermarksConfig(BaseModel):
    """Low/high percentage thresholds per coverage dimension.

    A metric below ``low`` renders as "low", at or above ``high`` as "high",
    anything in between as "medium".
    """

    model_config = ConfigDict(frozen=True)

    statements: Watermark = (50.0, 80.0)
    branches: Watermark = (50.0, 80.0)
    functions: Watermark = (50.0, 80.0)
    lines: Watermark = (50.0, 80.0)

    @field_validator("statements", "branches", "functions", "lines")
    @classmethod
    def validate_watermark(cls, v: Watermark) -> Watermark:
        low, high = v
        if not (0 <= low <= high <= 100):
            raise ValueError(f"Watermark must satisfy 0 <= low <= high <= 100, got {list(v)}")
        return v

    def for_dimension(self, dimension: str) -> Watermark:
        value: Watermark = getattr(self, dimension)
        return value


class ReportingConfig(BaseModel):
    """Report output configuration.

    Env vars:
        INCRCOV__REPORTING__DIR: Output directory for reports
    """

    model_config = ConfigDict(frozen=True)

    dir: str = Field(
        default="coverage",
        description="Directory reports are written into (relative to the working directory).",
    )
    reports: list[str] = Field(
        default_factory=lambda: ["lcov"],
        description="Report formats written when none are given on the command line.",
    )
    watermarks: WatermarksConfig = Field(default_factory=WatermarksConfig)
    report_config: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Per-format options, e.g. {'json': {'file': 'out.json'}}.",
    )


class IncrcovConfig(BaseModel):
    """Root configuration for incrcov."""

    model_config = ConfigDict(frozen=True)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    verbose: bool = Field(
        default=False,
        description="Log the summary tree and every written file.",
    )
