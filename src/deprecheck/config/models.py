"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DEPRECHECK__SECTION__KEY)
3. Repo YAML (.deprecheck/config.yaml)
4. Global YAML (~/.config/deprecheck/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DEPRECHECK__<SECTION>__<KEY>=<VALUE>

Examples:
    DEPRECHECK__LOGGING__LEVEL=DEBUG
    DEPRECHECK__DIAGNOSTICS__SEVERITY=error
    DEPRECHECK__SCAN__EXCLUDE_DIRS='["node_modules", "vendor"]'
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from deprecheck.core.excludes import DEFAULT_EXCLUDE_DIRS
from deprecheck.css.scanner import DEFAULT_PATTERNS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Severity = Literal["error", "warning", "information", "hint"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

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
        DEPRECHECK__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every cache refresh and file change.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ScanConfig(BaseModel):
    """Stylesheet discovery configuration.

    Env vars:
        DEPRECHECK__SCAN__CSS_GLOB: JSON list of glob patterns
        DEPRECHECK__SCAN__EXCLUDE_DIRS: JSON list of directory names
        DEPRECHECK__SCAN__MAX_FILE_SIZE_MB: Skip stylesheets larger than this
    """

    css_glob: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PATTERNS),
        description="Glob patterns for stylesheets that may declare deprecations.",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Directory names skipped wherever they appear.",
    )
    max_file_size_mb: float = Field(
        default=5.0,
        description="Skip stylesheets larger than this (MB). Minified bundles are rarely useful.",
    )

    @field_validator("css_glob")
    @classmethod
    def validate_css_glob(cls, v: list[str]) -> list[str]:
        globs = [g for g in v if g]
        return globs or list(DEFAULT_PATTERNS)

    @field_validator("exclude_dirs")
    @classmethod
    def validate_exclude_dirs(cls, v: list[str]) -> list[str]:
        return [d for d in v if d]

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)


class DetectionConfig(BaseModel):
    """Usage detection configuration.

    Env vars:
        DEPRECHECK__DETECTION__ENABLE_FALLBACK_SEARCH: Direct search in class contexts
    """

    enable_fallback_search: bool = Field(
        default=True,
        description="Also search declared class names directly when the text to the "
        "left opens a class context. Catches syntaxes no pattern covers.",
    )


class DiagnosticsConfig(BaseModel):
    """Diagnostic reporting configuration.

    Env vars:
        DEPRECHECK__DIAGNOSTICS__ENABLE: Report diagnostics at all
        DEPRECHECK__DIAGNOSTICS__SEVERITY: error, warning, information or hint
    """

    enable: bool = Field(default=True, description="Disable to report no usages.")
    severity: Severity = Field(default="warning", description="Severity of each diagnostic.")

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v


class WatcherConfig(BaseModel):
    """Stylesheet watcher configuration.

    Env vars:
        DEPRECHECK__WATCHER__DEBOUNCE_SEC: Quiet window before a batch is delivered
        DEPRECHECK__WATCHER__MAX_DEBOUNCE_WAIT_SEC: Upper bound on batching delay
    """

    debounce_sec: float = Field(
        default=0.3,
        description="Sliding debounce window. Lower values re-parse more often during saves.",
    )
    max_debounce_wait_sec: float = Field(
        default=2.0,
        description="Maximum delay before a batch is forced out during continuous changes.",
    )


class DeprecheckConfig(BaseModel):
    """Root configuration for deprecheck."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
