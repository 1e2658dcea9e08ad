"""Convert class usages into editor-style diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from deprecheck.types import ClassUsage

DIAGNOSTIC_SOURCE = "deprecheck"


class DiagnosticSeverity(StrEnum):
    """Severity names with their LSP numeric codes."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"

    @property
    def lsp_code(self) -> int:
        return _LSP_CODES[self]

    @classmethod
    def parse(cls, value: str | None) -> DiagnosticSeverity:
        """Parse a severity name; unknown or missing values become WARNING."""
        try:
            return cls(value.lower()) if value else cls.WARNING
        except ValueError:
            return cls.WARNING


_LSP_CODES = {
    DiagnosticSeverity.ERROR: 1,
    DiagnosticSeverity.WARNING: 2,
    DiagnosticSeverity.INFORMATION: 3,
    DiagnosticSeverity.HINT: 4,
}


@dataclass(frozen=True, slots=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True, slots=True)
class Range:
    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single diagnostic for one deprecated class usage."""

    range: Range
    severity: DiagnosticSeverity
    message: str
    code: str
    source: str = DIAGNOSTIC_SOURCE
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """LSP-shaped JSON object."""
        return {
            "range": {
                "start": {"line": self.range.start.line, "character": self.range.start.character},
                "end": {"line": self.range.end.line, "character": self.range.end.character},
            },
            "severity": self.severity.lsp_code,
            "message": self.message,
            "source": self.source,
            "code": self.code,
            "data": self.data,
        }


@dataclass(frozen=True, slots=True)
class DiagnosticResult:
    """Outcome of validating one document."""

    path: str
    usages: tuple[ClassUsage, ...]
    analysis_time_ms: float | None = None


def to_diagnostic(usage: ClassUsage, severity: DiagnosticSeverity | str) -> Diagnostic:
    sev = severity if isinstance(severity, DiagnosticSeverity) else DiagnosticSeverity.parse(severity)
    return Diagnostic(
        range=Range(
            start=Position(usage.line, usage.start_char),
            end=Position(usage.line, usage.end_char),
        ),
        severity=sev,
        message=f"Deprecated: {usage.deprecated_info.message}",
        code=usage.class_name,
        data={
            "class_name": usage.class_name,
            "source_file": usage.deprecated_info.source_file,
        },
    )


def to_diagnostics(
    usages: tuple[ClassUsage, ...] | list[ClassUsage],
    severity: DiagnosticSeverity | str,
) -> list[Diagnostic]:
    return [to_diagnostic(usage, severity) for usage in usages]
