"""Data models for eventguard."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from .syntax.tree import SyntaxTree

FIELD_EVENT = "field"
PROPERTY_EVENT = "property"

SEVERITY_WARNING = "warning"


@dataclass(frozen=True)
class Span:
    """A source range.

    Byte offsets are what edits and re-location use; line and column are
    1-based and only used for display.
    """

    start_byte: int
    end_byte: int
    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_byte": self.start_byte,
            "end_byte": self.end_byte,
            "line": self.line,
            "column": self.column,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Span":
        return cls(
            start_byte=data["start_byte"],
            end_byte=data["end_byte"],
            line=data.get("line", 0),
            column=data.get("column", 0),
        )


@dataclass(frozen=True)
class DiagnosticDescriptor:
    """Static description of a diagnostic this tool can produce."""

    id: str
    kind: str  # "field"|"property"
    title: str
    message_format: str
    description: str
    category: str = "DesignPractices"
    severity: str = SEVERITY_WARNING
    enabled_by_default: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "title": self.title,
            "message_format": self.message_format,
            "description": self.description,
            "category": self.category,
            "severity": self.severity,
            "enabled_by_default": self.enabled_by_default,
        }


@dataclass(frozen=True)
class Diagnostic:
    """A virtual event reported at a single location."""

    id: str
    kind: str  # "field"|"property"
    event_name: str
    message: str
    span: Span
    severity: str = SEVERITY_WARNING

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "event_name": self.event_name,
            "message": self.message,
            "severity": self.severity,
            "span": self.span.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Diagnostic":
        return cls(
            id=data["id"],
            kind=data["kind"],
            event_name=data.get("event_name", ""),
            message=data.get("message", ""),
            span=Span.from_dict(data["span"]),
            severity=data.get("severity", SEVERITY_WARNING),
        )


@dataclass(frozen=True)
class CodeAction:
    """One rewrite offered for a diagnostic.

    `apply` takes the tree the action was computed against and returns a new
    tree; it never mutates its input.
    """

    title: str
    equivalence_key: str
    apply: Callable[["SyntaxTree"], "SyntaxTree"] = field(compare=False, repr=False)


@dataclass
class FixAllResult:
    """Outcome of replaying one action over every diagnostic in a file."""

    tree: "SyntaxTree"
    applied: list[Diagnostic] = field(default_factory=list)
    skipped: list[Diagnostic] = field(default_factory=list)
