"""Diagnostic rule flagging virtual events."""

from __future__ import annotations

import tree_sitter

from .config import AnalyzerConfig
from .messages import ANALYZER_DESCRIPTION, ANALYZER_MESSAGE_FORMAT, ANALYZER_TITLE
from .models import FIELD_EVENT, PROPERTY_EVENT, Diagnostic, DiagnosticDescriptor
from .syntax.matcher import AccessorLikeEvent, EventDeclaration, FieldLikeEvent, match_event
from .syntax.tree import SyntaxTree

FIELD_EVENT_DIAGNOSTIC_ID = "MoreEffectiveAnalyzersItem24Field"
PROPERTY_EVENT_DIAGNOSTIC_ID = "MoreEffectiveAnalyzersItem24Property"

CATEGORY = "DesignPractices"


class VirtualEventRule:
    """Reports `virtual` on field-like and accessor-like events.

    Holds only immutable descriptors, so one instance can serve any number
    of concurrent `analyze_node` calls.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()
        messages = self.config.messages
        self._descriptors = {
            kind: DiagnosticDescriptor(
                id=diagnostic_id,
                kind=kind,
                title=messages.get(ANALYZER_TITLE),
                message_format=messages.get(ANALYZER_MESSAGE_FORMAT),
                description=messages.get(ANALYZER_DESCRIPTION),
                category=CATEGORY,
            )
            for kind, diagnostic_id in (
                (FIELD_EVENT, FIELD_EVENT_DIAGNOSTIC_ID),
                (PROPERTY_EVENT, PROPERTY_EVENT_DIAGNOSTIC_ID),
            )
        }

    @property
    def supported_diagnostics(self) -> tuple[DiagnosticDescriptor, ...]:
        """Every descriptor this rule can ever report."""
        return tuple(self._descriptors.values())

    def analyze_node(self, tree: SyntaxTree, node: tree_sitter.Node) -> list[Diagnostic]:
        """Analyze one event declaration node dispatched by the host."""
        event = match_event(tree, node)
        if event is None:
            return []
        diagnostic = self.analyze_event(event)
        return [diagnostic] if diagnostic else []

    def analyze_event(self, event: EventDeclaration) -> Diagnostic | None:
        if not event.is_virtual:
            return None

        if isinstance(event, FieldLikeEvent):
            descriptor = self._descriptors[FIELD_EVENT]
        elif isinstance(event, AccessorLikeEvent):
            descriptor = self._descriptors[PROPERTY_EVENT]
        else:
            raise TypeError(f"Unknown event shape: {type(event).__name__}")

        if descriptor.id in self.config.disabled:
            return None

        return Diagnostic(
            id=descriptor.id,
            kind=descriptor.kind,
            event_name=event.name,
            message=self.config.messages.format(ANALYZER_MESSAGE_FORMAT, event.name),
            span=event.name_span,
            severity=descriptor.severity,
        )
