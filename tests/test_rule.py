"""Tests for the virtual event diagnostic rule."""

import pytest

from eventguard.config import AnalyzerConfig
from eventguard.fixes import REMOVE_VIRTUAL
from eventguard.host import Engine
from eventguard.messages import MessageTable
from eventguard.rule import (
    FIELD_EVENT_DIAGNOSTIC_ID,
    PROPERTY_EVENT_DIAGNOSTIC_ID,
    VirtualEventRule,
)

from .conftest import (
    FIELD_EVENT_FIXED,
    FIELD_EVENT_SOURCE,
    PROPERTY_EVENT_FIXED,
    PROPERTY_EVENT_SOURCE,
    event_nodes,
    parse,
    wrap_in_class,
)


class TestSupportedDiagnostics:
    def test_advertises_both_kinds(self):
        rule = VirtualEventRule()
        ids = {d.id for d in rule.supported_diagnostics}
        assert ids == {
            "MoreEffectiveAnalyzersItem24Field",
            "MoreEffectiveAnalyzersItem24Property",
        }

    def test_descriptors_are_warnings(self):
        for descriptor in VirtualEventRule().supported_diagnostics:
            assert descriptor.severity == "warning"
            assert descriptor.category == "DesignPractices"
            assert descriptor.enabled_by_default


class TestFieldLikeDiagnostics:
    def test_reports_virtual_field_event(self, engine):
        (diagnostic,) = engine.analyze_source(FIELD_EVENT_SOURCE, "Test0.cs")

        assert diagnostic.id == FIELD_EVENT_DIAGNOSTIC_ID
        assert diagnostic.kind == "field"
        assert diagnostic.event_name == "OnVirtualEvent"
        assert diagnostic.message == "Event 'OnVirtualEvent' should not be virtual"
        assert diagnostic.severity == "warning"
        assert (diagnostic.span.line, diagnostic.span.column) == (5, 54)

    def test_span_covers_variable_name(self, engine):
        (diagnostic,) = engine.analyze_source(FIELD_EVENT_SOURCE, "Test0.cs")
        span = diagnostic.span
        assert FIELD_EVENT_SOURCE[span.start_byte:span.end_byte] == "OnVirtualEvent"

    def test_multi_variable_statement_reports_once(self, engine):
        source = wrap_in_class("public virtual event EventHandler<EventArgs> A, B;")
        (diagnostic,) = engine.analyze_source(source, "Widget.cs")
        assert diagnostic.event_name == "A"


class TestPropertyLikeDiagnostics:
    def test_reports_virtual_accessor_event(self, engine):
        (diagnostic,) = engine.analyze_source(PROPERTY_EVENT_SOURCE, "Test0.cs")

        assert diagnostic.id == PROPERTY_EVENT_DIAGNOSTIC_ID
        assert diagnostic.kind == "property"
        assert diagnostic.event_name == "OnVirtualEvent"
        assert diagnostic.message == "Event 'OnVirtualEvent' should not be virtual"
        assert (diagnostic.span.line, diagnostic.span.column) == (7, 54)

    def test_reported_without_resolvable_backing_field(self, engine):
        source = wrap_in_class(
            "public virtual event EventHandler<EventArgs> Changed { add { } remove { } }"
        )
        (diagnostic,) = engine.analyze_source(source, "Widget.cs")
        assert diagnostic.id == PROPERTY_EVENT_DIAGNOSTIC_ID


class TestNoDiagnostics:
    """Declarations that must not be reported."""

    def test_empty_source(self, engine):
        assert engine.analyze_source("", "Test0.cs") == []

    @pytest.mark.parametrize(
        "source",
        [FIELD_EVENT_FIXED, PROPERTY_EVENT_FIXED],
        ids=["field", "property"],
    )
    def test_non_virtual_events(self, engine, source):
        assert engine.analyze_source(source, "Test0.cs") == []

    @pytest.mark.parametrize(
        "member",
        [
            "public override event EventHandler<EventArgs> Changed;",
            "public abstract event EventHandler<EventArgs> Changed;",
            "public sealed override event EventHandler<EventArgs> Changed;",
            "public virtual void Changed() { }",
            "public virtual EventHandler<EventArgs> Changed { get; set; }",
        ],
    )
    def test_other_members(self, engine, member):
        assert engine.analyze_source(wrap_in_class(member), "Widget.cs") == []

    def test_non_event_node_dispatched_directly(self):
        tree = parse(FIELD_EVENT_SOURCE)
        assert VirtualEventRule().analyze_node(tree, tree.root) == []


class TestRuleConfiguration:
    def test_disabled_diagnostic(self):
        engine = Engine(AnalyzerConfig(disabled=frozenset({FIELD_EVENT_DIAGNOSTIC_ID})))
        assert engine.analyze_source(FIELD_EVENT_SOURCE, "Test0.cs") == []
        assert len(engine.analyze_source(PROPERTY_EVENT_SOURCE, "Test0.cs")) == 1

    def test_custom_message_format(self):
        messages = MessageTable(
            entries={
                **MessageTable().entries,
                "AnalyzerMessageFormat": "L'événement '{0}' ne doit pas être virtuel",
            }
        )
        engine = Engine(AnalyzerConfig(messages=messages))

        (diagnostic,) = engine.analyze_source(FIELD_EVENT_SOURCE, "Test0.cs")
        assert diagnostic.message == "L'événement 'OnVirtualEvent' ne doit pas être virtuel"


class TestIdempotence:
    @pytest.mark.parametrize(
        "source", [FIELD_EVENT_SOURCE, PROPERTY_EVENT_SOURCE], ids=["field", "property"]
    )
    def test_removing_virtual_reaches_fixed_point(self, engine, source):
        tree = engine.parse(source, "Test0.cs")
        (diagnostic,) = engine.analyze(tree)

        fixed = engine.apply_fix(tree, diagnostic, REMOVE_VIRTUAL)
        assert engine.analyze(fixed) == []

    def test_analysis_is_deterministic(self, engine):
        tree = parse(PROPERTY_EVENT_SOURCE)
        rule = engine.rule
        first = [rule.analyze_node(tree, n) for n in event_nodes(tree)]
        second = [rule.analyze_node(tree, n) for n in event_nodes(tree)]
        assert first == second
