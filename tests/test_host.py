"""Tests for the analysis host."""

import pytest

from eventguard.errors import (
    AnalysisCancelledError,
    FixNotAvailableError,
    UnsupportedLanguageError,
)
from eventguard.fixes import IMPLEMENT_RAISE_METHOD, REMOVE_VIRTUAL

from .conftest import (
    FIELD_EVENT_FIXED,
    FIELD_EVENT_SOURCE,
    PROPERTY_EVENT_SOURCE,
    wrap_in_class,
)

MIXED_SOURCE = wrap_in_class(
    "public virtual event EventHandler<EventArgs> OnOpened;\n"
    "public virtual event Action OnClosed;\n"
    "public virtual event EventHandler<SavedArgs> OnSaved;"
)


class TestAnalyze:
    def test_diagnostics_in_document_order(self, engine):
        diagnostics = engine.analyze_source(MIXED_SOURCE, "Widget.cs")
        assert [d.event_name for d in diagnostics] == ["OnOpened", "OnClosed", "OnSaved"]

    def test_unsupported_extension(self, engine):
        with pytest.raises(UnsupportedLanguageError):
            engine.parse(FIELD_EVENT_SOURCE, "Driver.java")

    def test_bytes_source(self, engine):
        assert len(engine.analyze_source(FIELD_EVENT_SOURCE.encode(), "Test0.cs")) == 1

    def test_syntax_errors_are_tolerated(self, engine):
        source = FIELD_EVENT_SOURCE[:-1]
        tree = engine.parse(source, "Test0.cs")

        assert tree.has_errors
        assert isinstance(engine.analyze(tree), list)

    def test_cancellation_between_declarations(self, engine):
        tree = engine.parse(MIXED_SOURCE, "Widget.cs")
        calls = []

        def cancelled():
            calls.append(None)
            return len(calls) > 2

        with pytest.raises(AnalysisCancelledError) as exc_info:
            engine.analyze(tree, cancelled=cancelled)
        assert exc_info.value.analyzed == 2

    def test_not_cancelled(self, engine):
        tree = engine.parse(MIXED_SOURCE, "Widget.cs")
        assert len(engine.analyze(tree, cancelled=lambda: False)) == 3


class TestAnalyzePaths:
    @pytest.mark.parametrize("jobs", [1, 4])
    def test_results_keyed_by_path(self, engine, temp_dir, jobs):
        field = temp_dir / "Field.cs"
        field.write_text(FIELD_EVENT_SOURCE, encoding="utf-8")
        clean = temp_dir / "Clean.cs"
        clean.write_text(FIELD_EVENT_FIXED, encoding="utf-8")
        prop = temp_dir / "Property.cs"
        prop.write_text(PROPERTY_EVENT_SOURCE, encoding="utf-8")

        results = engine.analyze_paths([field, clean, prop], jobs=jobs)

        assert list(results) == [field, clean, prop]
        assert [len(results[p]) for p in (field, clean, prop)] == [1, 0, 1]


class TestApplyFix:
    def test_unavailable_action(self, engine):
        tree = engine.parse(wrap_in_class("public virtual event Action OnClosed;"), "Widget.cs")
        (diagnostic,) = engine.analyze(tree)

        with pytest.raises(FixNotAvailableError) as exc_info:
            engine.apply_fix(tree, diagnostic, IMPLEMENT_RAISE_METHOD)
        assert exc_info.value.equivalence_key == IMPLEMENT_RAISE_METHOD

    def test_unknown_key(self, engine):
        tree = engine.parse(FIELD_EVENT_SOURCE, "Test0.cs")
        (diagnostic,) = engine.analyze(tree)

        with pytest.raises(FixNotAvailableError):
            engine.apply_fix(tree, diagnostic, "make-sealed")


class TestFixAll:
    def test_remove_virtual_everywhere(self, engine):
        tree = engine.parse(MIXED_SOURCE, "Widget.cs")

        result = engine.fix_all(tree, REMOVE_VIRTUAL)

        assert [d.event_name for d in result.applied] == ["OnOpened", "OnClosed", "OnSaved"]
        assert result.skipped == []
        assert "virtual" not in result.tree.text
        assert engine.analyze(result.tree) == []

    def test_raise_methods_skip_unfixable(self, engine):
        tree = engine.parse(MIXED_SOURCE, "Widget.cs")

        result = engine.fix_all(tree, IMPLEMENT_RAISE_METHOD)

        assert [d.event_name for d in result.applied] == ["OnOpened", "OnSaved"]
        assert [d.event_name for d in result.skipped] == ["OnClosed"]
        assert result.tree.text == wrap_in_class(
            "public event EventHandler<EventArgs> OnOpened;\n"
            "\n"
            "protected virtual EventArgs RaiseOpened(EventArgs args)\n"
            "{\n"
            "    OnOpened?.Invoke(this, args);\n"
            "    return args;\n"
            "}\n"
            "\n"
            "public virtual event Action OnClosed;\n"
            "public event EventHandler<SavedArgs> OnSaved;\n"
            "\n"
            "protected virtual SavedArgs RaiseSaved(SavedArgs args)\n"
            "{\n"
            "    OnSaved?.Invoke(this, args);\n"
            "    return args;\n"
            "}"
        )
        assert [d.event_name for d in engine.analyze(result.tree)] == ["OnClosed"]

    def test_input_tree_untouched(self, engine):
        tree = engine.parse(MIXED_SOURCE, "Widget.cs")
        engine.fix_all(tree, REMOVE_VIRTUAL)
        assert tree.text == MIXED_SOURCE

    def test_nothing_to_fix(self, engine):
        tree = engine.parse(FIELD_EVENT_FIXED, "Test0.cs")

        result = engine.fix_all(tree, REMOVE_VIRTUAL)
        assert result.applied == []
        assert result.tree is tree
