"""Host-side traversal, dispatch and fix replay."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from .config import AnalyzerConfig
from .errors import AnalysisCancelledError, FixNotAvailableError
from .fixes import FixProvider
from .models import CodeAction, Diagnostic, FixAllResult
from .rule import VirtualEventRule
from .syntax.registry import detect_language
from .syntax.tree import EVENT_DECLARATION_TYPES, SyntaxTree

logger = logging.getLogger(__name__)


class Engine:
    """Runs the virtual event rule over files and applies its fixes."""

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()
        self.rule = VirtualEventRule(self.config)
        self.fixer = FixProvider(self.config)

    def parse(self, source: str | bytes, path: str = "<memory>.cs") -> SyntaxTree:
        """Parse a document.

        Raises:
            UnsupportedLanguageError: If `path` has no registered parser.
        """
        language = detect_language(path)
        tree = SyntaxTree.parse(source, path=path, language=language)
        if tree.has_errors:
            logger.debug("%s has syntax errors; analyzing anyway", path)
        return tree

    def analyze(
        self, tree: SyntaxTree, cancelled: Callable[[], bool] | None = None
    ) -> list[Diagnostic]:
        """Dispatch every event declaration in document order to the rule.

        `cancelled` is polled before each declaration.

        Raises:
            AnalysisCancelledError: If `cancelled()` returns True.
        """
        diagnostics: list[Diagnostic] = []
        analyzed = 0
        for node in tree.walk():
            if node.type not in EVENT_DECLARATION_TYPES:
                continue
            if cancelled is not None and cancelled():
                raise AnalysisCancelledError(analyzed)
            diagnostics.extend(self.rule.analyze_node(tree, node))
            analyzed += 1
        return diagnostics

    def analyze_source(self, source: str | bytes, path: str = "<memory>.cs") -> list[Diagnostic]:
        return self.analyze(self.parse(source, path))

    def analyze_paths(
        self, paths: list[Path], jobs: int = 1
    ) -> dict[Path, list[Diagnostic]]:
        """Analyze files, optionally on several threads."""

        def run(path: Path) -> list[Diagnostic]:
            logger.info("Analyzing %s", path)
            return self.analyze_source(path.read_bytes(), str(path))

        if jobs <= 1:
            return {path: run(path) for path in paths}
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            return dict(zip(paths, pool.map(run, paths)))

    def fixes(self, diagnostic: Diagnostic, tree: SyntaxTree) -> list[CodeAction]:
        return self.fixer.list_fixes(diagnostic, tree)

    def apply_fix(
        self, tree: SyntaxTree, diagnostic: Diagnostic, equivalence_key: str
    ) -> SyntaxTree:
        """Apply one action to one diagnostic.

        Raises:
            FixNotAvailableError: If that action isn't offered for the diagnostic.
        """
        for action in self.fixes(diagnostic, tree):
            if action.equivalence_key == equivalence_key:
                logger.debug("Applying %s to %s", equivalence_key, diagnostic.event_name)
                return action.apply(tree)
        raise FixNotAvailableError(diagnostic.id, equivalence_key)

    def fix_all(self, tree: SyntaxTree, equivalence_key: str) -> FixAllResult:
        """Replay one action over every diagnostic in the file.

        Diagnostics are fixed from the end of the file backwards, so each edit
        only touches text after the spans still waiting to be fixed.
        Diagnostics without that action are skipped.
        """
        result = FixAllResult(tree=tree)
        diagnostics = sorted(
            self.analyze(tree), key=lambda d: d.span.start_byte, reverse=True
        )
        for diagnostic in diagnostics:
            try:
                result.tree = self.apply_fix(result.tree, diagnostic, equivalence_key)
            except FixNotAvailableError as e:
                logger.debug("Skipping %s: %s", diagnostic.event_name, e)
                result.skipped.append(diagnostic)
                continue
            result.applied.append(diagnostic)
        result.applied.reverse()
        result.skipped.reverse()
        return result
