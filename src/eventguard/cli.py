"""Command-line interface for eventguard."""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .config import load_config
from .errors import EventguardError
from .fixes import IMPLEMENT_RAISE_METHOD, REMOVE_VIRTUAL
from .host import Engine
from .models import Diagnostic
from .syntax.registry import detect_language

logger = logging.getLogger(__name__)

ACTIONS = {
    "remove": REMOVE_VIRTUAL,
    "raise": IMPLEMENT_RAISE_METHOD,
}


def get_engine(args: argparse.Namespace) -> Engine:
    """Build an Engine from the --config option / environment."""
    config = load_config(args.config)
    logger.debug("Config: %s", json.dumps(config.to_dict()))
    return Engine(config)


def format_diagnostic(path: str, diagnostic: Diagnostic) -> str:
    span = diagnostic.span
    return (
        f"{path}:{span.line}:{span.column}: {diagnostic.severity} "
        f"{diagnostic.id}: {diagnostic.message}"
    )


def collect_sources(paths: list[str]) -> list[Path]:
    """Expand directories into the supported source files they contain."""
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if candidate.is_file() and _is_supported(candidate):
                    files.append(candidate)
        else:
            files.append(path)
    return files


def _is_supported(path: Path) -> bool:
    try:
        detect_language(str(path))
    except EventguardError:
        return False
    return True


def cmd_check(args: argparse.Namespace) -> int:
    """Report virtual events."""
    try:
        engine = get_engine(args)
        files = collect_sources(args.paths)
        missing = [p for p in files if not p.exists()]
        if missing:
            print(f"Error: File not found: {missing[0]}", file=sys.stderr)
            return 1

        results = engine.analyze_paths(files, jobs=args.jobs)
        total = sum(len(d) for d in results.values())

        if args.json:
            data = {
                "files": [
                    {
                        "path": str(path),
                        "diagnostics": [d.to_dict() for d in diagnostics],
                    }
                    for path, diagnostics in results.items()
                ],
                "count": total,
            }
            print(json.dumps(data, indent=2))
        else:
            for path, diagnostics in results.items():
                for diagnostic in diagnostics:
                    print(format_diagnostic(str(path), diagnostic))
            print(f"{total} warning(s) in {len(results)} file(s)")

        if args.fail_on_warning and total:
            return 2
        return 0

    except EventguardError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_fix(args: argparse.Namespace) -> int:
    """Apply a fix to one diagnostic, or to all of them in a file."""
    try:
        engine = get_engine(args)
        path = Path(args.path)
        if not path.exists():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return 1

        tree = engine.parse(path.read_bytes(), str(path))
        equivalence_key = ACTIONS[args.action]

        if args.at:
            diagnostic = _diagnostic_at(engine.analyze(tree), args.at)
            if diagnostic is None:
                print(f"Error: No virtual event at {path}:{args.at}", file=sys.stderr)
                return 1
            new_tree = engine.apply_fix(tree, diagnostic, equivalence_key)
            fixed, skipped = [diagnostic], []
        else:
            result = engine.fix_all(tree, equivalence_key)
            new_tree, fixed, skipped = result.tree, result.applied, result.skipped

        for diagnostic in skipped:
            print(
                f"Skipped: {format_diagnostic(str(path), diagnostic)} "
                f"('{args.action}' not available)",
                file=sys.stderr,
            )

        if args.write:
            if fixed:
                path.write_bytes(new_tree.source)
            print(f"Fixed {len(fixed)} event(s) in {path}")
        else:
            # Bytes as read, so files in legacy encodings come back unchanged
            sys.stdout.flush()
            sys.stdout.buffer.write(new_tree.source)
            sys.stdout.buffer.flush()
        return 0

    except EventguardError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _diagnostic_at(diagnostics: list[Diagnostic], location: str) -> Diagnostic | None:
    """Find the diagnostic at 'LINE' or 'LINE:COL'."""
    line_str, _, col_str = location.partition(":")
    try:
        line = int(line_str)
        column = int(col_str) if col_str else None
    except ValueError:
        return None
    for diagnostic in diagnostics:
        if diagnostic.span.line != line:
            continue
        if column is None or diagnostic.span.column == column:
            return diagnostic
    return None


def cmd_rules(args: argparse.Namespace) -> int:
    """List the diagnostics this tool can report."""
    try:
        engine = get_engine(args)
        descriptors = engine.rule.supported_diagnostics

        if args.json:
            print(json.dumps([d.to_dict() for d in descriptors], indent=2))
            return 0

        for d in descriptors:
            state = "disabled" if d.id in engine.config.disabled else d.severity
            print(f"  {d.id:<38} {d.kind:<9} {state}")
            print(f"  {'':<38} {d.title}")
        return 0

    except EventguardError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the API server."""
    try:
        import uvicorn

        print("Starting eventguard API server...")
        print(f"API docs: http://{args.host}:{args.port}/docs")
        print()

        # When reload is enabled, uvicorn requires the app as an import string
        app_target = "eventguard.api:app" if args.reload else None
        if app_target is None:
            from .api import app
            app_target = app

        uvicorn.run(
            app_target,
            host=args.host,
            port=args.port,
            reload=args.reload,
        )
        return 0

    except ImportError:
        print("Error: uvicorn not installed. Run: pip install uvicorn", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="eventguard",
        description="Find virtual events in C# code and rewrite them.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", help="Path to eventguard.json (default: $EVENTGUARD_CONFIG or ./eventguard.json)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # check
    check_parser = subparsers.add_parser("check", help="Report virtual events")
    check_parser.add_argument("paths", nargs="+", help="Files or directories to analyze")
    check_parser.add_argument("--json", action="store_true", help="Output as JSON")
    check_parser.add_argument(
        "--fail-on-warning", action="store_true",
        help="Exit with code 2 if any virtual event is found"
    )
    check_parser.add_argument(
        "--jobs", "-j", type=int, default=1, help="Files to analyze in parallel (default: 1)"
    )

    # fix
    fix_parser = subparsers.add_parser("fix", help="Rewrite virtual events in a file")
    fix_parser.add_argument("path", help="File to fix")
    fix_parser.add_argument(
        "--action", "-a", choices=sorted(ACTIONS), default="remove",
        help="'remove' drops the virtual keyword; 'raise' also adds a "
        "protected virtual Raise method (default: remove)"
    )
    fix_parser.add_argument(
        "--at", help="Only fix the event reported at LINE or LINE:COL (default: all)"
    )
    fix_parser.add_argument(
        "--write", "-w", action="store_true",
        help="Write the result back to the file instead of printing it"
    )

    # rules
    rules_parser = subparsers.add_parser("rules", help="List supported diagnostics")
    rules_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--port", "-p", type=int, default=8000, help="Port to bind to (default: 8000)"
    )
    serve_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "check": cmd_check,
        "fix": cmd_fix,
        "rules": cmd_rules,
        "serve": cmd_serve,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
