#!/usr/bin/env python3
"""
testimpact CLI - select the tests affected by a change

Usage:
    testimpact affected <root> [changed ...]   Affected tests for changed files
    testimpact tests <root>                    List discovered test files
    testimpact deps <root> <test-file>         Show what a test transitively imports
    testimpact init <root>                     Write a default .testimpact.yaml

Exit status is 0 whenever the analysis completes, even if nothing is affected.
"""

import argparse
import sys
from typing import List, Optional

from .errors import ChangeSetError, TestImpactError
from .observability import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="testimpact",
        description="testimpact: static test impact resolution for JS/TS projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    git diff --name-only main | testimpact affected .
    testimpact affected . src/utils/math.ts --format json
    testimpact affected ./web --changed changed.txt --format tsv
    testimpact deps . src/__tests__/math.test.ts
        """,
    )
    parser.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-format", choices=["console", "json"], default="console")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # affected command
    affected_parser = subparsers.add_parser("affected", help="List tests affected by changed files")
    affected_parser.add_argument("root", help="Project root")
    affected_parser.add_argument("changed", nargs="*", help="Changed paths (relative to root)")
    affected_parser.add_argument(
        "--changed",
        "-c",
        dest="changed_file",
        help="File with newline-delimited changed paths ('-' for stdin, the default)",
    )
    affected_parser.add_argument("--format", "-f", choices=["paths", "json", "tsv"], default="paths")
    affected_parser.add_argument("--workers", "-w", type=int, help="Parallel closure workers")
    affected_parser.add_argument("--no-cache", action="store_true", help="Ignore the specifier cache")

    # tests command
    tests_parser = subparsers.add_parser("tests", help="List discovered test files")
    tests_parser.add_argument("root", help="Project root")

    # deps command
    deps_parser = subparsers.add_parser("deps", help="Show the dependency closure of a test file")
    deps_parser.add_argument("root", help="Project root")
    deps_parser.add_argument("test_file", help="Test file (relative to root)")
    deps_parser.add_argument("--no-cache", action="store_true", help="Ignore the specifier cache")

    # init command
    init_parser = subparsers.add_parser("init", help="Write a default .testimpact.yaml")
    init_parser.add_argument("root", help="Project root")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_usage(sys.stderr)
        print("testimpact: error: a command is required", file=sys.stderr)
        return 2

    setup_logging(level=args.log_level, fmt=args.log_format)

    try:
        if args.command == "affected":
            return cmd_affected(args)
        elif args.command == "tests":
            return cmd_tests(args)
        elif args.command == "deps":
            return cmd_deps(args)
        elif args.command == "init":
            return cmd_init(args)
    except TestImpactError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error("internal_error", error=str(e), exc_info=True)
        print(f"Internal error: {e}", file=sys.stderr)
        return 1

    return 0


def _read_changed(args) -> List[str]:
    if args.changed:
        return list(args.changed)
    source = args.changed_file or "-"
    if source == "-":
        return sys.stdin.read().splitlines()
    try:
        with open(source, encoding="utf-8") as f:
            return f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise ChangeSetError(f"cannot read changed-file list {source}: {e}") from e


def cmd_affected(args) -> int:
    """Handle affected command."""
    from .api import TestImpactResolver
    from .views.report import render

    resolver = TestImpactResolver(
        args.root,
        use_cache=False if args.no_cache else None,
        workers=args.workers,
    )
    result = resolver.affected(_read_changed(args))
    sys.stdout.write(render(result, args.format))

    if result.diagnostics:
        print(f"{len(result.diagnostics)} file(s) skipped, see warnings above", file=sys.stderr)
    return 0


def cmd_tests(args) -> int:
    """Handle tests command."""
    from .api import TestImpactResolver

    resolver = TestImpactResolver(args.root, use_cache=False)
    for path in resolver.test_files():
        print(path)
    return 0


def cmd_deps(args) -> int:
    """Handle deps command."""
    from .api import TestImpactResolver
    from .views.report import render_closure

    resolver = TestImpactResolver(args.root, use_cache=False if args.no_cache else None)
    closure = resolver.closure_of(args.test_file)
    sys.stdout.write(render_closure(closure))
    return 0


def cmd_init(args) -> int:
    """Handle init command."""
    from pathlib import Path

    from .config import CONFIG_FILENAME, ResolverConfig, save_config

    root = Path(args.root)
    if not root.is_dir():
        print(f"Error: not a directory: {root}", file=sys.stderr)
        return 1
    if (root / CONFIG_FILENAME).exists() and not args.force:
        print(f"{CONFIG_FILENAME} already exists (use --force to overwrite)", file=sys.stderr)
        return 1

    path = save_config(root, ResolverConfig())
    print(f"Saved to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
