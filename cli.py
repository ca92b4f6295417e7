#!/usr/bin/env python3
"""
f90order CLI

A tool for scanning Fortran sources for module definitions and use
statements and printing the order in which the files must be compiled.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config import OUTPUT_FORMATS, Settings, load_config, merge_cli_overrides, split_dirs
from errors import BuildOrderError, CyclicDependencyError
from exporters import to_build_order, to_json, to_make_deps, to_mermaid
from scanner.builder import build_project
from scanner.discovery import discover_files


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="f90order",
        description=(
            "Scan Fortran .f90/.for source files to determine module dependencies, "
            "then output the build order of the files."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  f90order                           # Scan 'src' non-recursively, print build order
  f90order -d src,lib                # Scan two directories non-recursively
  f90order -D src -m                 # Scan 'src' recursively, print Makefile dependencies
  f90order -D src -f json -o deps.json
  f90order -D src -f mermaid --show-external
  f90order -c pyproject.toml         # Read settings from [tool.f90order]

If neither -d nor -D is specified, defaults to scanning 'src' non-recursively.
        """,
    )

    # Scanning options
    parser.add_argument(
        "-d",
        dest="dirs",
        metavar="DIRS",
        action="append",
        default=None,
        help="Comma-separated list of directories to scan non-recursively. Only one -d flag allowed.",
    )

    parser.add_argument(
        "-D",
        dest="recursive_dirs",
        metavar="DIRS",
        action="append",
        default=None,
        help="Comma-separated list of directories to scan recursively. Only one -D flag allowed.",
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Configuration file (.toml, .yaml, .yml, .json or pyproject.toml)",
    )

    # Output options
    parser.add_argument(
        "-m",
        dest="format",
        action="store_const",
        const="make",
        help="Print a Makefile dependency list instead of build order (same as -f make)",
    )

    parser.add_argument(
        "-f", "--format",
        dest="format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: order)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "--relative-to",
        type=str,
        default=None,
        help="Base path for relative path display",
    )

    # Mermaid-specific options
    parser.add_argument(
        "--orientation",
        choices=["LR", "TD", "TB", "RL", "BT"],
        default="LR",
        help="Mermaid flowchart orientation (default: LR)",
    )

    parser.add_argument(
        "--group-by-dir",
        action="store_true",
        help="Group nodes by directory in Mermaid output",
    )

    parser.add_argument(
        "--show-external",
        action="store_true",
        help="Show modules no scanned file defines in Mermaid output",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v for info, -vv for debug)",
    )

    return parser.parse_args(args)


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr at a level chosen by the -v count."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def _dirs_option(values: Optional[List[str]], flag: str) -> Optional[List[str]]:
    """
    Validate a repeatable -d/-D option and split its directory list.

    Raises:
        ValueError: If the flag was given twice or lists no directory.
    """
    if values is None:
        return None
    if len(values) > 1:
        raise ValueError(f"{flag} flag specified more than once")
    dirs = split_dirs(values[0])
    if not dirs:
        raise ValueError(f"{flag} flag requires at least one directory")
    return dirs


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)
    configure_logging(parsed.verbose)

    # Load settings
    try:
        settings = load_config(Path(parsed.config)) if parsed.config else Settings()
        merge_cli_overrides(
            settings,
            dirs=_dirs_option(parsed.dirs, "-d"),
            recursive_dirs=_dirs_option(parsed.recursive_dirs, "-D"),
            output_format=parsed.format,
        )
    except (ValueError, BuildOrderError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    base = Path(parsed.relative_to) if parsed.relative_to else None
    dirs, recursive_dirs = settings.scan_targets()
    limits = settings.limits

    # Scan and order
    try:
        paths = discover_files(
            dirs=dirs,
            recursive_dirs=recursive_dirs,
            extensions=settings.extensions,
            max_files=limits.max_files,
        )
        if not paths:
            print("No Fortran source files found to process.", file=sys.stderr)
            return 1

        project = build_project(
            paths,
            max_uses_per_file=limits.max_uses_per_file,
            max_edges_per_node=limits.max_edges_per_node,
        )
        order = project.build_order()
    except CyclicDependencyError as e:
        print("Error: cyclic dependency detected, no valid build order", file=sys.stderr)
        if e.cycle:
            print(f"  cycle: {' -> '.join(e.cycle + e.cycle[:1])}", file=sys.stderr)
        return 1
    except BuildOrderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Generate output
    if settings.output_format == "make":
        output = to_make_deps(project, order, base=base)
    elif settings.output_format == "json":
        output = to_json(project, order, base=base)
    elif settings.output_format == "mermaid":
        output = to_mermaid(
            project,
            order,
            orientation=parsed.orientation,
            base=base,
            group_by_directory=parsed.group_by_dir,
            include_external=parsed.show_external,
        )
    else:  # order (default)
        output = to_build_order(project, order, base=base)

    # Write output
    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output + "\n", encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
