from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from scanex.domain.constants import APP_VERSION

DESCRIPTION = (
    "Extract and bundle related code from files or directories into a single "
    "markdown document. References between files are followed across "
    "languages and .gitignore rules are respected."
)

EPILOG = """examples:
  scanex                              analyze the current directory
  scanex src/main.js                  a file and everything it references
  scanex src/ lib/utils.js -o out.md  several inputs, written to a file
  scanex --dry-run src/               list the files that would be bundled
  scanex --deps src/app.ts            direct dependencies of one file
"""

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the scanex CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="scanex",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    # --- Inputs ---
    p.add_argument(
        "paths",
        nargs="*",
        help="Files or directories to analyze (default: current directory).",
    )
    p.add_argument(
        "-i", "--input",
        dest="input_csv",
        default=None,
        help="Comma-separated files or directories (alternative to positional paths).",
    )

    # --- Discovery ---
    p.add_argument(
        "-e", "--exclude",
        dest="exclude_pattern",
        default=None,
        help='Regex of root-relative paths to ignore (default: "node_modules|test").',
    )
    p.add_argument(
        "--no-deps",
        action="store_true",
        help="Do not follow references; bundle the given files only.",
    )

    # --- Output ---
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Write the document to this file instead of stdout.",
    )
    p.add_argument(
        "--no-tree",
        action="store_true",
        help="Omit the directory tree block.",
    )

    # --- Alternative Modes ---
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be bundled and exit.",
    )
    p.add_argument(
        "--stats",
        action="store_true",
        help="Show file count, size, languages and token estimate, then exit.",
    )
    p.add_argument(
        "--deps",
        dest="deps_file",
        default=None,
        metavar="FILE",
        help="Report the direct dependencies of a single file.",
    )
    p.add_argument(
        "--tree-only",
        action="store_true",
        help="Print the directory tree of the inputs without following references.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="JSON configuration file (default: ./.scanex.json when present).",
    )
    p.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress messages.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Positional paths take precedence over --input.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.paths:
        overrides["inputs"] = list(args.paths)
    elif args.input_csv:
        overrides["inputs"] = _split_csv(args.input_csv)

    overrides["output_path"] = args.output_path
    overrides["exclude_pattern"] = args.exclude_pattern

    if args.no_deps:
        overrides["follow_deps"] = False
    if args.no_tree:
        overrides["include_tree"] = False
    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
