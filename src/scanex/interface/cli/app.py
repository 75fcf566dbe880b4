from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: loading and merging of configuration
sources (defaults, JSON file and CLI overrides), logging bootstrap,
dispatch to the requested operation and result rendering. The bundle or
report goes to stdout; progress and summaries go to stderr so output can
be piped.
"""

import os
import sys
from typing import Any, Dict, List, Optional

from scanex.core.services.operations import (
    analyze_codebase,
    generate_tree,
    render_dependency_report,
    scan_dependencies,
)
from scanex.domain.config import get_default_config, load_config
from scanex.domain.discovery_models import AnalysisResult, CodebaseStats
from scanex.domain.errors import ScanexError
from scanex.infra.fs import to_posix_rel
from scanex.infra.logging import LoggingConfig, configure_logging, get_logger, shutdown_logging
from scanex.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on failure, 2 on invalid input, 130 if interrupted.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve configuration (defaults < JSON file < CLI overrides)
    base_conf = load_config(args.config_path)
    overrides = cli_args.args_to_overrides(args)
    conf = _merge_config(base_conf, overrides)

    # 3. Logging bootstrap (console on stderr, optional rotating file)
    logging_conf = LoggingConfig(
        level=str(conf.get("log_level") or "INFO"),
        console=True,
        console_level="WARNING" if args.quiet else None,
        log_file=conf.get("log_file"),
    )
    configure_logging(logging_conf)
    logger.debug(f"Effective configuration: {conf}")

    # 4. Dispatch
    try:
        if args.deps_file:
            return _run_deps(args.deps_file, conf)
        if args.tree_only:
            return _run_tree(conf)
        return _run_analysis(conf, dry_run=args.dry_run, stats=args.stats, quiet=args.quiet)
    except ScanexError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        logger.critical(f"Unexpected failure: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        shutdown_logging()

# -----------------------------------------------------------------------------
# MODES
# -----------------------------------------------------------------------------

def _run_analysis(conf: Dict[str, Any], dry_run: bool, stats: bool, quiet: bool) -> int:
    """Default mode: discover and bundle (or only list/measure the files)."""
    preview = dry_run or stats
    result = analyze_codebase(
        conf.get("inputs") or None,
        exclude=conf.get("exclude_pattern"),
        output=None if preview else conf.get("output_path"),
        include_tree=bool(conf.get("include_tree", True)),
        follow_deps=bool(conf.get("follow_deps", True)),
        render=not preview,
        with_stats=stats,
    )

    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 1

    if dry_run:
        if not quiet:
            _print_file_list(result)
        return 0

    if stats:
        if not quiet and result.stats is not None:
            _print_stats(result.stats)
        return 0

    if result.output_path:
        if not quiet:
            print(f"Wrote {os.path.relpath(result.output_path)} ({len(result.files)} files)", file=sys.stderr)
    else:
        sys.stdout.write(result.document)
        sys.stdout.flush()
        if not quiet:
            print(f"Processed {len(result.files)} files", file=sys.stderr)
    return 0


def _run_deps(file: str, conf: Dict[str, Any]) -> int:
    report = scan_dependencies(file, exclude=conf.get("exclude_pattern"))
    sys.stdout.write(render_dependency_report(report))
    return 0


def _run_tree(conf: Dict[str, Any]) -> int:
    inputs = conf.get("inputs") or ["."]
    for path in inputs:
        print(generate_tree(path, exclude=conf.get("exclude_pattern")))
    return 0

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only known keys are merged and None values never replace a base value.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in get_default_config():
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_file_list(result: AnalysisResult) -> None:
    print(f"\nFiles that would be scanned ({len(result.files)}):\n", file=sys.stderr)
    for path in result.files:
        print(f"  {to_posix_rel(path, result.project_root)}", file=sys.stderr)


def _print_stats(stats: CodebaseStats) -> None:
    """
    Print codebase statistics to stderr.

    Args:
        stats: Metrics of the selected files.
    """
    print("\nCodebase Statistics:\n", file=sys.stderr)
    print(f"  Total files: {stats.file_count}", file=sys.stderr)
    print(f"  Total size: {stats.total_kb:.2f} KB", file=sys.stderr)
    print(f"  Estimated tokens: {stats.token_count:,}\n", file=sys.stderr)
    print("  Languages:", file=sys.stderr)
    for ext, count in stats.extension_counts.items():
        label = ext or "(none)"
        print(f"    {label:<15} {count} file{'s' if count > 1 else ''}", file=sys.stderr)
    print("", file=sys.stderr)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
