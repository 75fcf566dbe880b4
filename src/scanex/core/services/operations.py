from __future__ import annotations

"""
Service Facade.

Entry points shared by the CLI and programmatic callers:
1. analyze_codebase: walk, discover dependencies and render the bundle.
2. scan_dependencies: direct references of one file and their targets.
3. generate_tree: tree of the walked files without dependency expansion.
4. collect_stats: aggregate metrics over a set of files.
"""

import logging
import os
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence

from scanex.core.analysis.bundle_renderer import bundle
from scanex.core.analysis.tree_renderer import make_tree
from scanex.core.components.ignore import IgnoreMatcher
from scanex.core.languages.registry import PluginRegistry, load_plugins
from scanex.core.processing.tokenizer import count_tokens
from scanex.core.services.alias_config import load_alias_config
from scanex.core.services.discovery import discover, resolve_specifier
from scanex.core.services.project_root import locate_project_root
from scanex.core.services.walker import walk
from scanex.domain.constants import DEFAULT_EXCLUDE_PATTERN
from scanex.domain.discovery_models import (
    EVENT_MISSING_INPUT,
    AnalysisResult,
    CodebaseStats,
    DependencyEntry,
    DependencyReport,
    DiscoveryEvent,
    EventCallback,
    ResolutionContext,
)
from scanex.domain.errors import ScanexError
from scanex.domain.specifier_models import spec_kind, spec_value
from scanex.infra.fs import canonical_path, read_text, to_posix_rel, write_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RunSetup:
    """Per-invocation collaborators shared by the operations."""
    inputs: List[str]
    project_root: str
    matcher: IgnoreMatcher
    context: ResolutionContext

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def analyze_codebase(
        inputs: Optional[Sequence[str]] = None,
        exclude: Optional[str] = DEFAULT_EXCLUDE_PATTERN,
        output: Optional[str] = None,
        include_tree: bool = True,
        follow_deps: bool = True,
        on_event: Optional[EventCallback] = None,
        *,
        render: bool = True,
        with_stats: bool = False,
        registry: Optional[PluginRegistry] = None,
) -> AnalysisResult:
    """
    Discover every file related to the inputs and render the bundle.

    Missing inputs are reported and skipped; the run fails only when none
    of them exists.

    Args:
        inputs: Files or directories to analyze (defaults to the cwd).
        exclude: Regex of root-relative paths to leave out.
        output: File to write the document to instead of returning only.
        include_tree: Emit the <directory_tree> block.
        follow_deps: Expand the seeds through their references.
        on_event: Optional observer receiving diagnostics.
        render: When False only the file list is computed (dry run).
        with_stats: Attach CodebaseStats to the result.
        registry: Pre-loaded plugins (loaded from the package otherwise).

    Returns:
        AnalysisResult: Outcome with the sorted file list and the document.

    Raises:
        ScanexError: If the exclude pattern is not a valid regex.
    """
    events: List[DiscoveryEvent] = []

    def _collect(event: DiscoveryEvent) -> None:
        events.append(event)
        if on_event is not None:
            on_event(event)

    setup = _prepare(inputs, exclude, _collect)
    if setup is None:
        return AnalysisResult(ok=False, error="None of the input paths exist", events=events)

    registry = registry or load_plugins()
    root = setup.project_root

    seeds: List[str] = []
    for path in setup.inputs:
        seeds.extend(walk(path, setup.matcher, on_event=_collect))

    result = discover(seeds, registry, setup.matcher, setup.context, follow_deps=follow_deps, on_event=_collect)
    files = sorted(result.files)
    logger.info(f"{len(files)} file(s) selected, {result.scanned} scanned")

    stats = collect_stats(files, registry) if with_stats else None
    if not render:
        return AnalysisResult(ok=True, project_root=root, files=files, stats=stats, events=events)

    tree_str = make_tree(to_posix_rel(f, root) for f in files) if include_tree else ""
    document = bundle(files, root, tree_str, include_tree=include_tree)

    output_path = ""
    if output:
        output_path = os.path.abspath(output)
        ok, error = write_text(output_path, document)
        if not ok:
            msg = f"Failed to write output {output_path}: {error}"
            logger.error(msg)
            return AnalysisResult(
                ok=False, error=msg, project_root=root, files=files,
                document=document, stats=stats, events=events,
            )
        logger.info(f"Wrote {output_path} ({len(files)} files)")

    return AnalysisResult(
        ok=True, project_root=root, files=files, document=document,
        output_path=output_path, stats=stats, events=events,
    )


def scan_dependencies(
        file: str,
        exclude: Optional[str] = DEFAULT_EXCLUDE_PATTERN,
        registry: Optional[PluginRegistry] = None,
) -> DependencyReport:
    """
    Report the direct references of one file and where they resolve.

    Args:
        file: File to inspect.
        exclude: Regex of paths to leave out (validated for consistency).
        registry: Pre-loaded plugins (loaded from the package otherwise).

    Returns:
        DependencyReport: One entry per specifier, in scan order.

    Raises:
        ScanexError: If the file does not exist or the pattern is invalid.
    """
    path = os.path.abspath(file)
    if not os.path.isfile(path):
        raise ScanexError(f"File does not exist: {file}")

    setup = _prepare([path], exclude, None)
    if setup is None:
        raise ScanexError(f"File does not exist: {file}")

    registry = registry or load_plugins()
    target_file = setup.inputs[0]
    plugin = registry.plugin_for(target_file)
    if plugin is None:
        logger.info(f"No scanner for {registry.detect_extension(target_file) or os.path.basename(target_file)}")
        return DependencyReport(file=target_file, project_root=setup.project_root)

    try:
        specs = plugin.scan(read_text(target_file), target_file)
    except OSError as e:
        raise ScanexError(f"Cannot read {target_file}: {e}") from e

    ctx = setup.context.for_file(target_file)
    entries: List[DependencyEntry] = []
    for spec in specs:
        try:
            target = resolve_specifier(spec, registry, ctx)
        except Exception as e:
            logger.warning(f"Resolving '{spec_value(spec)}' failed: {e}")
            target = None
        if target and os.path.isfile(target):
            target = canonical_path(target)
        else:
            target = None
        entries.append(DependencyEntry(spec_value(spec), spec_kind(spec), target))

    return DependencyReport(
        file=target_file, project_root=setup.project_root,
        language=plugin.name, entries=entries,
    )


def render_dependency_report(report: DependencyReport) -> str:
    """
    Format a dependency report as markdown.

    Args:
        report: Result of scan_dependencies.

    Returns:
        str: Markdown with resolved and unresolved sections.
    """
    root = report.project_root
    rel_file = to_posix_rel(report.file, root)
    lines = [
        f"# Dependency Analysis for `{rel_file}`",
        "",
        f"**Project Root:** `{root}`",
        f"**File Analyzed:** `{report.file}`",
        f"**Total Dependencies:** {len(report.entries)}",
        "",
    ]

    resolved = report.resolved
    if resolved:
        lines += [f"## Resolved Dependencies ({len(resolved)})", "", "```"]
        lines += [f"{e.value} → {to_posix_rel(e.resolved, root)}" for e in resolved]
        lines += ["```", "", "**File List:**"]
        lines += [f"- `{to_posix_rel(e.resolved, root)}`" for e in resolved]
        lines.append("")

    unresolved = report.unresolved
    if unresolved:
        lines += [f"## Unresolved Dependencies ({len(unresolved)})", "", "```"]
        lines += [f"{e.value} → unresolved" for e in unresolved]
        lines += ["```", ""]

    if not report.entries:
        if report.language:
            lines += ["## No Dependencies Found", "", "This file does not reference any other file."]
        else:
            lines += ["## No Dependencies Found", "", "No scanner is available for this file type."]

    return "\n".join(lines) + "\n"


def generate_tree(input_path: str = ".", exclude: Optional[str] = DEFAULT_EXCLUDE_PATTERN) -> str:
    """
    Render the tree of files under a path, without following references.

    Args:
        input_path: File or directory to enumerate.
        exclude: Regex of root-relative paths to leave out.

    Returns:
        str: ASCII tree relative to the detected project root.

    Raises:
        ScanexError: If the path does not exist or the pattern is invalid.
    """
    setup = _prepare([input_path], exclude, None)
    if setup is None:
        raise ScanexError(f"Path does not exist: {input_path}")

    files = walk(setup.inputs[0], setup.matcher)
    return make_tree(to_posix_rel(f, setup.project_root) for f in files)


def collect_stats(files: Sequence[str], registry: PluginRegistry) -> CodebaseStats:
    """
    Compute aggregate metrics for a set of files.

    Args:
        files: Absolute file paths.
        registry: Registry used to detect each file's extension.

    Returns:
        CodebaseStats: Counts, sizes and an estimated token count.
    """
    counts: Counter = Counter()
    total_bytes = 0
    tokens = 0
    for path in files:
        counts[registry.detect_extension(path) or os.path.basename(path)] += 1
        try:
            total_bytes += os.path.getsize(path)
            tokens += count_tokens(read_text(path))
        except OSError as e:
            logger.debug(f"Stats skipped for {path}: {e}")

    return CodebaseStats(
        file_count=len(files),
        total_bytes=total_bytes,
        extension_counts=dict(counts.most_common()),
        token_count=tokens,
    )

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _prepare(
        inputs: Optional[Sequence[str]],
        exclude: Optional[str],
        on_event: Optional[EventCallback],
) -> Optional[_RunSetup]:
    """
    Normalize inputs and build the run-wide collaborators.

    Returns None when no input exists.
    """
    candidates = [os.path.abspath(p) for p in (inputs or [])] or [os.getcwd()]

    existing: List[str] = []
    for path in candidates:
        if os.path.exists(path):
            existing.append(canonical_path(path))
            continue
        logger.warning(f"Input path does not exist: {path}")
        if on_event is not None:
            on_event(DiscoveryEvent(EVENT_MISSING_INPUT, path, "path does not exist"))

    if not existing:
        logger.error("No existing input to analyze")
        return None

    first = existing[0]
    project_root = canonical_path(locate_project_root(first))

    try:
        matcher = IgnoreMatcher(exclude, project_root)
    except ValueError as e:
        raise ScanexError(f"Invalid exclude pattern '{exclude}': {e}") from e

    hint = first if os.path.isfile(first) else None
    alias = load_alias_config(project_root, hint_file=hint)
    context = ResolutionContext(
        project_root=project_root,
        alias_config=alias.data if alias else None,
        config_base_path=alias.base_path if alias else "",
    )
    return _RunSetup(existing, project_root, matcher, context)
