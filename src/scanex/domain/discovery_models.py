from __future__ import annotations

"""
Discovery Domain Data Models.

Defines the structures exchanged between the discovery engine and the
interface layers: the resolution context handed to plugin resolvers, the
structured diagnostic events emitted during a run, and the result objects
of the public operations.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Set

# -----------------------------------------------------------------------------
# RESOLUTION CONTEXT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ResolutionContext:
    """
    Read-only environment passed to every plugin resolver.

    Attributes:
        project_root: Absolute path of the detected project root.
        alias_config: Parsed tsconfig/jsconfig document, if any.
        config_base_path: Directory the alias configuration was loaded from.
        current_file: Absolute path of the file whose specifier is being resolved.
    """
    project_root: str
    alias_config: Optional[Dict[str, Any]] = None
    config_base_path: str = ""
    current_file: str = ""

    def for_file(self, path: str) -> ResolutionContext:
        """Return a copy of the context targeted at another scanned file."""
        return replace(self, current_file=path)

    @property
    def alias_base(self) -> str:
        """Directory alias paths are anchored to."""
        return self.config_base_path or self.project_root

# -----------------------------------------------------------------------------
# DIAGNOSTIC EVENTS
# -----------------------------------------------------------------------------

EVENT_DISCOVERED = "discovered"
EVENT_MISSING_INPUT = "missing_input"
EVENT_UNREADABLE_DIRECTORY = "unreadable_directory"
EVENT_UNREADABLE_FILE = "unreadable_file"
EVENT_SCAN_FAILED = "scan_failed"
EVENT_RESOLVE_FAILED = "resolve_failed"
EVENT_SKIPPED_DIRECTORY = "skipped_directory"
EVENT_EXCLUDED = "excluded"


@dataclass(frozen=True)
class DiscoveryEvent:
    """
    Structured diagnostic emitted by the walker and the discovery engine.

    Attributes:
        kind: One of the EVENT_* identifiers.
        path: Filesystem path the event refers to.
        detail: Free-form context (error message, originating specifier).
    """
    kind: str
    path: str
    detail: str = ""


EventCallback = Callable[[DiscoveryEvent], None]

# -----------------------------------------------------------------------------
# RESULT MODELS
# -----------------------------------------------------------------------------

@dataclass
class DiscoveryResult:
    """
    Outcome of a breadth-first discovery run.

    Attributes:
        files: Every seed plus every discovered file, in processing order.
        visited: Files that were (or would be) scanned.
        scanned: Number of files actually handed to a plugin scanner.
        events: Diagnostics collected during the run.
    """
    files: List[str] = field(default_factory=list)
    visited: Set[str] = field(default_factory=set)
    scanned: int = 0
    events: List[DiscoveryEvent] = field(default_factory=list)


@dataclass(frozen=True)
class DependencyEntry:
    """Single specifier of a file together with its resolution outcome."""
    value: str
    kind: str
    resolved: Optional[str] = None


@dataclass(frozen=True)
class DependencyReport:
    """
    Direct dependencies of one file.

    Attributes:
        file: Absolute path of the inspected file.
        project_root: Root used for resolution and relative display.
        language: Name of the plugin that scanned the file ("" if unsupported).
        entries: Specifiers in scan order.
    """
    file: str
    project_root: str
    language: str = ""
    entries: List[DependencyEntry] = field(default_factory=list)

    @property
    def resolved(self) -> List[DependencyEntry]:
        return [e for e in self.entries if e.resolved]

    @property
    def unresolved(self) -> List[DependencyEntry]:
        return [e for e in self.entries if not e.resolved]


@dataclass(frozen=True)
class CodebaseStats:
    """
    Aggregate metrics over a set of files.

    Attributes:
        file_count: Number of files.
        total_bytes: Combined on-disk size.
        extension_counts: Files per detected extension, most frequent first.
        token_count: Sum of the estimated token counts of the individual files.
    """
    file_count: int
    total_bytes: int
    extension_counts: Dict[str, int] = field(default_factory=dict)
    token_count: int = 0

    @property
    def total_kb(self) -> float:
        return self.total_bytes / 1024


@dataclass(frozen=True)
class AnalysisResult:
    """
    Unified result of an analyze run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        project_root: Detected project root.
        files: Sorted absolute paths of every included file.
        document: Rendered bundle (empty on failure).
        output_path: File the document was written to, if any.
        stats: Optional aggregate metrics.
        events: Diagnostics collected during the run.
    """
    ok: bool
    error: str = ""
    project_root: str = ""
    files: List[str] = field(default_factory=list)
    document: str = ""
    output_path: str = ""
    stats: Optional[CodebaseStats] = None
    events: List[DiscoveryEvent] = field(default_factory=list)
