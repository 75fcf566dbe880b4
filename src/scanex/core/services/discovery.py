from __future__ import annotations

"""
Dependency Discovery Engine.

Breadth-first traversal over file references. Each dequeued file is
scanned by the plugin owning its extension; every reference is resolved
(relative path probe first, then the plugin resolver chain) and newly
found files are queued. A file enters the queue at most once, so a run
always terminates and never scans the same file twice.
"""

import logging
import os
from typing import Iterable, List, Optional

from scanex.core.components.ignore import IgnoreMatcher
from scanex.core.languages.registry import PluginRegistry
from scanex.domain.discovery_models import (
    EVENT_DISCOVERED,
    EVENT_EXCLUDED,
    EVENT_RESOLVE_FAILED,
    EVENT_SCAN_FAILED,
    EVENT_SKIPPED_DIRECTORY,
    EVENT_UNREADABLE_FILE,
    DiscoveryEvent,
    DiscoveryResult,
    EventCallback,
    ResolutionContext,
)
from scanex.domain.specifier_models import Specifier, spec_value
from scanex.infra.fs import canonical_path, read_text

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def discover(
        seed_files: Iterable[str],
        registry: PluginRegistry,
        matcher: IgnoreMatcher,
        context: ResolutionContext,
        follow_deps: bool = True,
        on_event: Optional[EventCallback] = None,
) -> DiscoveryResult:
    """
    Expand seed files into the set of files they transitively reference.

    Args:
        seed_files: Walker output across all inputs.
        registry: Loaded language plugins.
        matcher: Global exclusion applied to resolved targets.
        context: Run-wide resolution context (current_file is filled per file).
        follow_deps: When False, only the seeds are returned.
        on_event: Optional observer receiving diagnostics.

    Returns:
        DiscoveryResult: Seeds plus discovered files, in queue order.
    """
    result = DiscoveryResult()

    def _emit(event: DiscoveryEvent) -> None:
        result.events.append(event)
        if on_event is not None:
            on_event(event)

    queue: List[str] = []
    queued = set()
    for seed in seed_files:
        path = canonical_path(seed)
        if path in queued:
            continue
        queued.add(path)
        queue.append(path)
        if registry.is_recognized(path):
            result.visited.add(path)

    if not follow_deps:
        result.files = queue
        return result

    # The queue grows while being consumed
    index = 0
    while index < len(queue):
        current = queue[index]
        index += 1

        plugin = registry.plugin_for(current)
        if plugin is None:
            continue

        try:
            content = read_text(current)
        except OSError as e:
            logger.warning(f"Cannot read {current}: {e}")
            _emit(DiscoveryEvent(EVENT_UNREADABLE_FILE, current, str(e)))
            continue

        try:
            specs = plugin.scan(content, current)
        except Exception as e:
            logger.warning(f"Scan failed for {current} ({plugin.name}): {e}")
            _emit(DiscoveryEvent(EVENT_SCAN_FAILED, current, str(e)))
            continue
        result.scanned += 1

        file_ctx = context.for_file(current)
        for spec in specs:
            try:
                target = resolve_specifier(spec, registry, file_ctx)
            except Exception as e:
                logger.warning(f"Resolving '{spec_value(spec)}' from {current} failed: {e}")
                _emit(DiscoveryEvent(EVENT_RESOLVE_FAILED, current, spec_value(spec)))
                continue

            if not target:
                continue

            target = canonical_path(target)
            if target in queued:
                continue
            if matcher.is_excluded(target):
                _emit(DiscoveryEvent(EVENT_EXCLUDED, target, spec_value(spec)))
                continue
            if not os.path.isfile(target):
                logger.warning(f"Skipping non-file target: {matcher.relative(target)}")
                _emit(DiscoveryEvent(EVENT_SKIPPED_DIRECTORY, target, spec_value(spec)))
                continue

            queued.add(target)
            result.visited.add(target)
            queue.append(target)
            logger.info(f"+ {matcher.relative(target)}")
            _emit(DiscoveryEvent(EVENT_DISCOVERED, target, spec_value(spec)))

    result.files = queue
    logger.debug(f"Discovery finished: {len(queue)} file(s), {result.scanned} scanned")
    return result


def resolve_specifier(
        spec: Specifier,
        registry: PluginRegistry,
        context: ResolutionContext,
) -> Optional[str]:
    """
    Resolve one reference made by context.current_file.

    Relative values ('./x', '../x') are probed next to the current file
    with each registered extension in registry order. Anything else, or a
    relative value the probe cannot place, goes through the resolver chain
    in registration order; the first non-None answer wins.

    Args:
        spec: Reference emitted by a plugin.
        registry: Loaded language plugins.
        context: Context targeted at the referencing file.

    Returns:
        Optional[str]: Absolute path of the target, or None if unresolved.
    """
    value = spec_value(spec)
    if not value:
        return None

    if _is_relative(value) and context.current_file:
        base = os.path.normpath(os.path.join(os.path.dirname(context.current_file), value))
        for ext in registry.probe_extensions:
            candidate = base if base.endswith(ext) else base + ext
            if os.path.isfile(candidate):
                return candidate

    for plugin in registry.resolvers:
        target = plugin.resolve(spec, context)
        if target:
            return target
    return None


def _is_relative(value: str) -> bool:
    return value in (".", "..") or value.startswith(("./", "../"))
