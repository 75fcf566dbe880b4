from __future__ import annotations

"""
Base Definitions for Language Plugins.

A language plugin turns the text of one file into the references it makes
to other files (scan) and, optionally, maps a reference to a file on disk
(resolve). Plugins are stateless apart from read-only parser objects and
are shared by every file of a run.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Tuple

from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef, Specifier

logger = logging.getLogger(__name__)

# Schemes that never point at a project file
EXTERNAL_PREFIXES: Tuple[str, ...] = ("http://", "https://", "data:", "//", "#", "mailto:", "tel:")


class LanguagePlugin(ABC):
    """
    Abstract base class for per-language scanners and resolvers.

    Attributes:
        name: Short identifier ("javascript", "ruby", ...).
        extensions: Owned extensions, including pseudo extensions such as
            'Dockerfile' or 'Gemfile' that match a whole file name.
        kinds: Specifier kinds this plugin resolves; empty for plugins that
            only accept plain references.
    """

    name: str = ""
    extensions: Tuple[str, ...] = ()
    kinds: Tuple[str, ...] = ()

    @abstractmethod
    def scan(self, content: str, file: str) -> List[Specifier]:
        """
        Extract references from file content.

        Must not raise on malformed input; unparsable content yields [].

        Args:
            content: Decoded file text.
            file: Absolute path of the file (used to pick dialects).

        Returns:
            List[Specifier]: References in source order, without duplicates.
        """
        pass

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        """
        Map a reference to an existing file, or None if it is not ours.

        Args:
            spec: Reference produced by any plugin.
            ctx: Read-only resolution environment.

        Returns:
            Optional[str]: Absolute path of the target file.
        """
        return None

    @property
    def has_resolver(self) -> bool:
        """True when resolve() is overridden and joins the resolver chain."""
        return type(self).resolve is not LanguagePlugin.resolve

    def owns(self, spec: Specifier) -> bool:
        """Check whether a classified reference carries one of our kinds."""
        return isinstance(spec, ClassifiedRef) and spec.kind in self.kinds

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} {list(self.extensions)}>"

# -----------------------------------------------------------------------------
# SHARED RESOLUTION HELPERS
# -----------------------------------------------------------------------------

def first_file(candidates: Iterable[str]) -> Optional[str]:
    """Return the first candidate that is an existing regular file."""
    for path in candidates:
        if os.path.isfile(path):
            return os.path.abspath(path)
    return None


def is_external(value: str) -> bool:
    """True for URLs, protocol-relative links, data URIs and fragments."""
    return value.startswith(EXTERNAL_PREFIXES)


def dedupe(specs: Sequence[Specifier]) -> List[Specifier]:
    """Drop repeated specifiers while keeping first-seen order."""
    seen = set()
    out: List[Specifier] = []
    for spec in specs:
        if spec in seen:
            continue
        seen.add(spec)
        out.append(spec)
    return out


def under_dirs(root: str, dirs: Iterable[str], rel_path: str) -> List[str]:
    """Expand rel_path against each conventional directory below root."""
    return [os.path.join(root, d, rel_path) for d in dirs]
