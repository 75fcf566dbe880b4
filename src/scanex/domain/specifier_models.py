from __future__ import annotations

"""
Import Specifier Data Models.

A specifier is the raw textual reference a language plugin extracts from
a source file (an import path, a required library, a referenced asset).
Plugins emit either a bare reference or a reference tagged with a kind so
that resolvers can route on it.
"""

from dataclasses import dataclass
from typing import Union

# -----------------------------------------------------------------------------
# SPECIFIER VARIANTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PlainRef:
    """
    Untyped reference, e.g. a JavaScript module path.

    Attributes:
        value: Raw reference text as written in the source.
    """
    value: str


@dataclass(frozen=True)
class ClassifiedRef:
    """
    Reference tagged with a plugin-specific kind.

    Attributes:
        kind: Category used by resolvers ("require_relative", "stylesheet_import", ...).
        value: Raw reference text as written in the source.
    """
    kind: str
    value: str


Specifier = Union[PlainRef, ClassifiedRef]

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def spec_value(spec: Specifier) -> str:
    """
    Normalize either specifier variant to its string value.

    Args:
        spec: Specifier emitted by a plugin.

    Returns:
        str: The reference text.
    """
    return spec.value


def spec_kind(spec: Specifier) -> str:
    """Return the kind tag of a specifier, or an empty string for plain refs."""
    if isinstance(spec, ClassifiedRef):
        return spec.kind
    return ""
