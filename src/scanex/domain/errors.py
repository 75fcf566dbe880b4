from __future__ import annotations

"""
Domain Exceptions.

Raised by the service layer for failures the caller must report to the
user; the discovery core itself never raises for missing or unparsable
files.
"""


class ScanexError(Exception):
    """User-facing failure of a service operation (bad pattern, missing file)."""
