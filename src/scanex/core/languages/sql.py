from __future__ import annotations

"""
SQL Script Plugin.

Recognizes the script-inclusion commands of the common SQL clients
(psql \\i, MySQL SOURCE, SQLite .read, Oracle @/@@, sqlcmd -i) and file
references written as comment directives or path assignments.
"""

import os
import re
from typing import List, Optional

from scanex.core.languages.base import LanguagePlugin, dedupe, first_file, under_dirs
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef, Specifier

KIND_INCLUDE = "sql_include"
KIND_DDL = "ddl_script"
KIND_DML = "dml_script"
KIND_MIGRATION = "migration_script"

SQL_EXTENSIONS = (".sql", ".ddl", ".dml", ".pgsql", ".mysql", ".sqlite", ".psql")

SQL_DIRS = (
    "sql", "database", "db", "migrations", "scripts", "schema", "queries",
    "procedures", "functions", "views", "triggers", "seeds", "fixtures", "data",
    "sql/migrations", "db/migrate", "db/seeds", "database/migrations", "database/seeds",
    "src/sql", "src/database", "resources/sql", "assets/sql",
)

_FLAGS = re.IGNORECASE | re.MULTILINE
_PATTERNS = [
    # psql
    re.compile(r"""\\i\s+(['"]?)([^'";\s]+)\1""", _FLAGS),
    re.compile(r"""\\include\s+(['"]?)([^'";\s]+)\1""", _FLAGS),
    # MySQL
    re.compile(r"""(?:^|\s)SOURCE\s+(['"]?)([^'";\s]+)\1""", _FLAGS),
    # SQLite
    re.compile(r"""\.read\s+(['"]?)([^'";\s]+)\1""", _FLAGS),
    # Comment directives
    re.compile(r"""--\s*@?(?:include|import|source|file):\s*([^\s;]+)""", _FLAGS),
    re.compile(r"""/\*\s*@?(?:include|import|source|file):\s*([^\s*]+)\s*\*/""", _FLAGS),
    # SQL Server sqlcmd/osql
    re.compile(r"""EXEC(?:UTE)?\s+(?:xp_cmdshell\s+)?['"]?(?:sqlcmd|osql).*?-i\s+(['"]?)([^'";\s]+)\1""", _FLAGS),
    # Oracle
    re.compile(r"""(?:^|\s)@@?\s*(['"]?)([^'";\s]+)\1""", _FLAGS),
    # Path assignments
    re.compile(r"""(?:file|path|script)\s*[:=]\s*['"]([^'"]+\.sql)['"]""", _FLAGS),
]

_MIGRATION_RE = re.compile(r"migration|seed|fixture", re.IGNORECASE)


class SqlPlugin(LanguagePlugin):
    name = "sql"
    extensions = SQL_EXTENSIONS
    kinds = (KIND_INCLUDE, KIND_DDL, KIND_DML, KIND_MIGRATION)

    def scan(self, content: str, file: str) -> List[Specifier]:
        if not content.strip():
            return []

        refs: List[Specifier] = []
        for pattern in _PATTERNS:
            for match in pattern.finditer(content):
                value = next((g for g in reversed(match.groups()) if g), "").strip()
                if not value or value.startswith(("http://", "https://", "//")):
                    continue
                refs.append(ClassifiedRef(_classify(value), value))
        return dedupe(refs)

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        if not self.owns(spec) or not ctx.current_file:
            return None
        value = spec.value
        root = ctx.project_root

        names = [value] if "." in os.path.basename(value) else [value + ext for ext in SQL_EXTENSIONS]

        if value.startswith("/"):
            return first_file(os.path.join(root, n.lstrip("/")) for n in names)

        current_dir = os.path.dirname(ctx.current_file)
        candidates = []
        for name in names:
            candidates.append(os.path.join(current_dir, name))
            candidates.append(os.path.join(root, name))
            candidates.extend(under_dirs(root, SQL_DIRS, name))
        return first_file(candidates)


def _classify(value: str) -> str:
    lower = value.lower()
    if lower.endswith(".ddl"):
        return KIND_DDL
    if lower.endswith(".dml"):
        return KIND_DML
    if _MIGRATION_RE.search(lower):
        return KIND_MIGRATION
    return KIND_INCLUDE


PLUGIN = SqlPlugin()
