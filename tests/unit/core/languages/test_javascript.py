from __future__ import annotations

"""
Unit tests for the JavaScript / TypeScript plugin.

Verifies:
1. Extraction of ESM, CommonJS and dynamic import sources.
2. Dialect selection for .ts and .tsx sources.
3. Alias, baseUrl and directory-index resolution.
"""

from scanex.core.languages.javascript import PLUGIN
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef, PlainRef


def _values(specs):
    return {s.value for s in specs}


def test_scan_collects_every_import_form() -> None:
    """TC-01: Verify import, export-from, require and import() sources."""
    source = """
    import React from 'react';
    import { a } from "./a";
    export { b } from './b';
    export * from './all';
    const c = require('./c');
    const lazy = () => import('./d');
    notRequire('./e');
    """
    specs = PLUGIN.scan(source, "/p/src/index.js")

    assert all(isinstance(s, PlainRef) for s in specs)
    assert _values(specs) == {"react", "./a", "./b", "./all", "./c", "./d"}


def test_scan_typescript_and_tsx() -> None:
    """TC-02: Verify that type-annotated sources parse with their own grammar."""
    ts = "import type { User } from './types';\nconst n: number = 1;\nexport const f = (x: User): void => {};\n"
    tsx = "import Button from '@/components/Button';\nexport const App = (): JSX.Element => <Button label={'x'} />;\n"

    assert _values(PLUGIN.scan(ts, "/p/a.ts")) == {"./types"}
    assert _values(PLUGIN.scan(tsx, "/p/App.tsx")) == {"@/components/Button"}


def test_scan_deduplicates_and_handles_empty() -> None:
    assert PLUGIN.scan("", "/p/a.js") == []
    specs = PLUGIN.scan("import './x';\nrequire('./x');\n", "/p/a.js")
    assert [s.value for s in specs] == ["./x"]


def test_resolve_directory_index(make_project) -> None:
    """TC-03: Verify that './lib' resolves to lib/index.*."""
    root = make_project({"main.js": "", "lib/index.ts": ""})
    ctx = ResolutionContext(project_root=str(root), current_file=str(root / "main.js"))

    assert PLUGIN.resolve(PlainRef("./lib"), ctx) == str(root / "lib" / "index.ts")


def test_resolve_paths_alias(make_project) -> None:
    """TC-04: Verify wildcard aliases anchored at baseUrl."""
    root = make_project({"src/components/Button.tsx": "", "src/App.tsx": ""})
    config = {"compilerOptions": {"baseUrl": ".", "paths": {"@/*": ["src/*"]}}}
    ctx = ResolutionContext(
        project_root=str(root),
        alias_config=config,
        config_base_path=str(root),
        current_file=str(root / "src" / "App.tsx"),
    )

    assert PLUGIN.resolve(PlainRef("@/components/Button"), ctx) == str(root / "src" / "components" / "Button.tsx")


def test_resolve_exact_alias_and_base_url(make_project) -> None:
    root = make_project({"web/src/config/index.js": "", "web/src/utils/date.js": "", "web/src/main.js": ""})
    config = {"compilerOptions": {"baseUrl": "src", "paths": {"config": ["config/index.js"]}}}
    ctx = ResolutionContext(
        project_root=str(root),
        alias_config=config,
        config_base_path=str(root / "web"),
        current_file=str(root / "web" / "src" / "main.js"),
    )

    assert PLUGIN.resolve(PlainRef("config"), ctx) == str(root / "web" / "src" / "config" / "index.js")
    assert PLUGIN.resolve(PlainRef("utils/date"), ctx) == str(root / "web" / "src" / "utils" / "date.js")


def test_resolve_without_config_leaves_packages_alone(make_project) -> None:
    root = make_project({"main.js": ""})
    ctx = ResolutionContext(project_root=str(root), current_file=str(root / "main.js"))

    assert PLUGIN.resolve(PlainRef("react"), ctx) is None
    assert PLUGIN.resolve(ClassifiedRef("module", "./x"), ctx) is None
