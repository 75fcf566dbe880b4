from __future__ import annotations

"""
Unit tests for the Python plugin (AST based).
"""

from scanex.core.languages.python import KIND_MODULE, KIND_RELATIVE, PLUGIN
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef


def test_scan_absolute_and_relative_imports() -> None:
    """TC-01: Verify module, from-import and relative import extraction in source order."""
    source = (
        "import os, json\n"
        "from .models import User\n"
        "from pkg.sub import name\n"
        "from . import sibling\n"
        "from .. import *\n"
    )

    specs = PLUGIN.scan(source, "/p/app/main.py")

    assert specs == [
        ClassifiedRef(KIND_MODULE, "os"),
        ClassifiedRef(KIND_MODULE, "json"),
        ClassifiedRef(KIND_RELATIVE, ".models"),
        ClassifiedRef(KIND_RELATIVE, ".models.User"),
        ClassifiedRef(KIND_MODULE, "pkg.sub"),
        ClassifiedRef(KIND_MODULE, "pkg.sub.name"),
        ClassifiedRef(KIND_RELATIVE, "."),
        ClassifiedRef(KIND_RELATIVE, ".sibling"),
        ClassifiedRef(KIND_RELATIVE, ".."),
    ]


def test_scan_syntax_error_yields_nothing() -> None:
    assert PLUGIN.scan("def broken(:\n", "/p/x.py") == []


def test_resolve_absolute_module(make_project) -> None:
    """TC-02: Verify lookup next to the file, at the root and under src/."""
    root = make_project({"src/lib/util.py": "", "src/lib/__init__.py": "", "app.py": ""})
    ctx = ResolutionContext(project_root=str(root), current_file=str(root / "app.py"))

    assert PLUGIN.resolve(ClassifiedRef(KIND_MODULE, "lib.util"), ctx) == str(root / "src" / "lib" / "util.py")
    assert PLUGIN.resolve(ClassifiedRef(KIND_MODULE, "lib"), ctx) == str(root / "src" / "lib" / "__init__.py")
    assert PLUGIN.resolve(ClassifiedRef(KIND_MODULE, "requests"), ctx) is None


def test_resolve_relative_levels(make_project) -> None:
    """TC-03: Verify that each extra dot climbs one package."""
    root = make_project({
        "pkg/__init__.py": "",
        "pkg/util.py": "",
        "pkg/sub/__init__.py": "",
        "pkg/sub/mod.py": "",
        "pkg/sub/helpers.py": "",
    })
    ctx = ResolutionContext(project_root=str(root), current_file=str(root / "pkg" / "sub" / "mod.py"))

    assert PLUGIN.resolve(ClassifiedRef(KIND_RELATIVE, ".helpers"), ctx) == str(root / "pkg" / "sub" / "helpers.py")
    assert PLUGIN.resolve(ClassifiedRef(KIND_RELATIVE, "..util"), ctx) == str(root / "pkg" / "util.py")
    assert PLUGIN.resolve(ClassifiedRef(KIND_RELATIVE, ".."), ctx) == str(root / "pkg" / "__init__.py")


def test_bare_relative_import_reaches_package_init(make_project) -> None:
    """TC-04: Verify that 'from . import name' also depends on the package itself."""
    root = make_project({"pkg/__init__.py": "", "pkg/mod.py": "from . import VERSION\n"})
    current = str(root / "pkg" / "mod.py")
    ctx = ResolutionContext(project_root=str(root), current_file=current)

    specs = PLUGIN.scan("from . import VERSION\n", current)

    assert specs == [ClassifiedRef(KIND_RELATIVE, "."), ClassifiedRef(KIND_RELATIVE, ".VERSION")]
    assert PLUGIN.resolve(specs[0], ctx) == str(root / "pkg" / "__init__.py")
    assert PLUGIN.resolve(specs[1], ctx) is None
