from __future__ import annotations

"""
Unit tests for the Bundle Renderer.

Verifies the document layout, fence language labels and the handling of
binary and unreadable files.
"""

import pytest

from scanex.core.analysis.bundle_renderer import bundle, fence_language
from scanex.domain.constants import BINARY_PLACEHOLDER


def test_bundle_layout_with_tree(make_project) -> None:
    """TC-01: Verify the tree block, file headers and trailing whitespace trim."""
    root = make_project({"src/a.js": "export const a = 1;\n\n\n", "b.py": "x = 1"})
    files = [str(root / "b.py"), str(root / "src" / "a.js")]

    doc = bundle(files, str(root), ".\n└── b.py")

    assert doc == (
        "<directory_tree>\n.\n└── b.py\n</directory_tree>\n\n"
        "<codebase>\n"
        "// b.py\n```python\nx = 1\n```\n\n"
        "// src/a.js\n```javascript\nexport const a = 1;\n```\n\n"
        "</codebase>\n"
    )


def test_bundle_without_tree(make_project) -> None:
    root = make_project({"a.css": "body {}"})
    doc = bundle([str(root / "a.css")], str(root), "ignored", include_tree=False)

    assert doc.startswith("<codebase>\n")
    assert "<directory_tree>" not in doc


def test_bundle_binary_and_missing_files(make_project) -> None:
    """TC-02: Verify that binary content is replaced and missing files are skipped."""
    root = make_project({})
    (root / "logo.png").write_bytes(b"\x89PNG\x00\x00data")

    doc = bundle([str(root / "logo.png"), str(root / "gone.js")], str(root), "")

    assert f"// logo.png\n```png\n{BINARY_PLACEHOLDER}\n```" in doc
    assert "gone.js" not in doc


@pytest.mark.parametrize("path, expected", [
    ("app/views/users/show.html.erb", "erb"),
    ("src/App.tsx", "tsx"),
    ("src/index.ts", "typescript"),
    ("lib/x.mjs", "javascript"),
    ("styles/site.scss", "scss"),
    ("config/db.yml", "yaml"),
    ("deploy.sh", "bash"),
    ("Dockerfile", "dockerfile"),
    ("Dockerfile.prod", "dockerfile"),
    ("main.go", "go"),
    ("LICENSE", ""),
])
def test_fence_language(path: str, expected: str) -> None:
    assert fence_language(path) == expected
