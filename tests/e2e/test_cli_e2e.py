from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess. These tests validate argument parsing, exit codes,
stream output (stdout/stderr), and file system side effects.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "scanex" / "main.py"


def run_cli(args: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH to ensure the package
    is resolvable without being installed in site-packages.

    Args:
        args: List of command line arguments (excluding 'python' and script path).
        cwd: Optional working directory for the subprocess.

    Returns:
        subprocess.CompletedProcess: The result object containing returncode, stdout, and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Create a small repository for E2E runs.

    Structure:
    /proj
      .git/
      src/
        main.js   (imports ./util)
        util.js
        lonely.js
      docs/
        guide.md
    """
    root = tmp_path / "proj"
    (root / ".git").mkdir(parents=True)
    (root / "src").mkdir()
    (root / "docs").mkdir()
    (root / "src" / "main.js").write_text("import { util } from './util';\nutil();\n", encoding="utf-8")
    (root / "src" / "util.js").write_text("export function util() {}\n", encoding="utf-8")
    (root / "src" / "lonely.js").write_text("export const x = 1;\n", encoding="utf-8")
    (root / "docs" / "guide.md").write_text("# Guide\n", encoding="utf-8")
    return root


def test_version_flag() -> None:
    """TC-01: Verify that --version prints the program name and exits cleanly."""
    result = run_cli(["--version"])

    assert result.returncode == 0
    assert "scanex" in result.stdout


def test_bundle_to_stdout(sample_project: Path) -> None:
    """TC-02: Verify the bundle goes to stdout and the summary to stderr."""
    result = run_cli(["src/main.js"], cwd=sample_project)

    assert result.returncode == 0, result.stderr
    assert result.stdout.startswith("<directory_tree>\n.\n└── src\n")
    assert "// src/main.js\n```javascript" in result.stdout
    assert "// src/util.js\n```javascript" in result.stdout
    assert "lonely.js" not in result.stdout
    assert result.stdout.rstrip().endswith("</codebase>")
    assert "Processed 2 files" in result.stderr


def test_bundle_to_output_file(sample_project: Path) -> None:
    """TC-03: Verify -o writes the document and reports it."""
    result = run_cli(["src", "-o", "out/bundle.md", "--no-tree"], cwd=sample_project)

    assert result.returncode == 0, result.stderr
    assert result.stdout == ""
    output = sample_project / "out" / "bundle.md"
    assert output.exists()
    content = output.read_text(encoding="utf-8")
    assert content.startswith("<codebase>\n")
    assert "// src/lonely.js" in content
    assert "Wrote" in result.stderr and "(3 files)" in result.stderr


def test_no_deps_keeps_only_inputs(sample_project: Path) -> None:
    result = run_cli(["src/main.js", "--no-deps", "-q"], cwd=sample_project)

    assert result.returncode == 0
    assert "// src/main.js" in result.stdout
    assert "// src/util.js" not in result.stdout
    assert "Processed" not in result.stderr


def test_dry_run_lists_files(sample_project: Path) -> None:
    """TC-04: Verify the dry run lists files on stderr and bundles nothing."""
    result = run_cli(["--dry-run", "src/main.js"], cwd=sample_project)

    assert result.returncode == 0
    assert result.stdout == ""
    assert "Files that would be scanned (2)" in result.stderr
    assert "src/util.js" in result.stderr


def test_deps_report(sample_project: Path) -> None:
    """TC-05: Verify the markdown dependency report."""
    result = run_cli(["--deps", "src/main.js"], cwd=sample_project)

    assert result.returncode == 0
    assert result.stdout.startswith("# Dependency Analysis for `src/main.js`")
    assert "./util → src/util.js" in result.stdout


def test_tree_only(sample_project: Path) -> None:
    result = run_cli(["--tree-only", "-q"], cwd=sample_project)

    assert result.returncode == 0
    assert result.stdout.splitlines() == [
        ".",
        "├── docs",
        "│   └── guide.md",
        "└── src",
        "    ├── lonely.js",
        "    ├── main.js",
        "    └── util.js",
    ]


def test_config_file_exclusion(sample_project: Path) -> None:
    """TC-06: Verify that a JSON config file feeds the exclude pattern."""
    config = sample_project / "scanex.json"
    config.write_text(json.dumps({"exclude_pattern": "docs|lonely"}), encoding="utf-8")

    result = run_cli(["--config", str(config), "--dry-run", "."], cwd=sample_project)

    assert result.returncode == 0
    assert "guide.md" not in result.stderr
    assert "lonely.js" not in result.stderr
    assert "src/main.js" in result.stderr


def test_missing_input_fails(sample_project: Path) -> None:
    """TC-07: Verify the exit code when no input exists."""
    result = run_cli(["does/not/exist.js"], cwd=sample_project)

    assert result.returncode == 1
    assert "None of the input paths exist" in result.stderr


@pytest.mark.parametrize("args", [["-e", "(unclosed", "src"], ["--deps", "src/ghost.js"]])
def test_invalid_input_exit_code(sample_project: Path, args: List[str]) -> None:
    """TC-08: Verify that invalid patterns and missing files exit with 2."""
    result = run_cli(args, cwd=sample_project)

    assert result.returncode == 2
    assert "ERROR:" in result.stderr
