"""Smoke test running mypy over broker_session.

mypy picks up its options from the ``[tool.mypy]`` section of
``pyproject.toml``; nothing is configured on the command line.
"""

import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

pytestmark = pytest.mark.smoke

MAX_REPORTED_ERRORS = 20


def _mypy(*args: str, cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "mypy", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
    )


def _summarize(stdout: str, stderr: str) -> str:
    lines: List[str] = stdout.strip().splitlines()
    report = [f"  {line}" for line in lines[:MAX_REPORTED_ERRORS]]
    if len(lines) > MAX_REPORTED_ERRORS:
        report.append(f"  ... and {len(lines) - MAX_REPORTED_ERRORS} more lines")
    if stderr.strip():
        report.append(f"mypy stderr: {stderr.strip()}")
    return "\n".join(report)


def test_broker_session_type_checks(
    project_root: Path, pyproject: Path, package_dir: Path
) -> None:
    version = _mypy("--version", cwd=project_root)
    if version.returncode != 0:
        pytest.fail("mypy is not installed; install the test extra: pip install -e '.[test]'")

    result = _mypy("--config-file", str(pyproject), str(package_dir), cwd=project_root)

    if result.returncode != 0:
        pytest.fail(
            "Type checking failed in broker_session:\n"
            f"{_summarize(result.stdout, result.stderr)}\n\n"
            f"Run 'mypy --config-file {pyproject.name} {package_dir}' for full output."
        )
