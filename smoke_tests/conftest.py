"""Fixtures for the broker-session smoke suite.

The suite checks that every public name imports and that the package type
checks under the mypy settings in ``pyproject.toml``.
"""

from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
PYPROJECT = PROJECT_ROOT / "pyproject.toml"
PACKAGE_DIR = PROJECT_ROOT / "src" / "broker_session"


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def pyproject() -> Path:
    return PYPROJECT


@pytest.fixture
def package_dir() -> Path:
    """Return the broker_session package directory path."""
    return PACKAGE_DIR
