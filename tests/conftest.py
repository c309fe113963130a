"""Shared pytest fixtures for Folio tests.

Fixtures are organized by category:
- Directory fixtures: temporary template directories
- Engine fixtures: engines bound to those directories
- Template fixtures: helpers that write template bodies to disk
"""

import textwrap
from pathlib import Path

import pytest

from folio import Engine
from tests.fixtures import WriteTemplate

# =============================================================================
# Directory Fixtures
# =============================================================================


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Create an empty template directory."""
    directory = tmp_path / "templates"
    directory.mkdir()
    return directory


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def engine(templates_dir: Path) -> Engine:
    """Create an engine rendering from the temporary template directory."""
    return Engine(templates_dir)


# =============================================================================
# Template Fixtures
# =============================================================================


@pytest.fixture
def write_template(templates_dir: Path) -> WriteTemplate:
    """Return a helper that writes a template body.

    Usage:
        write_template("profile", 'echo("Hello ", name)')
        write_template("welcome", 'echo("hi")', directory=emails_dir)
    """

    def _write(name: str, source: str, directory: Path | None = None) -> Path:
        path = (directory or templates_dir) / f"{name}.py"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).strip() + "\n", encoding="utf-8")
        return path

    return _write
