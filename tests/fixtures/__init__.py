"""Test fixtures for Folio.

Sample Templates:
- templates/: a small site with a page, a partial, two layouts and an
  ``emails`` folder, used by the CLI integration tests
"""

from collections.abc import Callable
from pathlib import Path

# Path to fixtures directory
FIXTURES_DIR = Path(__file__).parent

# Sample template directory
TEMPLATES_DIR = FIXTURES_DIR / "templates"

# Type of the write_template fixture: (name, source, directory=None) -> path
WriteTemplate = Callable[..., Path]
