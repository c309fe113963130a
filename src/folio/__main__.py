"""Entry point for running Folio as a module.

Usage:
    python -m folio [command] [options]

Example:
    python -m folio render profile --data name=Ada
    python -m folio check layout
"""

from folio.cli import app

if __name__ == "__main__":
    app()
