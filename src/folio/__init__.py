"""Folio - native Python templates with sections and layouts.

Templates are plain Python files. Each one runs with its data bound as names,
writes output with ``echo``/``print``, can fill named sections, and can be
wrapped by any number of layout templates.

    from folio import Engine

    engine = Engine("templates")
    html = engine.render("profile", {"name": "Ada"})
"""

__version__ = "0.1.0"
__author__ = "Folio Contributors"

from folio.engine import Engine  # noqa: E402
from folio.template import Template  # noqa: E402

__all__ = ["Engine", "Template", "__version__"]
