"""Default data shared by every template, or by specific templates."""

from collections.abc import Iterable, Mapping
from typing import Any


class TemplateData:
    """Global and per-template default data.

    Usage:
        data = TemplateData()
        data.add({"site": "Example"})
        data.add({"year": 2026}, templates=["layout"])
        data.get("layout")  # {"site": "Example", "year": 2026}
    """

    def __init__(self) -> None:
        self._shared: dict[str, Any] = {}
        self._templates: dict[str, dict[str, Any]] = {}

    def add(self, data: Mapping[str, Any], templates: str | Iterable[str] | None = None) -> None:
        """Merge data into the shared defaults, or into the defaults of some templates.

        Args:
            data: Values to merge (later values win)
            templates: Template name or names; None for every template
        """
        if templates is None:
            self._shared.update(data)
            return

        if isinstance(templates, str):
            templates = [templates]
        for template in templates:
            self._templates.setdefault(template, {}).update(data)

    def get(self, template: str | None = None) -> dict[str, Any]:
        """Return the defaults for a template (shared data overridden by template data)."""
        merged = dict(self._shared)
        if template is not None:
            merged.update(self._templates.get(template, {}))
        return merged
