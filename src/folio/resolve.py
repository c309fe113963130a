"""Strategies that turn a TemplateName into a file path.

A resolver is any callable taking a TemplateName and returning a path string.
It raises TemplateNotFoundError, listing every attempted path, when nothing
matches.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from folio.errors import ConfigurationError, TemplateNotFoundError
from folio.name import TemplateName

logger = logging.getLogger(__name__)


class ResolveTemplatePath(Protocol):
    """Callable protocol implemented by every resolver."""

    def __call__(self, name: TemplateName) -> str: ...


def _first_existing(name: TemplateName, candidates: list[Path]) -> str:
    for candidate in candidates:
        if candidate.is_file():
            logger.debug("Resolved template %s to %s", name, candidate)
            return str(candidate)
    raise TemplateNotFoundError(name.name, [str(c) for c in candidates])


class NameAndFolderResolver:
    """Default resolver: the template's folder, then (with fallback) the default directory."""

    def __call__(self, name: TemplateName) -> str:
        directory = name.engine.get_directory()

        if name.folder is not None:
            candidates = [name.folder.path / name.file]
            if name.folder.fallback and directory is not None:
                candidates.append(Path(directory) / name.file)
            return _first_existing(name, candidates)

        if directory is None:
            raise ConfigurationError(
                f'The default directory has not been defined, cannot resolve "{name}".'
            )
        return _first_existing(name, [Path(directory) / name.file])


class Theme:
    """A directory of templates that may override a parent theme.

    Build a chain with Theme.hierarchy(); the last theme given is the most
    specific and is searched first.
    """

    def __init__(self, directory: str | Path, name: str, parent: "Theme | None" = None) -> None:
        directory = Path(directory)
        if not directory.is_dir():
            raise ConfigurationError(f'The theme directory "{directory}" does not exist.')
        self.directory = directory
        self.name = name
        self.parent = parent

    @classmethod
    def hierarchy(cls, themes: Iterable["Theme"]) -> "Theme":
        """Link themes so each one's parent is the theme before it.

        Raises:
            ConfigurationError: If no themes are given
        """
        themes = list(themes)
        if not themes:
            raise ConfigurationError("A theme hierarchy needs at least one theme.")
        for parent, child in zip(themes, themes[1:], strict=False):
            child.parent = parent
        return themes[-1]

    def lineage(self) -> list["Theme"]:
        """This theme followed by its ancestors, most specific first."""
        chain: list[Theme] = []
        theme: Theme | None = self
        while theme is not None:
            chain.append(theme)
            theme = theme.parent
        return chain

    def __repr__(self) -> str:
        return f"Theme(name={self.name!r}, directory={str(self.directory)!r})"


class ThemeResolver:
    """Resolve through a theme hierarchy; folder-qualified names still use their folder."""

    def __init__(self, theme: Theme) -> None:
        self.theme = theme

    def __call__(self, name: TemplateName) -> str:
        if name.folder is not None:
            return _first_existing(name, [name.folder.path / name.file])
        return _first_existing(name, [t.directory / name.file for t in self.theme.lineage()])
