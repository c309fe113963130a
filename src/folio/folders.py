"""Named template folders (the ``emails`` in ``emails::welcome``)."""

from collections.abc import Iterator
from pathlib import Path

from folio.errors import ConfigurationError, FolderNotFoundError


class Folder:
    """A named directory of templates.

    Attributes:
        name: Folder name used in template names
        path: Directory holding the folder's templates
        fallback: Whether missing templates fall back to the engine's default directory
    """

    def __init__(self, name: str, path: str | Path, fallback: bool = False) -> None:
        path = Path(path)
        if not path.is_dir():
            raise ConfigurationError(f'The specified directory path "{path}" does not exist.')
        self.name = name
        self.path = path
        self.fallback = fallback

    def __repr__(self) -> str:
        return f"Folder(name={self.name!r}, path={str(self.path)!r}, fallback={self.fallback})"


class Folders:
    """Collection of folders keyed by name."""

    def __init__(self) -> None:
        self._folders: dict[str, Folder] = {}

    def __iter__(self) -> Iterator[Folder]:
        return iter(self._folders.values())

    def __len__(self) -> int:
        return len(self._folders)

    def add(self, name: str, path: str | Path, fallback: bool = False) -> Folder:
        """Add a folder.

        Raises:
            ConfigurationError: If the name is taken or the path is not a directory
        """
        if self.exists(name):
            raise ConfigurationError(f'The template folder "{name}" is already being used.')
        folder = Folder(name, path, fallback)
        self._folders[name] = folder
        return folder

    def remove(self, name: str) -> None:
        if not self.exists(name):
            raise FolderNotFoundError(name)
        del self._folders[name]

    def get(self, name: str) -> Folder:
        if not self.exists(name):
            raise FolderNotFoundError(name)
        return self._folders[name]

    def exists(self, name: str) -> bool:
        return name in self._folders
