"""Template names: ``template`` or ``folder::template``."""

from typing import TYPE_CHECKING

from folio.errors import InvalidTemplateNameError
from folio.folders import Folder

if TYPE_CHECKING:
    from folio.engine import Engine

FOLDER_SEPARATOR = "::"


class TemplateName:
    """A parsed template name, bound to the engine whose folders it refers to.

    Attributes:
        name: The name as written by the caller
        folder: Folder the template lives in, or None for the default directory
        file: Relative file name, including the engine's file extension
    """

    def __init__(self, engine: "Engine", name: str) -> None:
        self.engine = engine
        self.name = name
        self.folder: Folder | None = None
        self.file = ""
        self._parse(name)

    def __repr__(self) -> str:
        return f"TemplateName({self.name!r})"

    def __str__(self) -> str:
        return self.name

    def _parse(self, name: str) -> None:
        if not name:
            raise InvalidTemplateNameError(name, "The template name cannot be empty.")

        parts = name.split(FOLDER_SEPARATOR)
        if len(parts) == 1:
            self.file = self._with_extension(parts[0])
        elif len(parts) == 2:
            folder, file = parts
            if not folder:
                raise InvalidTemplateNameError(name, "The folder name cannot be empty.")
            if not file:
                raise InvalidTemplateNameError(name, "The template name cannot be empty.")
            self.folder = self.engine.get_folders().get(folder)
            self.file = self._with_extension(file)
        else:
            raise InvalidTemplateNameError(
                name, f'Do not use the folder namespace separator "{FOLDER_SEPARATOR}" more than once.'
            )

    def _with_extension(self, file: str) -> str:
        extension = self.engine.get_file_extension()
        if extension is None:
            return file
        return f"{file}.{extension}"
