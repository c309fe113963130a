"""The Folio engine: configuration shared by every template it creates.

The engine owns the template directory, folders, shared data, template
functions, the path resolver and the capture stack. Templates are created with
make() and rendered with render().

Usage:
    engine = Engine("templates")
    engine.add_data({"site": "Example"})
    html = engine.render("profile", {"name": "Ada"})
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from types import CodeType
from typing import TYPE_CHECKING, Any

from folio.capture import CaptureStack
from folio.data import TemplateData
from folio.errors import ConfigurationError, TemplateNotFoundError
from folio.extensions import Extension, Func, FunctionRegistry
from folio.folders import Folders
from folio.name import TemplateName
from folio.resolve import NameAndFolderResolver, ResolveTemplatePath
from folio.template import Template

if TYPE_CHECKING:
    from folio.config import FolioConfig

logger = logging.getLogger(__name__)

DEFAULT_FILE_EXTENSION = "py"

# Layout data given to render(): a mapping, or a callable building it from the template data
LayoutData = Mapping[str, Any] | Callable[[dict[str, Any]], Mapping[str, Any] | None] | None


class Engine:
    """Template engine.

    Attributes:
        capture: Output capture stack shared by every template of this engine
    """

    def __init__(
        self,
        directory: str | Path | None = None,
        file_extension: str | None = DEFAULT_FILE_EXTENSION,
        capture: CaptureStack | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            directory: Default template directory
            file_extension: Extension appended to template names, None to disable
            capture: Capture stack to use (a new one by default)
        """
        self._directory: Path | None = None
        self._file_extension = file_extension
        self._folders = Folders()
        self._data = TemplateData()
        self._functions = FunctionRegistry()
        self._resolve_template_path: ResolveTemplatePath = NameAndFolderResolver()
        self.capture = capture or CaptureStack()

        self.set_directory(directory)

    @classmethod
    def from_config(cls, config: "FolioConfig") -> "Engine":
        """Build an engine from loaded configuration."""
        engine = cls(config.directory, config.file_extension)
        for name, folder in config.folders.items():
            engine.add_folder(name, folder.path, folder.fallback)
        if config.data:
            engine.add_data(config.data)
        for template, data in config.template_data.items():
            engine.add_data(data, template)
        logger.debug(
            "Engine configured: directory=%s, %d folder(s)", config.directory, len(config.folders)
        )
        return engine

    # =========================================================================
    # Directory and file extension
    # =========================================================================

    def set_directory(self, directory: str | Path | None) -> "Engine":
        """Set the default template directory (None to unset).

        Raises:
            ConfigurationError: If the directory does not exist
        """
        if directory is not None:
            directory = Path(directory)
            if not directory.is_dir():
                raise ConfigurationError(f'The specified path "{directory}" does not exist.')
        self._directory = directory
        return self

    def get_directory(self) -> Path | None:
        return self._directory

    def set_file_extension(self, file_extension: str | None) -> "Engine":
        self._file_extension = file_extension
        return self

    def get_file_extension(self) -> str | None:
        return self._file_extension

    # =========================================================================
    # Folders
    # =========================================================================

    def add_folder(self, name: str, directory: str | Path, fallback: bool = False) -> "Engine":
        self._folders.add(name, directory, fallback)
        return self

    def remove_folder(self, name: str) -> "Engine":
        self._folders.remove(name)
        return self

    def get_folders(self) -> Folders:
        return self._folders

    # =========================================================================
    # Shared data
    # =========================================================================

    def add_data(
        self,
        data: Mapping[str, Any],
        templates: str | Iterable[str] | None = None,
    ) -> "Engine":
        """Add default data for all templates, or for the named templates."""
        self._data.add(data, templates)
        return self

    def get_data(self, template: str | None = None) -> dict[str, Any]:
        return self._data.get(template)

    # =========================================================================
    # Template functions
    # =========================================================================

    def register_function(self, name: str, callback: Callable[..., Any]) -> "Engine":
        self._functions.register(name, callback)
        return self

    def drop_function(self, name: str) -> "Engine":
        self._functions.drop(name)
        return self

    def get_function(self, name: str) -> Func:
        return self._functions.get(name)

    def does_function_exist(self, name: str) -> bool:
        return self._functions.exists(name)

    def load_extension(self, extension: Extension) -> "Engine":
        extension.register(self)
        logger.debug("Loaded extension %s", type(extension).__name__)
        return self

    def load_extensions(self, extensions: Iterable[Extension]) -> "Engine":
        for extension in extensions:
            self.load_extension(extension)
        return self

    # =========================================================================
    # Resolution and loading
    # =========================================================================

    def set_resolve_template_path(self, resolver: ResolveTemplatePath) -> "Engine":
        self._resolve_template_path = resolver
        return self

    def get_resolve_template_path(self) -> ResolveTemplatePath:
        return self._resolve_template_path

    def resolve(self, name: str | TemplateName) -> str:
        """Resolve a template name to a file path.

        Raises:
            TemplateNotFoundError: If no candidate path exists
        """
        if isinstance(name, str):
            name = TemplateName(self, name)
        return self._resolve_template_path(name)

    def path(self, name: str) -> str:
        """Return the resolved path, or the first path tried when the template is missing."""
        try:
            return self.resolve(name)
        except TemplateNotFoundError as e:
            return e.paths[0] if e.paths else ""

    def exists(self, name: str) -> bool:
        try:
            self.resolve(name)
        except TemplateNotFoundError:
            return False
        return True

    def load_template(self, path: str | Path) -> CodeType:
        """Read and compile a template body.

        Raises:
            SyntaxError: If the template is not valid Python
        """
        source = Path(path).read_text(encoding="utf-8")
        return compile(source, str(path), "exec")

    # =========================================================================
    # Rendering
    # =========================================================================

    def make(self, name: str, data: Mapping[str, Any] | None = None) -> Template:
        """Create a template instance seeded with default and caller data."""
        return Template(self, name, data)

    def render(
        self,
        name: str,
        data: Mapping[str, Any] | None = None,
        layout_name: str | None = None,
        layout_data: LayoutData = None,
    ) -> str:
        """Render a template.

        Args:
            name: Template name
            data: Template data
            layout_name: Optional layout installed before the body runs
            layout_data: Layout data; defaults to the template data, a callable
                receives the template data and returns the layout data

        Returns:
            Rendered output
        """
        data = dict(data or {})
        template = self.make(name, data)

        if layout_name:
            if layout_data is None:
                resolved_layout_data: Mapping[str, Any] | None = data
            elif callable(layout_data):
                resolved_layout_data = layout_data(data)
            else:
                resolved_layout_data = layout_data
            template.layout(layout_name, resolved_layout_data)

        return template.render()
