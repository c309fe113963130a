"""Template instances and the render pipeline.

A template body is a Python source file. It runs with these names bound:

* every key of the template data (``name``, ``items``, ...)
* ``this``: the Template instance (sections, layouts, escaping, functions)
* ``context``: read-only view of the same data, for keys that are not identifiers
* ``echo`` and ``print``: write to the current capture frame

Example body (``templates/profile.py``)::

    this.layout("layout", {"title": "Profile"})
    this.start("sidebar")
    echo("<p>Recently viewed</p>")
    this.stop()
    echo("<h1>", this.e(name), "</h1>")
"""

import builtins
import functools
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from folio.errors import TemplateNotFoundError
from folio.escaping import apply_pipeline, escape
from folio.layouts import LayoutChain, LayoutEntry, LayoutRef
from folio.name import TemplateName
from folio.sections import CONTENT_SECTION, SectionMode, SectionStore

if TYPE_CHECKING:
    from folio.engine import Engine, LayoutData

logger = logging.getLogger(__name__)

_UNSET: Any = object()

# Names bound in every body namespace; they take precedence over data keys
HELPER_NAMES = frozenset({"__name__", "this", "context", "echo", "print"})


class Template:
    """A template bound to one name, with its own data, sections and layouts.

    Attributes:
        engine: Engine that created this template
        name: Parsed template name
    """

    def __init__(self, engine: "Engine", name: str, data: Mapping[str, Any] | None = None) -> None:
        """Create a template seeded with the engine's default data for ``name``.

        Args:
            engine: Owning engine
            name: Template name (``template`` or ``folder::template``)
            data: Caller data, merged over the defaults
        """
        self.engine = engine
        self.name = TemplateName(engine, name)
        self._data: dict[str, Any] = {}
        self._sections = SectionStore(engine.capture)
        self._layouts = LayoutChain()

        self.data(engine.get_data(name))
        if data:
            self.data(data)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        """Dispatch unknown attributes to the engine's template functions."""
        engine = self.__dict__.get("engine")
        if name.startswith("_") or engine is None:
            raise AttributeError(name)
        func = engine.get_function(name)
        return functools.partial(func.call, self)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Template({self.name.name!r})"

    # =========================================================================
    # Data
    # =========================================================================

    def data(self, data: Mapping[str, Any] | None = _UNSET) -> "dict[str, Any] | Template":
        """Get or merge template data.

        Called without arguments, returns a copy of the data. Called with a
        mapping, merges it (new keys win) and returns the template. Called with
        None, clears the data.
        """
        if data is _UNSET:
            return dict(self._data)
        self._data = {} if data is None else {**self._data, **data}
        return self

    # =========================================================================
    # Existence
    # =========================================================================

    def exists(self) -> bool:
        try:
            self.engine.resolve(self.name)
        except TemplateNotFoundError:
            return False
        return True

    def path(self) -> str:
        """Resolved path of the template, or the first path tried if it is missing."""
        try:
            return self.engine.resolve(self.name)
        except TemplateNotFoundError as e:
            return e.paths[0] if e.paths else ""

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self, data: Mapping[str, Any] | None = None) -> str:
        """Render the template body and its layouts.

        ``data`` is merged over the template data for this call only; the
        previous data is restored afterwards, whether or not rendering failed.

        Args:
            data: Extra data for this call

        Returns:
            Rendered output

        Raises:
            TemplateNotFoundError: If the template cannot be resolved
            Exception: Anything raised by the body, unchanged
        """
        previous = self._data
        self.data(data or {})
        capture = self.engine.capture
        depth = capture.depth

        try:
            path = self.engine.resolve(self.name)
            code = self.engine.load_template(path)
            logger.debug("Rendering %s (capture depth %d)", self.name, depth)

            try:
                with capture.capture() as captured:
                    exec(code, self._namespace())
            except BaseException:
                opened_at = self._sections.opened_at
                if opened_at is not None and opened_at > depth:
                    self._sections.abort()
                raise

            content = self._apply_layouts(captured.content)
        finally:
            self._data = previous

        return content

    def _namespace(self) -> dict[str, Any]:
        shadowed = sorted(HELPER_NAMES.intersection(self._data))
        if shadowed:
            logger.debug(
                "Data keys %s of %s are shadowed by template helpers; read them through context[...]",
                ", ".join(shadowed),
                self.name,
            )

        namespace = dict(self._data)
        namespace.update(
            __name__=str(self.name),
            this=self,
            context=MappingProxyType(dict(self._data)),
            echo=self.echo,
            print=functools.partial(builtins.print, file=self.engine.capture.stream),
        )
        return namespace

    def _apply_layouts(self, content: str) -> str:
        sections = dict(self._sections.contents)
        for entry in self._layouts:
            logger.debug("Wrapping %s in layout %s", self.name, entry.name)
            layout = self.engine.make(entry.name)
            layout.sections = {**sections, CONTENT_SECTION: content}
            content = layout.render(entry.data)
            sections = layout.sections
        return content

    def echo(self, *values: Any) -> None:
        """Write values to the current capture frame, without separators."""
        for value in values:
            self.engine.capture.write(value)

    # =========================================================================
    # Layouts
    # =========================================================================

    def layout(self, name: str | None = None, data: Mapping[str, Any] | None = None) -> "list[str] | Template":
        """Set a single layout, or return the layout names when called without a name."""
        if not name:
            return self._layouts.names
        self._layouts.set(name, data)
        return self

    def layouts(
        self,
        entries: Iterable[LayoutRef | LayoutEntry] | None = None,
        outward: bool = True,
    ) -> "list[str] | Template":
        """Replace the layout chain, or return the layout names when called without entries.

        Args:
            entries: Layouts as (name, data) pairs; an empty list removes all layouts
            outward: True if entries are listed innermost first
        """
        if entries is None:
            return self._layouts.names
        self._layouts.set_all(entries, outward)
        return self

    def layout_add(
        self,
        before: bool = False,
        name: str | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> "Template":
        """Add a layout inside (before=True) or outside (before=False) the current ones."""
        if not name:
            return self
        self._layouts.add(before, name, data or {})
        return self

    def layouts_add(
        self,
        before: bool = False,
        entries: Iterable[LayoutRef | LayoutEntry] | None = None,
        outward: bool = True,
    ) -> "Template":
        """Add several layouts inside or outside the current ones, keeping their order."""
        if not entries:
            return self
        self._layouts.add_all(before, entries, outward)
        return self

    # =========================================================================
    # Sections
    # =========================================================================

    @property
    def sections(self) -> dict[str, str]:
        return dict(self._sections.contents)

    @sections.setter
    def sections(self, contents: Mapping[str, str]) -> None:
        self._sections.replace(dict(contents))

    def start(self, name: str) -> None:
        """Start capturing a section, replacing any previous content."""
        self._sections.begin(name)

    def push(self, name: str) -> None:
        """Start capturing a section that is appended to existing content."""
        self._sections.begin(name, SectionMode.APPEND)

    def unshift(self, name: str) -> None:
        """Start capturing a section that is prepended to existing content."""
        self._sections.begin(name, SectionMode.PREPEND)

    def stop(self) -> None:
        """Stop the current section."""
        self._sections.end()

    def end(self) -> None:
        """Alias of stop()."""
        self.stop()

    @contextmanager
    def block(self, name: str, mode: SectionMode | str = SectionMode.REWRITE) -> Iterator[None]:
        """Capture a section for the duration of a ``with`` block.

        If the block raises, the partial section is discarded and the capture
        stack is unwound before the exception propagates, so a body that
        catches it can keep writing output.
        """
        depth = self.engine.capture.depth
        self._sections.begin(name, SectionMode(mode))
        try:
            yield
        except BaseException:
            self.engine.capture.unwind_to(depth)
            self._sections.abort()
            raise
        self._sections.end()

    def section(self, name: str, default: str | None = None) -> str | None:
        """Return a section's content, or ``default`` if it was never set."""
        return self._sections.get(name, default)

    # =========================================================================
    # Nested templates
    # =========================================================================

    def fetch(
        self,
        name: str,
        data: Mapping[str, Any] | None = None,
        layout_name: str | None = None,
        layout_data: "LayoutData" = None,
    ) -> str:
        """Render another template and return its output."""
        return self.engine.render(name, data, layout_name, layout_data)

    def insert(
        self,
        name: str,
        data: Mapping[str, Any] | None = None,
        layout_name: str | None = None,
        layout_data: "LayoutData" = None,
    ) -> None:
        """Render another template and write its output to the current capture frame."""
        self.engine.capture.write(self.fetch(name, data, layout_name, layout_data))

    def make(self, name: str, data: Mapping[str, Any] | None = None) -> "Template":
        return self.engine.make(name, data)

    # =========================================================================
    # Escaping
    # =========================================================================

    def batch(self, value: Any, functions: str) -> Any:
        """Apply "|"-separated functions to a value, left to right."""
        return apply_pipeline(value, functions, self)

    def escape(self, value: Any, functions: str | None = None) -> str:
        """HTML-escape a value, after applying optional "|"-separated functions."""
        return escape(value, functions, self)

    def e(self, value: Any, functions: str | None = None) -> str:
        """Alias of escape()."""
        return self.escape(value, functions)
