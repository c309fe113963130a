"""Template functions and the registry templates dispatch unknown calls to.

A template function is any callable taking the calling template as its first
argument. Inside a template body ``this.upper_first(title)`` looks up
``upper_first`` here and calls it as ``callback(this, title)``.

Adding a bundle of functions:
    1. Subclass Extension and implement register()
    2. Call engine.register_function() for each function
    3. engine.load_extension(MyExtension())
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from folio.errors import ConfigurationError, UnknownExtensionError

if TYPE_CHECKING:
    from folio.engine import Engine
    from folio.template import Template

_FUNCTION_NAME_RE = re.compile(r"^[a-z_]\w+$", re.IGNORECASE)


class Func:
    """A named template function.

    Attributes:
        name: Name templates call it by
        callback: Callable invoked as callback(template, *args, **kwargs)
    """

    def __init__(self, name: str, callback: Callable[..., Any]) -> None:
        if not _FUNCTION_NAME_RE.match(name):
            raise ConfigurationError(f'Not a valid function name: "{name}".')
        if not callable(callback):
            raise ConfigurationError(f'Not a valid function callback for "{name}".')
        self.name = name
        self.callback = callback

    def call(self, template: "Template", *args: Any, **kwargs: Any) -> Any:
        return self.callback(template, *args, **kwargs)

    def __repr__(self) -> str:
        return f"Func({self.name!r})"


class FunctionRegistry:
    """Registry of template functions by name."""

    def __init__(self) -> None:
        self._functions: dict[str, Func] = {}

    def register(self, name: str, callback: Callable[..., Any]) -> Func:
        """Register a function, replacing any function with the same name."""
        func = Func(name, callback)
        self._functions[name] = func
        return func

    def drop(self, name: str) -> None:
        """Remove a function.

        Raises:
            UnknownExtensionError: If the function is not registered
        """
        if name not in self._functions:
            raise UnknownExtensionError(name)
        del self._functions[name]

    def get(self, name: str) -> Func:
        """Look up a function.

        Raises:
            UnknownExtensionError: If the function is not registered
        """
        try:
            return self._functions[name]
        except KeyError:
            raise UnknownExtensionError(name) from None

    def exists(self, name: str) -> bool:
        return name in self._functions


class Extension(ABC):
    """A bundle of template functions registered together."""

    @abstractmethod
    def register(self, engine: "Engine") -> None:
        """Register this extension's functions on the engine."""
        pass
