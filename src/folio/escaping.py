"""Function pipelines and HTML escaping for template output.

A pipeline is a ``|``-separated list of function names applied left to right:
``"strip|title"`` turns ``"  ada lovelace "`` into ``"Ada Lovelace"``. Each
name is looked up as:

1. a template function registered on the engine (called with the template)
2. a Python builtin, optionally dotted (``len``, ``int``, ``str.upper``)
3. a dotted import path (``textwrap.dedent``)
4. a built-in Jinja2 filter (``upper``, ``trim``, ``striptags``, ``title``, ...)

Builtins shadow Jinja2 filters of the same name: ``int`` raises on bad input
instead of returning 0. Filters that need a template context
(``select``, ``selectattr``, ...) are not available.
"""

import builtins
import functools
import logging
import pkgutil
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from jinja2 import Environment
from markupsafe import escape as markup_escape

from folio.errors import UnknownPipelineFunctionError

if TYPE_CHECKING:
    from folio.template import Template

logger = logging.getLogger(__name__)

PIPE_SEPARATOR = "|"

# Fixed for the whole process: output is UTF-8, undecodable input is substituted
OUTPUT_ENCODING = "utf-8"
INVALID_SEQUENCES = "replace"

# Only used to look up and call Jinja2's built-in filters; autoescape stays off
_FILTERS = Environment()


def _resolve_builtin(name: str) -> Any:
    head, *rest = name.split(".")
    target = getattr(builtins, head, None)
    for attribute in rest:
        if target is None:
            break
        target = getattr(target, attribute, None)
    return target


def _jinja_filter(name: str) -> Callable[[Any], Any] | None:
    function = _FILTERS.filters.get(name)
    if function is None:
        return None
    pass_arg = getattr(function, "jinja_pass_arg", None)
    if pass_arg is not None and pass_arg.name == "context":
        return None
    return functools.partial(_FILTERS.call_filter, name)


def resolve_ambient(name: str) -> Callable[[Any], Any] | None:
    """Find a callable for a pipeline name outside the engine's function registry.

    Args:
        name: Filter name, builtin name or dotted import path

    Returns:
        A one-argument callable, or None if nothing matches
    """
    if not name:
        return None

    target = _resolve_builtin(name)
    if target is None and "." in name:
        try:
            target = pkgutil.resolve_name(name)
        except (ImportError, AttributeError, ValueError):
            target = None
    if callable(target):
        return target

    return _jinja_filter(name)


def apply_pipeline(value: Any, functions: str, template: "Template | None" = None) -> Any:
    """Apply each function named in ``functions`` to ``value``, in order.

    Args:
        value: Initial value
        functions: Names separated by "|"
        template: Template whose engine functions take precedence

    Returns:
        The result of the last function

    Raises:
        UnknownPipelineFunctionError: If a name cannot be resolved

    Examples:
        >>> apply_pipeline("  hello ", "trim|upper")
        'HELLO'
    """
    for name in functions.split(PIPE_SEPARATOR):
        name = name.strip()

        if template is not None and template.engine.does_function_exist(name):
            value = template.engine.get_function(name).call(template, value)
            continue

        function = resolve_ambient(name)
        if function is None:
            raise UnknownPipelineFunctionError(name)
        value = function(value)

    return value


def _to_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bytes | bytearray):
        return bytes(value).decode(OUTPUT_ENCODING, INVALID_SEQUENCES)
    if hasattr(value, "__html__"):
        # MarkupSafe trusts objects that render their own HTML
        return value
    # Lone surrogates cannot be encoded; substitute them like invalid bytes
    return (
        str(value)
        .encode(OUTPUT_ENCODING, "surrogatepass")
        .decode(OUTPUT_ENCODING, INVALID_SEQUENCES)
    )


def escape(value: Any, functions: str | None = None, template: "Template | None" = None) -> str:
    """HTML-escape a value, optionally running a pipeline first.

    Quotes are escaped. None renders as an empty string. Values that already
    carry HTML (objects with ``__html__``, such as ``markupsafe.Markup`` or the
    result of the ``safe`` filter) are trusted and returned as they are; this
    is how MarkupSafe itself treats them.

    Examples:
        >>> escape("<a>")
        '&lt;a&gt;'
        >>> escape(None)
        ''
    """
    if functions:
        value = apply_pipeline(value, functions, template)
    return str(markup_escape(_to_text(value)))
