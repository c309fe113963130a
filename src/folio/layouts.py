"""Ordered chain of layouts wrapping a rendered template.

The chain is stored innermost first: entry 0 wraps the template body, the last
entry produces the final output.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

# A layout entry as accepted from callers: a bare name, (name,) or (name, data)
LayoutRef = str | tuple[str] | tuple[str, Mapping[str, Any] | None]


@dataclass(frozen=True)
class LayoutEntry:
    """One layer of the chain.

    Attributes:
        name: Template name of the layout
        data: Data passed to the layout's render call
    """

    name: str
    data: dict[str, Any] = field(default_factory=dict)


def to_entry(ref: "LayoutRef | LayoutEntry") -> LayoutEntry:
    """Normalize a caller-supplied layout reference into a LayoutEntry."""
    if isinstance(ref, LayoutEntry):
        return ref
    if isinstance(ref, str):
        return LayoutEntry(ref)

    name, *rest = ref
    data = rest[0] if rest else None
    return LayoutEntry(name, dict(data or {}))


class LayoutChain:
    """Mutable, ordered list of LayoutEntry objects."""

    def __init__(self) -> None:
        self._entries: list[LayoutEntry] = []

    def __iter__(self) -> Iterator[LayoutEntry]:
        # Iterate over a snapshot so a fold is not affected by later edits
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    @property
    def names(self) -> list[str]:
        """Layout names, innermost first."""
        return [entry.name for entry in self._entries]

    @property
    def entries(self) -> list[LayoutEntry]:
        return list(self._entries)

    def set(self, name: str, data: Mapping[str, Any] | None = None) -> None:
        """Replace the chain with a single layout."""
        self._entries = [LayoutEntry(name, dict(data or {}))]

    def set_all(self, entries: Iterable["LayoutRef | LayoutEntry"], outward: bool = True) -> None:
        """Replace the chain.

        Args:
            entries: Layouts to install; an empty iterable clears the chain
            outward: True if entries are listed innermost first, False if outermost first
        """
        self._entries = []
        for ref in entries:
            self.add(not outward, ref)

    def add(
        self,
        at_front: bool,
        ref: "LayoutRef | LayoutEntry",
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """Insert one layout.

        Args:
            at_front: True to render it before every current layout (innermost),
                False to render it after them (outermost)
            ref: Layout name or entry
            data: Layout data, used when ref is a bare name
        """
        if isinstance(ref, str) and data is not None:
            entry = LayoutEntry(ref, dict(data))
        else:
            entry = to_entry(ref)
        if at_front:
            self._entries.insert(0, entry)
        else:
            self._entries.append(entry)

    def add_all(
        self,
        at_front: bool,
        entries: Iterable["LayoutRef | LayoutEntry"],
        outward: bool = True,
    ) -> None:
        """Insert several layouts, keeping their relative order.

        Entries inserted one by one at the front end up reversed, and so do
        outermost-first lists inserted at the back. The batch is therefore
        reversed whenever ``at_front == outward``.

        Args:
            at_front: Insert the batch inside (True) or outside (False) the current chain
            entries: Layouts to insert
            outward: True if entries are listed innermost first
        """
        batch = list(entries)
        if at_front == outward:
            batch.reverse()
        for ref in batch:
            self.add(at_front, ref)
