"""Named section fragments produced by templates and consumed by layouts."""

import logging
from enum import Enum

from folio.capture import CaptureStack
from folio.errors import (
    ImbalancedCaptureError,
    NestedSectionError,
    NoOpenSectionError,
    ReservedNameError,
)

logger = logging.getLogger(__name__)

CONTENT_SECTION = "content"


class SectionMode(Enum):
    """How a captured section combines with any existing value."""

    REWRITE = "rewrite"
    APPEND = "append"
    PREPEND = "prepend"


class SectionStore:
    """Section contents plus the state of the one section capture that may be open.

    Attributes:
        contents: Section name to accumulated text
    """

    def __init__(self, capture: CaptureStack) -> None:
        """Initialize an empty store.

        Args:
            capture: Stack that section output is captured on
        """
        self._capture = capture
        self.contents: dict[str, str] = {}
        self._active_name: str | None = None
        self._active_mode = SectionMode.REWRITE
        self._depth = 0

    @property
    def active_name(self) -> str | None:
        """Name of the open section, or None."""
        return self._active_name

    @property
    def active_mode(self) -> SectionMode:
        """Mode of the open section (REWRITE when nothing is open)."""
        return self._active_mode

    @property
    def opened_at(self) -> int | None:
        """Capture depth recorded when the open section started."""
        return self._depth if self._active_name is not None else None

    def begin(self, name: str, mode: SectionMode = SectionMode.REWRITE) -> None:
        """Open a section capture.

        Raises:
            ReservedNameError: If name is "content"
            NestedSectionError: If another section is already open
        """
        if name == CONTENT_SECTION:
            raise ReservedNameError(name)
        if self._active_name is not None:
            raise NestedSectionError(name, self._active_name)

        self._active_name = name
        self._active_mode = mode
        self._depth = self._capture.depth
        self._capture.enter()

    def end(self) -> str:
        """Close the open section and merge its output.

        Returns:
            The new value of the section

        Raises:
            NoOpenSectionError: If no section is open
            ImbalancedCaptureError: If frames opened after begin() are still open
        """
        if self._active_name is None:
            raise NoOpenSectionError()
        if self._capture.depth != self._depth + 1:
            raise ImbalancedCaptureError(
                f'Section "{self._active_name}" cannot be closed: expected capture depth '
                f"{self._depth + 1}, found {self._capture.depth}."
            )

        name, mode = self._active_name, self._active_mode
        captured = self._capture.exit()
        existing = self.contents.get(name, "")

        if mode is SectionMode.APPEND:
            self.contents[name] = existing + captured
        elif mode is SectionMode.PREPEND:
            self.contents[name] = captured + existing
        else:
            self.contents[name] = captured

        self._reset()
        return self.contents[name]

    def abort(self) -> None:
        """Forget the open section. The caller is responsible for its capture frame."""
        if self._active_name is not None:
            logger.debug("Aborting open section %r", self._active_name)
        self._reset()

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.contents.get(name, default)

    def replace(self, contents: dict[str, str]) -> None:
        """Replace all section contents with a copy of ``contents``."""
        self.contents = dict(contents)

    def _reset(self) -> None:
        self._active_name = None
        self._active_mode = SectionMode.REWRITE
        self._depth = 0
