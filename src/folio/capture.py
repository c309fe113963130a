"""Output capture stack.

Template bodies never write to stdout directly. Everything they echo or print
goes to the top frame of a CaptureStack owned by the engine. Renders and
sections each push a frame and must pop exactly that frame again, whether the
body finished or raised.
"""

import io
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TextIO

from folio.errors import ImbalancedCaptureError

logger = logging.getLogger(__name__)


@dataclass
class Captured:
    """Text collected by a capture() scope, available after the scope closes."""

    content: str = ""

    def __str__(self) -> str:
        return self.content


class _StackWriter(io.TextIOBase):
    """File-like adapter that forwards writes to the current top frame."""

    def __init__(self, stack: "CaptureStack") -> None:
        self._stack = stack

    def writable(self) -> bool:
        return True

    def write(self, text: str) -> int:
        return self._stack.write(text)


class CaptureStack:
    """Stack of output buffers matching nested render and section scopes.

    Usage:
        stack = CaptureStack()
        with stack.capture() as captured:
            stack.write("hello")
        captured.content  # "hello"
    """

    def __init__(self, sink: TextIO | None = None) -> None:
        """Initialize an empty stack.

        Args:
            sink: Stream that receives output written while no frame is open
                (defaults to sys.stdout at write time)
        """
        self._frames: list[io.StringIO] = []
        self._sink = sink
        self.stream = _StackWriter(self)

    @property
    def depth(self) -> int:
        """Number of open frames."""
        return len(self._frames)

    def enter(self) -> None:
        """Open a new frame; subsequent writes go to it."""
        self._frames.append(io.StringIO())

    def exit(self) -> str:
        """Close the top frame and return everything written to it.

        Raises:
            ImbalancedCaptureError: If no frame is open
        """
        if not self._frames:
            raise ImbalancedCaptureError("Cannot exit a capture frame: the capture stack is empty.")
        frame = self._frames.pop()
        content = frame.getvalue()
        frame.close()
        return content

    def unwind_to(self, depth: int) -> None:
        """Discard frames until the stack is back at ``depth``."""
        discarded = 0
        while len(self._frames) > depth:
            self._frames.pop().close()
            discarded += 1
        if discarded:
            logger.debug("Discarded %d capture frame(s), depth now %d", discarded, depth)

    def write(self, text: Any) -> int:
        """Write text to the top frame, or to the sink when no frame is open."""
        text = str(text)
        if self._frames:
            return self._frames[-1].write(text)
        sink = self._sink if self._sink is not None else sys.stdout
        return sink.write(text)

    @contextmanager
    def capture(self) -> Iterator[Captured]:
        """Capture everything written inside the ``with`` block.

        The frame opened here is always released. If the block raises, every
        frame above the recorded depth is discarded before the exception
        propagates. If the block returns with extra frames still open, they are
        discarded and ImbalancedCaptureError is raised.

        Yields:
            Captured holder whose content is set when the block exits
        """
        depth = self.depth
        captured = Captured()
        self.enter()
        try:
            yield captured
        except BaseException:
            self.unwind_to(depth)
            raise

        leaked = self.depth - depth - 1
        if leaked:
            self.unwind_to(depth)
            raise ImbalancedCaptureError(
                f"{leaked} capture frame(s) were left open inside a capture scope."
                if leaked > 0
                else "A capture scope closed frames it did not open."
            )
        captured.content = self.exit()
