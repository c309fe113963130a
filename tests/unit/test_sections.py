"""Unit tests for the section store."""

import pytest

from folio.capture import CaptureStack
from folio.errors import (
    ImbalancedCaptureError,
    NestedSectionError,
    NoOpenSectionError,
    ReservedNameError,
)
from folio.sections import SectionMode, SectionStore


@pytest.fixture
def stack() -> CaptureStack:
    return CaptureStack()


@pytest.fixture
def store(stack: CaptureStack) -> SectionStore:
    return SectionStore(stack)


def _capture(store: SectionStore, stack: CaptureStack, name: str, text: str, mode: SectionMode) -> None:
    store.begin(name, mode)
    stack.write(text)
    store.end()


class TestSectionModes:
    """Tests for combining captured output with existing content."""

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            (SectionMode.REWRITE, "B"),
            (SectionMode.APPEND, "AB"),
            (SectionMode.PREPEND, "BA"),
        ],
    )
    def test_combination(
        self,
        store: SectionStore,
        stack: CaptureStack,
        mode: SectionMode,
        expected: str,
    ) -> None:
        """Test each mode against an existing value of "A"."""
        _capture(store, stack, "title", "A", SectionMode.REWRITE)
        _capture(store, stack, "title", "B", mode)

        assert store.get("title") == expected

    def test_missing_section_counts_as_empty(self, store: SectionStore, stack: CaptureStack) -> None:
        """Test appending to a section that was never set."""
        _capture(store, stack, "scripts", "<script>", SectionMode.APPEND)

        assert store.get("scripts") == "<script>"

    def test_mode_resets_after_end(self, store: SectionStore, stack: CaptureStack) -> None:
        """Test that the mode is back to REWRITE once the section closes."""
        store.begin("scripts", SectionMode.PREPEND)
        assert store.active_mode is SectionMode.PREPEND

        store.end()

        assert store.active_mode is SectionMode.REWRITE
        assert store.active_name is None
        assert stack.depth == 0


class TestSectionErrors:
    """Tests for reserved names and structure errors."""

    def test_content_is_reserved(self, store: SectionStore, stack: CaptureStack) -> None:
        """Test that "content" cannot be started."""
        with pytest.raises(ReservedNameError):
            store.begin("content")

        assert stack.depth == 0

    def test_nested_sections_rejected(self, store: SectionStore) -> None:
        """Test that a second begin without end fails."""
        store.begin("sidebar")

        with pytest.raises(NestedSectionError, match="sidebar"):
            store.begin("footer")

    def test_end_without_begin(self, store: SectionStore) -> None:
        """Test that ending with nothing open fails."""
        with pytest.raises(NoOpenSectionError):
            store.end()

    def test_end_with_foreign_frame_open(self, store: SectionStore, stack: CaptureStack) -> None:
        """Test that end refuses to pop a frame it did not open."""
        store.begin("sidebar")
        stack.enter()

        with pytest.raises(ImbalancedCaptureError):
            store.end()

    def test_get_default(self, store: SectionStore) -> None:
        """Test that missing sections return the default."""
        assert store.get("missing") is None
        assert store.get("missing", "fallback") == "fallback"

    def test_abort_forgets_open_section(self, store: SectionStore) -> None:
        """Test that abort allows a new section to start."""
        store.begin("sidebar")
        store.abort()

        assert store.opened_at is None
        store.begin("footer")
        assert store.active_name == "footer"
