"""
PresentationSession - Explicit state for one live delivery of an outline.

Bundles the outline, its navigator and the synchronizer that writes
completion changes. Sessions are plain objects handed to whatever drives
them, so several can run side by side.
"""

from typing import TYPE_CHECKING, Optional

from podium.schemas import Outline, OutlineStatus, Section

from .navigator import NavigationCommand, SessionNavigator
from .progress import section_markers, summarize_outline

if TYPE_CHECKING:
    from .completion import CompletionSynchronizer


class PresentationSession:
    """One user driving one outline through one navigator."""

    def __init__(self, outline: Outline, synchronizer: "CompletionSynchronizer"):
        self.outline = outline
        self.synchronizer = synchronizer
        self.navigator = SessionNavigator(outline)

    @property
    def current_index(self) -> int:
        return self.navigator.current_index

    @property
    def current_section(self) -> Optional[Section]:
        return self.navigator.current_section

    @property
    def is_focus_mode(self) -> bool:
        return self.navigator.is_focus_mode

    @property
    def is_finished(self) -> bool:
        return self.outline.status == OutlineStatus.COMPLETED

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def advance(self) -> bool:
        return self.navigator.advance()

    def retreat(self) -> bool:
        return self.navigator.retreat()

    def handle_drag(self, offset: float) -> Optional[NavigationCommand]:
        return self.navigator.handle_drag(offset)

    def toggle_focus_mode(self) -> bool:
        return self.navigator.toggle_focus_mode()

    def exit_focus_mode(self):
        self.navigator.exit_focus_mode()

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    def complete_section(self, index: int) -> Outline:
        return self.synchronizer.complete_section(self.outline, index)

    def undo_section(self, index: int) -> Outline:
        return self.synchronizer.undo_section(self.outline, index)

    def complete_current(self) -> Outline:
        """Complete the section under the cursor."""
        return self.complete_section(self.navigator.current_index)

    def undo_current(self) -> Outline:
        """Undo completion of the section under the cursor."""
        return self.undo_section(self.navigator.current_index)

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def progress(self) -> dict:
        """Outline summary plus cursor position and per-section markers."""
        current, _ = self.navigator.position
        return {
            **summarize_outline(self.outline),
            "position": current,
            "markers": [m.value for m in section_markers(self.outline, self.current_index)],
        }
