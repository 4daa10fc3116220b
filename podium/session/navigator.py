"""
SessionNavigator - Cursor over an outline's sections during delivery.

Provides:
- Next/previous section navigation (clamped, not cyclic)
- Drag/swipe gesture mapping onto the same two commands
- Focus mode toggle
- Position helpers for "section N of M" displays

The navigator only reads sections; completion changes go through the
CompletionSynchronizer.
"""

from enum import Enum
from typing import Optional

from podium.schemas import Outline, Section


DRAG_THRESHOLD = 60  # displacement units before a drag counts as a command


class NavigationCommand(str, Enum):
    """Commands every input modality funnels into."""
    ADVANCE = "advance"
    RETREAT = "retreat"


class SessionNavigator:
    """
    Navigate through an outline's sections one at a time.

    All operations are total: moving past either end is a no-op.
    """

    def __init__(self, outline: Outline):
        self.outline = outline
        self.current_index = 0
        self.is_focus_mode = False

    def load(self, outline: Outline):
        """Attach a new outline and reset cursor and focus mode."""
        self.outline = outline
        self.current_index = 0
        self.is_focus_mode = False

    @property
    def total_sections(self) -> int:
        return len(self.outline.sections)

    @property
    def last_index(self) -> int:
        return max(self.total_sections - 1, 0)

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index >= self.last_index

    @property
    def current_section(self) -> Optional[Section]:
        """Section under the cursor, or None for an empty outline."""
        if not self.outline.sections:
            return None
        return self.outline.sections[self._clamp(self.current_index)]

    @property
    def position(self) -> tuple[int, int]:
        """
        Cursor position as (current, total), 1-based.

        Returns (0, 0) for an empty outline.
        """
        if not self.total_sections:
            return (0, 0)
        return (self.current_index + 1, self.total_sections)

    def _clamp(self, index: int) -> int:
        return min(max(index, 0), self.last_index)

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def advance(self) -> bool:
        """Move to the next section. Returns False when already at the last one."""
        if self.current_index >= self.last_index:
            return False
        self.current_index += 1
        return True

    def retreat(self) -> bool:
        """Move to the previous section. Returns False when already at the first one."""
        if self.current_index <= 0:
            return False
        self.current_index -= 1
        return True

    def go_to(self, index: int) -> int:
        """Jump to a section, clamping out-of-range indices. Returns the new index."""
        self.current_index = self._clamp(index)
        return self.current_index

    def handle_drag(self, offset: float) -> Optional[NavigationCommand]:
        """
        Map a horizontal drag onto a navigation command.

        Swiping left (offset below -DRAG_THRESHOLD) advances, swiping right
        (offset above DRAG_THRESHOLD) retreats. Smaller drags are ignored.

        Returns:
            The command that was issued, or None for a sub-threshold drag
        """
        if offset < -DRAG_THRESHOLD:
            self.advance()
            return NavigationCommand.ADVANCE
        if offset > DRAG_THRESHOLD:
            self.retreat()
            return NavigationCommand.RETREAT
        return None

    def apply(self, command: NavigationCommand) -> bool:
        """Run a navigation command issued by any input source."""
        if command == NavigationCommand.ADVANCE:
            return self.advance()
        return self.retreat()

    # -------------------------------------------------------------------------
    # Focus mode
    # -------------------------------------------------------------------------

    def toggle_focus_mode(self) -> bool:
        self.is_focus_mode = not self.is_focus_mode
        return self.is_focus_mode

    def exit_focus_mode(self):
        self.is_focus_mode = False
