"""
Podium Session - Runtime components for presenting outlines.

This module provides:
- OutlineStore implementations (SQLite, in-memory)
- SessionNavigator: cursor, gestures and focus mode
- CompletionSynchronizer: completion/undo and status transitions
- PresentationSession: explicit per-delivery state
- Progress reporting helpers
"""

from .store import (
    OutlineStore,
    SQLiteOutlineStore,
    InMemoryOutlineStore,
    DEFAULT_SORT_KEY,
    SORT_KEYS,
    UPDATABLE_FIELDS,
)

from .navigator import (
    SessionNavigator,
    NavigationCommand,
    DRAG_THRESHOLD,
)

from .progress import (
    SectionMarker,
    completed_count,
    progress_percent,
    remaining_duration,
    section_markers,
    summarize_outline,
    dashboard_stats,
)

from .presenter import PresentationSession

from .completion import CompletionSynchronizer

__all__ = [
    # Store
    "OutlineStore",
    "SQLiteOutlineStore",
    "InMemoryOutlineStore",
    "DEFAULT_SORT_KEY",
    "SORT_KEYS",
    "UPDATABLE_FIELDS",
    # Navigator
    "SessionNavigator",
    "NavigationCommand",
    "DRAG_THRESHOLD",
    # Progress
    "SectionMarker",
    "completed_count",
    "progress_percent",
    "remaining_duration",
    "section_markers",
    "summarize_outline",
    "dashboard_stats",
    # Session
    "PresentationSession",
    "CompletionSynchronizer",
]
