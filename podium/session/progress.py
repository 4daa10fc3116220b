"""
Progress reporting - Completion counts and percentages for outlines.

Everything here is a pure function of the outline passed in and is
recomputed on each call. Used by dashboard summaries and by the in-session
progress indicator.
"""

from enum import Enum
from typing import Iterable

from podium.schemas import Outline, OutlineStatus


class SectionMarker(str, Enum):
    """Per-section indicator state for in-session display."""
    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"


def completed_count(outline: Outline) -> int:
    """Number of completed sections."""
    return sum(1 for section in outline.sections if section.completed)


def progress_percent(outline: Outline) -> float:
    """Completed share of sections in percent (0 for an empty outline)."""
    if not outline.sections:
        return 0.0
    return 100 * completed_count(outline) / len(outline.sections)


def remaining_duration(outline: Outline) -> int:
    """Minutes left across sections not yet completed."""
    return sum(s.duration for s in outline.sections if not s.completed)


def section_markers(outline: Outline, current_index: int) -> list[SectionMarker]:
    """
    Indicator state for each section.

    Completed wins over current, so a finished section under the cursor
    still shows as completed.
    """
    markers = []
    for index, section in enumerate(outline.sections):
        if section.completed:
            markers.append(SectionMarker.COMPLETED)
        elif index == current_index:
            markers.append(SectionMarker.CURRENT)
        else:
            markers.append(SectionMarker.PENDING)
    return markers


def summarize_outline(outline: Outline) -> dict:
    """
    Get completion summary for one outline.

    Returns:
        Dictionary with completion stats
    """
    return {
        "completed": completed_count(outline),
        "total": len(outline.sections),
        "progress_percent": progress_percent(outline),
        "total_duration": outline.total_duration,
        "remaining_duration": remaining_duration(outline),
        "status": outline.status.value,
    }


def dashboard_stats(outlines: Iterable[Outline]) -> dict:
    """Count outlines overall and per status."""
    stats = {"total": 0}
    for status in OutlineStatus:
        stats[status.value] = 0

    for outline in outlines:
        stats["total"] += 1
        stats[outline.status.value] += 1

    return stats
