#!/usr/bin/env python3
"""
present.py - Deliver an outline section by section in the terminal.

Without an id, lists saved outlines with their progress.

Commands during a session:
  n / Enter   next section          p   previous section
  c           mark section complete u   undo completion
  f           toggle focus mode     q   quit

Usage:
  python scripts/present.py
  python scripts/present.py 3f2c9a... [--db data/outlines.db]
"""

import argparse
import logging
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from podium.config import load_settings
from podium.errors import OutlineError
from podium.session import (
    CompletionSynchronizer,
    NavigationCommand,
    PresentationSession,
    SQLiteOutlineStore,
    SectionMarker,
    dashboard_stats,
    section_markers,
    summarize_outline,
)

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

MARKER_SYMBOLS = {
    SectionMarker.COMPLETED: "✓",
    SectionMarker.CURRENT: "●",
    SectionMarker.PENDING: "○",
}

KEY_COMMANDS = {
    "": NavigationCommand.ADVANCE,
    "n": NavigationCommand.ADVANCE,
    "p": NavigationCommand.RETREAT,
}


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------

def print_outline_list(store: SQLiteOutlineStore):
    outlines = store.list("-created_date")
    stats = dashboard_stats(outlines)
    print(f"{stats['total']} outlines ({stats['active']} active, {stats['completed']} completed)")
    for outline in outlines:
        summary = summarize_outline(outline)
        print(
            f"  {outline.id}  [{outline.status.value:9}] {outline.title} "
            f"- {summary['completed']}/{summary['total']} sections, {outline.total_duration} min"
        )


def render_section(session: PresentationSession):
    section = session.current_section
    if section is None:
        print("(this outline has no sections)")
        return

    if not session.is_focus_mode:
        outline = session.outline
        progress = session.progress()
        markers = "".join(
            MARKER_SYMBOLS[m] for m in section_markers(outline, session.current_index)
        )
        print()
        print(f"{outline.title}  {progress['completed']}/{progress['total']} sections completed")
        print(f"{markers}  {progress['progress_percent']:.0f}%")
        print(f"Section {progress['position']} of {progress['total']}")

    print()
    status = "done" if section.completed else f"{section.duration} min"
    print(f"## {section.title} ({status})")
    if section.content:
        print(section.content)

    if session.is_finished and not session.is_focus_mode:
        print()
        print("All sections of this outline are completed.")


# -----------------------------------------------------------------------------
# Session loop
# -----------------------------------------------------------------------------

def run_session(session: PresentationSession):
    render_section(session)
    while True:
        try:
            key = input("\n[n]ext [p]rev [c]omplete [u]ndo [f]ocus [q]uit > ").strip().lower()
        except EOFError:
            return

        if key == "q":
            return
        if key in KEY_COMMANDS:
            session.navigator.apply(KEY_COMMANDS[key])
        elif key == "f":
            session.toggle_focus_mode()
        elif key in ("c", "u"):
            try:
                if key == "c":
                    session.complete_current()
                else:
                    session.undo_current()
            except OutlineError as e:
                print(f"Could not save: {e}")
                continue
        else:
            print(f"Unknown command: {key}")
            continue

        render_section(session)


def main():
    parser = argparse.ArgumentParser(description="Present an outline")
    parser.add_argument("outline_id", nargs="?", help="Outline to present (omit to list)")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Outline database (default: PODIUM_DB_PATH or ~/.podium/outlines.db)"
    )
    args = parser.parse_args()
    settings = load_settings()

    try:
        store = SQLiteOutlineStore(args.db or settings.db_path, timeout=settings.store_timeout)
        if not args.outline_id:
            print_outline_list(store)
            return 0
        session = CompletionSynchronizer(store).open_session(args.outline_id)
    except OutlineError as e:
        logger.error(str(e))
        return 1

    run_session(session)
    return 0


if __name__ == "__main__":
    sys.exit(main())
