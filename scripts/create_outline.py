#!/usr/bin/env python3
"""
create_outline.py - Save a new presentation outline.

Sections come either from a YAML/JSON outline file or are generated from an
article with Gemini. The outline is saved with status "draft".

Usage:
  python scripts/create_outline.py --file talk.yaml
  python scripts/create_outline.py --from-text article.md --title "Quarterly review"
  python scripts/create_outline.py --from-text notes.txt --title "Intro" --dry-run
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml
from google.genai import errors as genai_errors

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from podium.config import load_settings
from podium.errors import OutlineError
from podium.generator import GeminiClient, OutlineGenerator, apply_generated_sections
from podium.schemas import OutlineDraft
from podium.session import SQLiteOutlineStore

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def load_outline_file(path: Path) -> dict:
    """Load an outline definition from YAML or JSON."""
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f) or {}


def draft_from_text(path: Path, title: str, description: str, settings) -> OutlineDraft | None:
    """Generate sections from an article; None when the model returned nothing usable."""
    source_text = path.read_text(encoding="utf-8")
    generator = OutlineGenerator(GeminiClient.from_settings(settings))
    sections = apply_generated_sections([], generator.generate(source_text))
    if not sections:
        return None
    return OutlineDraft(title=title, description=description, sections=sections)


def main():
    parser = argparse.ArgumentParser(
        description="Create a presentation outline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--file",
        type=Path,
        help="YAML/JSON file with title, description and sections"
    )
    source.add_argument(
        "--from-text",
        type=Path,
        help="Article or notes to generate sections from"
    )
    parser.add_argument("--title", type=str, help="Outline title (required with --from-text)")
    parser.add_argument("--description", type=str, default="", help="Outline description")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Outline database (default: PODIUM_DB_PATH or ~/.podium/outlines.db)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the outline instead of saving it"
    )

    args = parser.parse_args()
    settings = load_settings()

    try:
        if args.file:
            draft = OutlineDraft.model_validate(load_outline_file(args.file))
        else:
            if not args.title:
                parser.error("--title is required with --from-text")
            draft = draft_from_text(args.from_text, args.title, args.description, settings)
            if draft is None:
                logger.error("Generator returned no usable sections")
                return 1
    except (OSError, ValueError, genai_errors.APIError) as e:
        logger.error(f"Failed to build outline: {e}")
        return 1

    total = sum(s.duration for s in draft.sections)
    logger.info(f"Outline '{draft.title}': {len(draft.sections)} sections, {total} min")

    if args.dry_run:
        print(yaml.safe_dump(draft.model_dump(), allow_unicode=True, sort_keys=False))
        return 0

    try:
        store = SQLiteOutlineStore(args.db or settings.db_path, timeout=settings.store_timeout)
        outline = store.create(draft)
    except OutlineError as e:
        logger.error(f"Failed to save outline: {e}")
        return 1

    logger.info(f"Saved outline {outline.id} to {store.db_path}")
    logger.info(f"  Present it with: python scripts/present.py {outline.id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
