"""
OutlineStore - Create, read, update and list saved outlines.

Provides:
- OutlineStore: the interface the session engine consumes
- SQLiteOutlineStore: durable store in ~/.podium/outlines.db
- InMemoryOutlineStore: process-local store for tests and throwaway sessions

Records are validated through the Outline schema on the way in and out.
"""

import json
import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from podium.config import DEFAULT_DB_PATH, DEFAULT_STORE_TIMEOUT
from podium.errors import NotFoundError, StoreUnavailableError, ValidationError
from podium.schemas import Outline, OutlineDraft, OutlineStatus, compute_total_duration


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"title", "description", "sections", "status", "total_duration"})
SORT_KEYS = frozenset({"created_date", "updated_date", "title", "status"})
DEFAULT_SORT_KEY = "-created_date"


def parse_sort_key(sort_key: str) -> tuple[str, bool]:
    """
    Split a sort key into (field, descending).

    A leading "-" means descending, e.g. "-created_date".
    """
    descending = sort_key.startswith("-")
    field = sort_key[1:] if descending else sort_key
    if field not in SORT_KEYS:
        raise ValidationError(f"Unsupported sort key: {sort_key}")
    return field, descending


class OutlineStore(ABC):
    """
    Persistence interface for outlines.

    Implementations raise NotFoundError for unknown ids and
    StoreUnavailableError when the backing storage cannot be reached.
    """

    @abstractmethod
    def create(self, draft: OutlineDraft) -> Outline:
        """Save a new outline with status=draft and return it with its id."""

    @abstractmethod
    def get(self, outline_id: str) -> Outline:
        """Fetch an outline by id."""

    @abstractmethod
    def update(self, outline_id: str, fields: dict[str, Any]) -> Outline:
        """Merge the given fields into the stored outline and return the result."""

    # -------------------------------------------------------------------------
    # Shared helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _new_outline(draft: OutlineDraft) -> Outline:
        now = datetime.now()
        return Outline(
            id=uuid.uuid4().hex,
            title=draft.title,
            description=draft.description,
            sections=[s.model_copy() for s in draft.sections],
            total_duration=compute_total_duration(draft.sections),
            status=OutlineStatus.DRAFT,
            created_date=now,
            updated_date=now,
        )

    @staticmethod
    def _merge(current: Outline, fields: dict[str, Any]) -> Outline:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {sorted(unknown)}")

        data = current.model_dump(exclude={"all_completed"})
        for key, value in fields.items():
            if key == "sections":
                value = [
                    s.model_dump() if hasattr(s, "model_dump") else dict(s)
                    for s in value
                ]
            data[key] = value
        data["updated_date"] = datetime.now()
        return Outline.model_validate(data)

    @abstractmethod
    def list(self, sort_key: str = DEFAULT_SORT_KEY) -> list[Outline]:
        """List all outlines ordered by sort_key (prefix "-" for descending)."""


class SQLiteOutlineStore(OutlineStore):
    """
    Store outlines in a SQLite database.

    One row per outline; sections are kept as a JSON array. Each method
    opens its own connection with the configured timeout, so a locked
    database surfaces as StoreUnavailableError instead of hanging.
    """

    def __init__(self, db_path: Optional[Path] = None, timeout: float = DEFAULT_STORE_TIMEOUT):
        """
        Initialize the store.

        Args:
            db_path: Path to outlines.db (default: ~/.podium/outlines.db)
            timeout: Seconds to wait for a database lock before failing
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.timeout = timeout
        self._ensure_database()

    def _ensure_database(self):
        """Create database and tables if they don't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Cannot create store directory {self.db_path.parent}: {e}") from e

        conn = self._get_connection()
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS outlines (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    sections TEXT NOT NULL DEFAULT '[]',
                    total_duration INTEGER NOT NULL DEFAULT 0,
                    status TEXT NOT NULL DEFAULT 'draft',
                    created_date TEXT NOT NULL,
                    updated_date TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_outlines_created
                ON outlines(created_date);
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot initialize outline store: {e}") from e
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        try:
            conn = sqlite3.connect(str(self.db_path), timeout=self.timeout)
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot open outline store {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _row_to_outline(row: sqlite3.Row) -> Outline:
        return Outline(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            sections=json.loads(row["sections"] or "[]"),
            total_duration=row["total_duration"],
            status=OutlineStatus(row["status"]),
            created_date=datetime.fromisoformat(row["created_date"]),
            updated_date=datetime.fromisoformat(row["updated_date"]),
        )

    @staticmethod
    def _outline_params(outline: Outline) -> dict[str, Any]:
        return {
            "id": outline.id,
            "title": outline.title,
            "description": outline.description,
            "sections": json.dumps([s.model_dump() for s in outline.sections], ensure_ascii=False),
            "total_duration": outline.total_duration,
            "status": outline.status.value,
            "created_date": outline.created_date.isoformat(),
            "updated_date": outline.updated_date.isoformat(),
        }

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def create(self, draft: OutlineDraft) -> Outline:
        outline = self._new_outline(draft)
        conn = self._get_connection()
        try:
            conn.execute(
                """INSERT INTO outlines (id, title, description, sections,
                                         total_duration, status, created_date, updated_date)
                   VALUES (:id, :title, :description, :sections,
                           :total_duration, :status, :created_date, :updated_date)""",
                self._outline_params(outline)
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Failed to create outline: {e}") from e
        finally:
            conn.close()

        logger.info(f"Created outline {outline.id} ({len(outline.sections)} sections)")
        return outline

    def get(self, outline_id: str) -> Outline:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT * FROM outlines WHERE id = ?", (outline_id,)
            )
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Failed to read outline {outline_id}: {e}") from e
        finally:
            conn.close()

        if not row:
            raise NotFoundError(outline_id)
        return self._row_to_outline(row)

    def update(self, outline_id: str, fields: dict[str, Any]) -> Outline:
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM outlines WHERE id = ?", (outline_id,)
            ).fetchone()
            if not row:
                raise NotFoundError(outline_id)

            outline = self._merge(self._row_to_outline(row), fields)
            conn.execute(
                """UPDATE outlines SET
                     title = :title,
                     description = :description,
                     sections = :sections,
                     total_duration = :total_duration,
                     status = :status,
                     updated_date = :updated_date
                   WHERE id = :id""",
                self._outline_params(outline)
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Failed to update outline {outline_id}: {e}") from e
        finally:
            conn.close()

        logger.debug(f"Updated outline {outline_id}: {sorted(fields)}")
        return outline

    def list(self, sort_key: str = DEFAULT_SORT_KEY) -> list[Outline]:
        field, descending = parse_sort_key(sort_key)
        direction = "DESC" if descending else "ASC"
        conn = self._get_connection()
        try:
            # field is checked against SORT_KEYS above
            cursor = conn.execute(
                f"SELECT * FROM outlines ORDER BY {field} {direction}, rowid {direction}"
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Failed to list outlines: {e}") from e
        finally:
            conn.close()

        return [self._row_to_outline(row) for row in rows]


class InMemoryOutlineStore(OutlineStore):
    """
    Keep outlines in a process-local dict.

    Returned outlines are copies, so callers mutating them never change the
    stored record without going through update().
    """

    def __init__(self):
        self._records: dict[str, Outline] = {}
        self._order: dict[str, int] = {}

    def create(self, draft: OutlineDraft) -> Outline:
        outline = self._new_outline(draft)
        self._records[outline.id] = outline
        self._order[outline.id] = len(self._order)
        logger.info(f"Created outline {outline.id} ({len(outline.sections)} sections)")
        return outline.model_copy(deep=True)

    def get(self, outline_id: str) -> Outline:
        if outline_id not in self._records:
            raise NotFoundError(outline_id)
        return self._records[outline_id].model_copy(deep=True)

    def update(self, outline_id: str, fields: dict[str, Any]) -> Outline:
        if outline_id not in self._records:
            raise NotFoundError(outline_id)
        outline = self._merge(self._records[outline_id], fields)
        self._records[outline_id] = outline
        logger.debug(f"Updated outline {outline_id}: {sorted(fields)}")
        return outline.model_copy(deep=True)

    def list(self, sort_key: str = DEFAULT_SORT_KEY) -> list[Outline]:
        field, descending = parse_sort_key(sort_key)

        def sort_value(outline: Outline):
            value = getattr(outline, field)
            if isinstance(value, OutlineStatus):
                value = value.value
            return (value, self._order[outline.id])

        ordered = sorted(self._records.values(), key=sort_value, reverse=descending)
        return [outline.model_copy(deep=True) for outline in ordered]
