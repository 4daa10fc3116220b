"""
CompletionSynchronizer - The only writer of section completion and outline status.

Status transitions:
- draft/active -> active when a session opens (completed outlines stay completed)
- active -> completed when the last incomplete section is completed
- completed/active -> active when any section is undone (never back to draft)

Every mutation is persisted first and committed to the in-memory outline
only after the store acknowledges it. A failed write raises and leaves the
in-memory outline exactly as it was.
"""

import logging
from typing import Any, Callable

from pydantic import ValidationError as SchemaValidationError

from podium.errors import OutlineError, StoreUnavailableError, ValidationError
from podium.schemas import Outline, OutlineStatus, Section

from .presenter import PresentationSession
from .store import OutlineStore


logger = logging.getLogger(__name__)


class CompletionSynchronizer:
    """
    Apply completion/undo mutations to one section at a time and keep the
    store and the in-memory outline in step.

    No retries: store failures propagate to the caller.
    """

    def __init__(self, store: OutlineStore):
        """
        Initialize synchronizer.

        Args:
            store: OutlineStore used for every read and write
        """
        self.store = store

    def _call_store(self, operation: str, func: Callable[..., Outline], *args: Any) -> Outline:
        """
        Run a store call, normalizing unexpected failures to StoreUnavailableError.

        Schema validation errors are not storage failures and pass through.
        """
        try:
            return func(*args)
        except OutlineError as e:
            logger.warning(f"Store {operation} failed: {e}")
            raise
        except SchemaValidationError:
            raise
        except Exception as e:
            logger.warning(f"Store {operation} failed: {e}")
            raise StoreUnavailableError(f"Store {operation} failed: {e}") from e

    @staticmethod
    def _check_index(outline: Outline, index: int):
        if not 0 <= index < len(outline.sections):
            raise ValidationError(
                f"Section index {index} out of range for outline {outline.id} "
                f"({len(outline.sections)} sections)"
            )

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    def open_session(self, outline_id: str) -> PresentationSession:
        """
        Load an outline for delivery.

        Outlines that are not completed yet are moved to active before the
        session starts.

        Raises:
            NotFoundError: No outline with this id
            StoreUnavailableError: The fetch or the status update failed
        """
        outline = self._call_store("get", self.store.get, outline_id)

        if outline.status != OutlineStatus.COMPLETED:
            previous = outline.status
            outline = self._call_store(
                "update", self.store.update, outline_id, {"status": OutlineStatus.ACTIVE}
            )
            logger.info(f"Outline {outline_id}: {previous.value} -> {outline.status.value}")

        logger.info(f"Opened session for outline {outline_id} ({len(outline.sections)} sections)")
        return PresentationSession(outline, self)

    # -------------------------------------------------------------------------
    # Section mutations
    # -------------------------------------------------------------------------

    def complete_section(self, outline: Outline, index: int) -> Outline:
        """
        Mark one section completed.

        The outline becomes completed when this was the last incomplete
        section, otherwise it is active.
        """
        self._check_index(outline, index)

        sections = [s.model_copy() for s in outline.sections]
        sections[index] = sections[index].model_copy(update={"completed": True})
        all_completed = all(s.completed for s in sections)
        status = OutlineStatus.COMPLETED if all_completed else OutlineStatus.ACTIVE

        return self._persist_and_commit(outline, sections, status)

    def undo_section(self, outline: Outline, index: int) -> Outline:
        """Mark one section incomplete. The outline always becomes active."""
        self._check_index(outline, index)

        sections = [s.model_copy() for s in outline.sections]
        sections[index] = sections[index].model_copy(update={"completed": False})

        return self._persist_and_commit(outline, sections, OutlineStatus.ACTIVE)

    def _persist_and_commit(
        self,
        outline: Outline,
        sections: list[Section],
        status: OutlineStatus,
    ) -> Outline:
        previous = outline.status
        self._call_store(
            "update", self.store.update, outline.id, {"sections": sections, "status": status}
        )

        # Store acknowledged; reflect the identical values locally
        outline.sections = sections
        outline.status = status

        if previous != status:
            logger.info(f"Outline {outline.id}: {previous.value} -> {status.value}")
        return outline
