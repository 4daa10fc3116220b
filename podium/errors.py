"""
Error taxonomy for Podium.

Every failure the session engine surfaces derives from OutlineError so callers
can report them uniformly.
"""


class OutlineError(Exception):
    """Base class for outline and session failures."""


class NotFoundError(OutlineError, LookupError):
    """Referenced outline does not exist in the store."""

    def __init__(self, outline_id: str):
        super().__init__(f"Outline not found: {outline_id}")
        self.outline_id = outline_id


class ValidationError(OutlineError, ValueError):
    """Request is malformed (section index out of range, unknown field, ...)."""


class StoreUnavailableError(OutlineError):
    """Persistence call failed or timed out."""
