"""
Outline schemas for Podium.

Defines Pydantic models for presentation outlines:
- Sections (timed, completable units of content)
- Outline drafts handed to the store at authoring time
- Stored outlines with lifecycle status
- Sections proposed by the text-to-outline generator
"""

from pydantic import BaseModel, Field, computed_field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum


DEFAULT_SECTION_DURATION = 5  # minutes


def blank_if_none(v: Optional[str]) -> str:
    """Missing free text (e.g. a bare YAML key) is stored as an empty string."""
    return "" if v is None else v


class OutlineStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class Section(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = ""
    duration: int = Field(default=DEFAULT_SECTION_DURATION, gt=0)  # minutes
    completed: bool = False

    @field_validator('content', mode='before')
    @classmethod
    def content_optional(cls, v):
        return blank_if_none(v)


class GeneratedSection(BaseModel):
    """Candidate section returned by the text-to-outline generator."""
    title: str = Field(..., min_length=1)
    content: str = ""

    @field_validator('content', mode='before')
    @classmethod
    def content_optional(cls, v):
        return blank_if_none(v)

    def to_section(self) -> Section:
        """Generated sections start at the default duration, not completed."""
        return Section(
            title=self.title,
            content=self.content,
            duration=DEFAULT_SECTION_DURATION,
            completed=False,
        )


def compute_total_duration(sections: list[Section]) -> int:
    """Sum of section durations in minutes."""
    return sum(section.duration for section in sections)


# -----------------------------------------------------------------------------
# Outline schemas
# -----------------------------------------------------------------------------

class OutlineDraft(BaseModel):
    """Authored outline that has not been saved yet."""
    title: str = Field(..., min_length=1)
    description: str = ""
    sections: list[Section] = Field(..., min_length=1)


class Outline(BaseModel):
    """
    Saved outline.

    total_duration is a snapshot taken when the store creates the record;
    it is not recomputed when sections change afterwards.
    """
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = ""
    sections: list[Section] = []
    total_duration: int = Field(default=0, ge=0)
    status: OutlineStatus = OutlineStatus.DRAFT
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None

    @computed_field
    @property
    def all_completed(self) -> bool:
        """True when there is at least one section and every one is completed."""
        return bool(self.sections) and all(s.completed for s in self.sections)

    def derived_status(self) -> OutlineStatus:
        """Status implied by section completion once a session has started."""
        return OutlineStatus.COMPLETED if self.all_completed else OutlineStatus.ACTIVE
